"""Database table definitions for documents and their content blocks"""

from datetime import datetime
from typing import Any, Optional
from uuid import uuid4

from sqlalchemy import Column, DateTime, JSON, Text, String
from sqlmodel import Field, SQLModel


def _new_id() -> str:
    return str(uuid4())


class DocumentRow(SQLModel, table=True):
    """A document: a titled, ordered container of blocks"""
    __tablename__ = "documents"
    id: str = Field(default_factory=_new_id, primary_key=True)
    title: str = Field(..., sa_column=Column(Text, nullable=False))
    parent_id: Optional[str] = Field(default=None, foreign_key="documents.id", index=True)
    created_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
    updated_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))


class BlockRow(SQLModel, table=True):
    """A single block in native form; position orders blocks within a document"""
    __tablename__ = "blocks"
    id: str = Field(default_factory=_new_id, primary_key=True)
    document_id: str = Field(..., foreign_key="documents.id", index=True, nullable=False)
    position: int = Field(..., nullable=False, description="Position of the block within the document")
    type: str = Field(..., sa_column=Column(String(32), nullable=False))
    data: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    created_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
