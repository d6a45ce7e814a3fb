"""SQL-backed content store: blocks persisted in native form"""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from sqlalchemy import func
from sqlmodel import Session, select

from mdblocks.core.errors import BlockNotFoundError, DocumentNotFoundError
from mdblocks.core.models import Block, DocumentSummary
from mdblocks.core.native import from_native, from_native_list, to_native
from mdblocks.crud.models import BlockRow, DocumentRow
from mdblocks.crud.store import ContentStore


def _summary(row: DocumentRow) -> DocumentSummary:
    return DocumentSummary(id=row.id, title=row.title, parent_id=row.parent_id)


class SQLStore(ContentStore):
    """ContentStore over an open sqlmodel Session.

    Flushes but does not commit; the caller controls the transaction.
    """

    def __init__(self, session: Session):
        self.session = session

    def _doc(self, doc_id: str) -> DocumentRow:
        row = self.session.get(DocumentRow, doc_id)
        if row is None:
            raise DocumentNotFoundError(doc_id)
        return row

    def _touch(self, doc: DocumentRow) -> None:
        doc.updated_at = datetime.now()
        self.session.add(doc)

    def create_document(self, title: str, parent_id: str | None = None) -> str:
        if parent_id is not None:
            self._doc(parent_id)
        row = DocumentRow(title=title, parent_id=parent_id)
        self.session.add(row)
        self.session.flush()
        return row.id

    def get_title(self, doc_id: str) -> str:
        return self._doc(doc_id).title

    def list_documents(self) -> list[DocumentSummary]:
        rows = self.session.exec(select(DocumentRow).order_by(DocumentRow.created_at)).all()
        return [_summary(r) for r in rows]

    def search(self, query: str, limit: int = 10) -> list[DocumentSummary]:
        rows = self.session.exec(
            select(DocumentRow)
            .where(func.lower(DocumentRow.title).contains(query.lower(), autoescape=True))
            .order_by(DocumentRow.updated_at.desc())
            .limit(limit)
        ).all()
        return [_summary(r) for r in rows]

    def list_blocks(self, doc_id: str) -> list[Block]:
        self._doc(doc_id)
        rows = self.session.exec(
            select(BlockRow)
            .where(BlockRow.document_id == doc_id)
            .order_by(BlockRow.position.asc())
        ).all()
        return from_native_list({**r.data, "id": r.id} for r in rows)

    def delete_block(self, doc_id: str, block_id: str) -> None:
        doc = self._doc(doc_id)
        row = self.session.get(BlockRow, block_id)
        if row is None or row.document_id != doc_id:
            raise BlockNotFoundError(doc_id, block_id)
        self.session.delete(row)
        self._touch(doc)
        self.session.flush()

    def append_blocks(self, doc_id: str, blocks: Sequence[Block]) -> list[Block]:
        doc = self._doc(doc_id)
        last = self.session.exec(
            select(func.max(BlockRow.position)).where(BlockRow.document_id == doc_id)
        ).one()
        position = -1 if last is None else last

        stored = []
        for block in blocks:
            position += 1
            native = to_native(block)
            row = BlockRow(document_id=doc_id, position=position, type=native["type"], data=native)
            self.session.add(row)
            stored.append(from_native({**native, "id": row.id}))
        self._touch(doc)
        self.session.flush()
        return stored
