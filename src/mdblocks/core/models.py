"""Block data model: a closed set of typed content blocks"""

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


PLAIN_TEXT = "plain text"       # language marker for fences with no language token


class BlockKind(str, Enum):
    """Restrict blocks to a predefined set of content elements"""
    paragraph = "paragraph"
    heading = "heading"
    bulleted = "bulleted"
    numbered = "numbered"
    todo = "todo"
    quote = "quote"
    divider = "divider"
    code = "code"
    image = "image"


class _Block(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")
    id: Optional[str] = None        # store identity; None until persisted


class ParagraphBlock(_Block):
    kind: Literal["paragraph"] = "paragraph"
    text: str = ""


class HeadingBlock(_Block):
    kind: Literal["heading"] = "heading"
    text: str
    level: int = Field(default=1, ge=1, le=3)


class BulletedBlock(_Block):
    kind: Literal["bulleted"] = "bulleted"
    text: str


class NumberedBlock(_Block):
    kind: Literal["numbered"] = "numbered"
    text: str


class TodoBlock(_Block):
    kind: Literal["todo"] = "todo"
    text: str
    checked: bool = False


class QuoteBlock(_Block):
    kind: Literal["quote"] = "quote"
    text: str


class DividerBlock(_Block):
    kind: Literal["divider"] = "divider"


class CodeBlock(_Block):
    """Verbatim source lines between two fence markers."""
    kind: Literal["code"] = "code"
    language: str = PLAIN_TEXT
    lines: list[str] = Field(default_factory=list)


class ImageBlock(_Block):
    kind: Literal["image"] = "image"
    url: str
    caption: Optional[str] = None


Block = Annotated[
    Union[
        ParagraphBlock, HeadingBlock, BulletedBlock, NumberedBlock, TodoBlock,
        QuoteBlock, DividerBlock, CodeBlock, ImageBlock,
    ],
    Field(discriminator="kind"),
]

BlockList = TypeAdapter(list[Block])


class DocumentSummary(BaseModel):
    """A stored document as returned by list and search operations."""
    id: str
    title: str
    parent_id: Optional[str] = None
