"""Content store interface: the system of record holding documents and their blocks"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from mdblocks.core.models import Block, DocumentSummary


class ContentStore(ABC):
    """Documents hold an ordered list of blocks.

    Blocks can be listed, deleted one at a time, or appended in a batch at the
    tail; there is no positional insert. Unknown ids raise
    DocumentNotFoundError / BlockNotFoundError.
    """

    @abstractmethod
    def create_document(self, title: str, parent_id: str | None = None) -> str:
        """Create an empty document and return its id."""
        raise NotImplementedError

    @abstractmethod
    def get_title(self, doc_id: str) -> str:
        raise NotImplementedError

    @abstractmethod
    def list_documents(self) -> list[DocumentSummary]:
        raise NotImplementedError

    @abstractmethod
    def search(self, query: str, limit: int = 10) -> list[DocumentSummary]:
        """Return up to limit documents whose title contains query (case-insensitive)."""
        raise NotImplementedError

    @abstractmethod
    def list_blocks(self, doc_id: str) -> list[Block]:
        """Return the document's blocks in order, each carrying its id."""
        raise NotImplementedError

    @abstractmethod
    def delete_block(self, doc_id: str, block_id: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def append_blocks(self, doc_id: str, blocks: Sequence[Block]) -> list[Block]:
        """Append blocks at the tail under fresh ids (input ids are ignored). Returns the stored blocks."""
        raise NotImplementedError
