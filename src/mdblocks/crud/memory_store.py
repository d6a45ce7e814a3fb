from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence
from uuid import uuid4

from mdblocks.core.errors import BlockNotFoundError, DocumentNotFoundError
from mdblocks.core.models import Block, DocumentSummary
from mdblocks.crud.store import ContentStore


@dataclass
class _Doc:
    id: str
    title: str
    parent_id: str | None = None
    blocks: list[Block] = field(default_factory=list)


@dataclass
class MemoryStore(ContentStore):
    _docs: dict[str, _Doc] = field(default_factory=dict)

    def _get(self, doc_id: str) -> _Doc:
        doc = self._docs.get(doc_id)
        if doc is None:
            raise DocumentNotFoundError(doc_id)
        return doc

    def _summary(self, doc: _Doc) -> DocumentSummary:
        return DocumentSummary(id=doc.id, title=doc.title, parent_id=doc.parent_id)

    def create_document(self, title: str, parent_id: str | None = None) -> str:
        if parent_id is not None:
            self._get(parent_id)
        doc = _Doc(id=str(uuid4()), title=title, parent_id=parent_id)
        self._docs[doc.id] = doc
        return doc.id

    def get_title(self, doc_id: str) -> str:
        return self._get(doc_id).title

    def list_documents(self) -> list[DocumentSummary]:
        return [self._summary(d) for d in self._docs.values()]

    def search(self, query: str, limit: int = 10) -> list[DocumentSummary]:
        q = query.lower()
        return [self._summary(d) for d in self._docs.values() if q in d.title.lower()][:limit]

    def list_blocks(self, doc_id: str) -> list[Block]:
        return list(self._get(doc_id).blocks)

    def delete_block(self, doc_id: str, block_id: str) -> None:
        doc = self._get(doc_id)
        for i, block in enumerate(doc.blocks):
            if block.id == block_id:
                del doc.blocks[i]
                return
        raise BlockNotFoundError(doc_id, block_id)

    def append_blocks(self, doc_id: str, blocks: Sequence[Block]) -> list[Block]:
        doc = self._get(doc_id)
        stored = [b.model_copy(update={"id": str(uuid4())}) for b in blocks]
        doc.blocks.extend(stored)
        return stored
