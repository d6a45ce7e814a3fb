"""Pipeline step functions: create, update, and read documents in a content store"""

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, Optional, Sequence

from mdblocks.core.errors import ContentLossError
from mdblocks.core.models import Block
from mdblocks.core.reconcile import Plan, Policy, Position, reconcile
from mdblocks.core.render import render_document
from mdblocks.core.transpile import transpile, transpile_as
from mdblocks.crud.store import ContentStore


log = logging.getLogger(__name__)

MAX_BATCH_SIZE = 100            # children per append request accepted by the store

_locks: dict[str, "_DocumentLock"] = {}       # only documents being updated or waited on
_locks_guard = threading.Lock()


@dataclass
class CreateResult:
    doc_id: str
    blocks: list[Block] = field(default_factory=list)


@dataclass
class UpdateResult:
    doc_id: str
    policy: Policy
    deleted: int = 0
    blocks: list[Block] = field(default_factory=list)   # appended blocks, as stored


@dataclass
class _DocumentLock:
    lock: threading.Lock = field(default_factory=threading.Lock)
    users: int = 0


@contextmanager
def document_lock(doc_id: str) -> Iterator[None]:
    """Serialize updates to the same document within this process.

    The entry for doc_id is dropped when its last holder or waiter leaves.
    """
    with _locks_guard:
        entry = _locks.setdefault(doc_id, _DocumentLock())
        entry.users += 1
    try:
        with entry.lock:
            yield
    finally:
        with _locks_guard:
            entry.users -= 1
            if not entry.users:
                del _locks[doc_id]


def _strip_ids(blocks: Sequence[Block]) -> list[Block]:
    return [b.model_copy(update={"id": None}) for b in blocks]


def _append(store: ContentStore, doc_id: str, blocks: Sequence[Block], batch_size: int) -> list[Block]:
    """Append blocks in batches of batch_size, returning the stored blocks in order."""
    stored: list[Block] = []
    for i in range(0, len(blocks), batch_size):
        stored.extend(store.append_blocks(doc_id, blocks[i:i + batch_size]))
    return stored


def _restore(store: ContentStore, doc_id: str, original: Sequence[Block], batch_size: int) -> bool:
    """Put the document back to its original block sequence. Returns False if that fails too."""
    log.warning("Restoring %d original block(s) to document %s", len(original), doc_id)
    try:
        for block in store.list_blocks(doc_id):
            store.delete_block(doc_id, block.id)
        _append(store, doc_id, _strip_ids(original), batch_size)
    except Exception:
        log.exception("Could not restore document %s", doc_id)
        return False
    return True


def execute_plan(
    store: ContentStore,
    doc_id: str,
    plan: Plan,
    original: Sequence[Block],
    batch_size: int = MAX_BATCH_SIZE,
    ) -> list[Block]:
    """Delete then append as one logical unit. Returns the appended blocks as stored.

    Store faults before any block was deleted propagate unchanged. A fault after
    deletions triggers a restore of original and raises ContentLossError chained
    to the fault, with compensated telling whether the restore succeeded.
    """
    deleted = 0
    try:
        for block in plan.to_delete:
            store.delete_block(doc_id, block.id)
            deleted += 1
        if deleted:
            log.info("Deleted %d block(s) from document %s", deleted, doc_id)
        return _append(store, doc_id, _strip_ids(plan.to_append), batch_size)
    except Exception as e:
        if not deleted:
            raise
        compensated = _restore(store, doc_id, original, batch_size)
        raise ContentLossError(doc_id, compensated=compensated, deleted=deleted) from e


def run_create(
    store: ContentStore,
    title: str,
    markdown: str,
    parent_id: Optional[str] = None,
    batch_size: int = MAX_BATCH_SIZE,
    ) -> CreateResult:
    """Create a document and fill it with the transpiled markdown."""
    blocks = transpile(markdown)
    doc_id = store.create_document(title, parent_id)
    log.info("Created document %s with %d block(s)", doc_id, len(blocks))
    return CreateResult(doc_id=doc_id, blocks=_append(store, doc_id, blocks, batch_size))


def run_update(
    store: ContentStore,
    doc_id: str,
    markdown: str,
    policy: Policy | str = Policy.replace,
    position: Optional[Position | str] = Position.end,
    batch_size: int = MAX_BATCH_SIZE,
    content_type: Optional[str] = None,
    ) -> UpdateResult:
    """Transpile markdown and reconcile it into an existing document.

    content_type switches from the markdown grammar to one block of that type
    per non-blank line (see transpile_as).
    """
    new = transpile_as(markdown, content_type) if content_type else transpile(markdown)
    with document_lock(doc_id):
        existing = store.list_blocks(doc_id)
        plan = reconcile(existing, new, policy, position)
        log.info(
            "Updating document %s (%s): delete %d, append %d",
            doc_id, Policy(policy).value, len(plan.to_delete), len(plan.to_append),
        )
        stored = execute_plan(store, doc_id, plan, existing, batch_size)
    return UpdateResult(doc_id=doc_id, policy=Policy(policy), deleted=len(plan.to_delete), blocks=stored)


def run_read(store: ContentStore, doc_id: str) -> str:
    """Render a stored document as markdown with its title as an H1."""
    return render_document(store.get_title(doc_id), store.list_blocks(doc_id))
