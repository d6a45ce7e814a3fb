"""Unit tests for crud/sql_store.py"""

import pytest
from sqlmodel import select

from mdblocks.core.errors import BlockNotFoundError, DocumentNotFoundError
from mdblocks.core.models import CodeBlock, DividerBlock, HeadingBlock, ImageBlock, ParagraphBlock, TodoBlock
from mdblocks.core.native import to_native
from mdblocks.crud.models import BlockRow, DocumentRow


BLOCKS = [
    HeadingBlock(text="Title", level=2),
    TodoBlock(text="task", checked=True),
    CodeBlock(language="sql", lines=["select 1;", "  -- done"]),
    ImageBlock(url="https://x/a.png", caption="A"),
    DividerBlock(),
]


def _without_ids(blocks):
    return [b.model_copy(update={"id": None}) for b in blocks]


# --- documents ---

def test_create_document(sql_store, session):
    """create_document persists a row and returns its id."""
    doc_id = sql_store.create_document("Notes")
    row = session.get(DocumentRow, doc_id)
    assert row.title == "Notes"
    assert sql_store.get_title(doc_id) == "Notes"


def test_create_document_with_parent(sql_store):
    parent = sql_store.create_document("Parent")
    child = sql_store.create_document("Child", parent_id=parent)
    summaries = {d.id: d for d in sql_store.list_documents()}
    assert summaries[child].parent_id == parent


def test_create_document_unknown_parent(sql_store):
    with pytest.raises(DocumentNotFoundError):
        sql_store.create_document("Orphan", parent_id="missing")


def test_get_title_unknown(sql_store):
    with pytest.raises(DocumentNotFoundError):
        sql_store.get_title("missing")


def test_search_case_insensitive(sql_store):
    """search matches title substrings regardless of case."""
    sql_store.create_document("Meeting Notes")
    sql_store.create_document("Shopping list")
    sql_store.create_document("notes to self")
    titles = sorted(d.title for d in sql_store.search("NOTES"))
    assert titles == ["Meeting Notes", "notes to self"]


def test_search_limit(sql_store):
    for i in range(5):
        sql_store.create_document(f"Doc {i}")
    assert len(sql_store.search("doc", limit=3)) == 3


def test_search_escapes_wildcards(sql_store):
    """LIKE wildcards in the query are matched literally."""
    sql_store.create_document("100% done")
    sql_store.create_document("1000 items")
    assert [d.title for d in sql_store.search("100%")] == ["100% done"]


# --- blocks ---

def test_append_and_list_blocks(sql_store):
    """Appended blocks come back in order with their content intact."""
    doc_id = sql_store.create_document("Doc")
    stored = sql_store.append_blocks(doc_id, BLOCKS)
    listed = sql_store.list_blocks(doc_id)
    assert listed == stored
    assert _without_ids(listed) == BLOCKS
    assert all(b.id for b in listed)


def test_append_assigns_fresh_ids(sql_store):
    """Ids on the input blocks are ignored."""
    doc_id = sql_store.create_document("Doc")
    stored = sql_store.append_blocks(doc_id, [ParagraphBlock(id="old", text="x")])
    assert stored[0].id != "old"


def test_append_goes_to_tail(sql_store):
    doc_id = sql_store.create_document("Doc")
    sql_store.append_blocks(doc_id, [ParagraphBlock(text="a")])
    sql_store.append_blocks(doc_id, [ParagraphBlock(text="b"), ParagraphBlock(text="c")])
    assert [b.text for b in sql_store.list_blocks(doc_id)] == ["a", "b", "c"]


def test_blocks_stored_in_native_form(sql_store, session):
    """Rows hold the native block dictionary and its type name."""
    doc_id = sql_store.create_document("Doc")
    sql_store.append_blocks(doc_id, [TodoBlock(text="t")])
    row = session.exec(select(BlockRow).where(BlockRow.document_id == doc_id)).one()
    assert row.type == "to_do"
    assert row.data == to_native(TodoBlock(text="t"))


def test_delete_block(sql_store):
    doc_id = sql_store.create_document("Doc")
    a, b = sql_store.append_blocks(doc_id, [ParagraphBlock(text="a"), ParagraphBlock(text="b")])
    sql_store.delete_block(doc_id, a.id)
    assert sql_store.list_blocks(doc_id) == [b]


def test_delete_block_wrong_document(sql_store):
    """A block can only be deleted through the document that owns it."""
    first = sql_store.create_document("First")
    second = sql_store.create_document("Second")
    (block,) = sql_store.append_blocks(first, [ParagraphBlock(text="a")])
    with pytest.raises(BlockNotFoundError):
        sql_store.delete_block(second, block.id)


def test_list_blocks_skips_unsupported(sql_store, session):
    """Rows of types outside the block model are not surfaced."""
    doc_id = sql_store.create_document("Doc")
    session.add(BlockRow(document_id=doc_id, position=0, type="child_page",
                         data={"type": "child_page", "child_page": {"title": "Sub"}}))
    session.flush()
    sql_store.append_blocks(doc_id, [ParagraphBlock(text="kept")])
    assert [b.text for b in sql_store.list_blocks(doc_id)] == ["kept"]


def test_list_blocks_unknown_document(sql_store):
    with pytest.raises(DocumentNotFoundError):
        sql_store.list_blocks("missing")
