"""Conversion between blocks and the content store's native block dictionaries

Native blocks follow the Notion API shape:
    {"object": "block", "type": "to_do", "to_do": {"rich_text": [...], "checked": false}}
"""

import logging
from typing import Any, Iterable

from mdblocks.core.errors import UnsupportedBlockError
from mdblocks.core.models import (
    PLAIN_TEXT, Block, BlockKind, BulletedBlock, CodeBlock, DividerBlock,
    HeadingBlock, ImageBlock, NumberedBlock, ParagraphBlock, QuoteBlock, TodoBlock,
)


log = logging.getLogger(__name__)

MAX_TEXT_LENGTH = 2000          # per rich_text segment

TEXT_TYPES: dict[str, type] = {
    "paragraph":          ParagraphBlock,
    "bulleted_list_item": BulletedBlock,
    "numbered_list_item": NumberedBlock,
    "quote":              QuoteBlock,
}
NATIVE_TYPES: dict[BlockKind, str] = {
    BlockKind.paragraph: "paragraph",
    BlockKind.bulleted:  "bulleted_list_item",
    BlockKind.numbered:  "numbered_list_item",
    BlockKind.quote:     "quote",
}


def _segment(content: str) -> dict[str, Any]:
    return {"type": "text", "text": {"content": content}}


def _chunks(text: str) -> list[str]:
    return [text[i:i + MAX_TEXT_LENGTH] for i in range(0, len(text), MAX_TEXT_LENGTH)]


def rich_text(text: str) -> list[dict[str, Any]]:
    """Split text into rich_text segments of at most MAX_TEXT_LENGTH characters."""
    return [_segment(c) for c in _chunks(text)]


def _code_rich_text(lines: list[str]) -> list[dict[str, Any]]:
    """One segment per source line, newline-joined; over-long lines are split further."""
    segments = []
    for i, line in enumerate(lines):
        content = line if i == len(lines) - 1 else line + "\n"
        segments.extend(_segment(c) for c in (_chunks(content) or [""]))
    return segments


def plain_text(segments: Iterable[dict[str, Any]]) -> str:
    """Concatenate rich_text segments, preferring plain_text as returned by the store."""
    parts = []
    for seg in segments:
        if "plain_text" in seg:
            parts.append(seg["plain_text"])
        else:
            parts.append(seg.get("text", {}).get("content", ""))
    return "".join(parts)


def _payload(block: Block) -> tuple[str, dict[str, Any]]:
    kind = BlockKind(block.kind)
    if kind in NATIVE_TYPES:
        return NATIVE_TYPES[kind], {"rich_text": rich_text(block.text)}
    if kind == BlockKind.heading:
        return f"heading_{block.level}", {"rich_text": rich_text(block.text)}
    if kind == BlockKind.todo:
        return "to_do", {"rich_text": rich_text(block.text), "checked": block.checked}
    if kind == BlockKind.divider:
        return "divider", {}
    if kind == BlockKind.code:
        return "code", {"rich_text": _code_rich_text(block.lines), "language": block.language}
    if kind == BlockKind.image:
        payload = {"type": "external", "external": {"url": block.url}}
        if block.caption:
            payload["caption"] = rich_text(block.caption)
        return "image", payload
    raise ValueError(f"Unknown block kind: {kind!r}")


def to_native(block: Block) -> dict[str, Any]:
    """Serialize a block to its native dictionary. The identity is not included."""
    native_type, payload = _payload(block)
    return {"object": "block", "type": native_type, native_type: payload}


def from_native(data: dict[str, Any]) -> Block:
    """Build a block from a native dictionary, keeping its store id.

    Raises UnsupportedBlockError for types outside the block model
    (child pages, databases, tables, ...).
    """
    native_type = data.get("type")
    payload = data.get(native_type) or {}
    block_id = data.get("id")
    text = plain_text(payload.get("rich_text", []))

    if native_type in TEXT_TYPES:
        return TEXT_TYPES[native_type](id=block_id, text=text)
    if native_type in ("heading_1", "heading_2", "heading_3"):
        return HeadingBlock(id=block_id, text=text, level=int(native_type[-1]))
    if native_type == "to_do":
        return TodoBlock(id=block_id, text=text, checked=bool(payload.get("checked", False)))
    if native_type == "divider":
        return DividerBlock(id=block_id)
    if native_type == "code":
        lines = text.split("\n") if payload.get("rich_text") else []
        return CodeBlock(id=block_id, language=payload.get("language") or PLAIN_TEXT, lines=lines)
    if native_type == "image":
        source = payload.get("type", "external")
        url = (payload.get(source) or {}).get("url", "")
        caption = plain_text(payload.get("caption", [])) or None
        return ImageBlock(id=block_id, url=url, caption=caption)
    raise UnsupportedBlockError(f"Unsupported native block type: {native_type!r}")


def from_native_list(items: Iterable[dict[str, Any]]) -> list[Block]:
    """Convert native blocks in order, skipping unsupported types."""
    blocks = []
    for item in items:
        try:
            blocks.append(from_native(item))
        except UnsupportedBlockError as e:
            log.debug("Skipping block %s: %s", item.get("id"), e)
    return blocks
