"""Markdown-to-block transpiler shared by every write path"""

import re
from typing import Iterable, Iterator

from mdblocks.core.classify import OUTSIDE, classify, flush
from mdblocks.core.models import Block, HeadingBlock, ImageBlock, ParagraphBlock, TodoBlock


CONTENT_TYPES = ("paragraph", "task", "todo", "heading", "image")

NEWLINE_RE = re.compile(r"\r?\n")


def split_lines(text: str) -> list[str]:
    """Split on LF or CRLF only; a final newline ends the last line instead of starting one."""
    lines = NEWLINE_RE.split(text)
    if lines[-1] == "":
        lines.pop()
    return lines


def iter_blocks(lines: Iterable[str]) -> Iterator[Block]:
    """Yield blocks for lines in order, closing an unterminated fence at the end."""
    state = OUTSIDE
    for line in lines:
        block, state = classify(line, state)
        if block is not None:
            yield block
    tail = flush(state)
    if tail is not None:
        yield tail


def transpile(text: str) -> list[Block]:
    """Convert a markdown document into an ordered list of blocks. Never fails."""
    return list(iter_blocks(split_lines(text)))


def _typed_block(line: str, content_type: str) -> Block:
    if content_type in ("task", "todo"):
        return TodoBlock(text=line, checked=False)
    if content_type == "heading":
        return HeadingBlock(text=line, level=1)
    if content_type == "image":
        return ImageBlock(url=line.strip())
    return ParagraphBlock(text=line)


def transpile_as(text: str, content_type: str) -> list[Block]:
    """Make one block of content_type per non-blank line, bypassing the markdown grammar.

    Raises ValueError for a content_type outside CONTENT_TYPES.
    """
    if content_type not in CONTENT_TYPES:
        raise ValueError(f"Unknown content type {content_type!r}; expected one of {', '.join(CONTENT_TYPES)}")
    return [_typed_block(line, content_type) for line in split_lines(text) if line.strip()]
