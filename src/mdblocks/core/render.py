"""Render blocks back to the markdown subset the transpiler reads"""

from typing import Iterable

from mdblocks.core.classify import FENCE
from mdblocks.core.models import PLAIN_TEXT, Block, BlockKind


def _render_lines(block: Block) -> list[str]:
    """Return the markdown source lines for a single block."""
    kind = block.kind
    if kind == BlockKind.paragraph:
        return [block.text]
    if kind == BlockKind.heading:
        return [f"{'#' * block.level} {block.text}"]
    if kind == BlockKind.bulleted:
        return [f"- {block.text}"]
    if kind == BlockKind.numbered:
        return [f"1. {block.text}"]
    if kind == BlockKind.todo:
        return [f"- [{'x' if block.checked else ' '}] {block.text}"]
    if kind == BlockKind.quote:
        return [f"> {block.text}"]
    if kind == BlockKind.divider:
        return ["---"]
    if kind == BlockKind.code:
        opening = FENCE if block.language == PLAIN_TEXT else f"{FENCE}{block.language}"
        return [opening, *block.lines, FENCE]
    if kind == BlockKind.image:
        return [f"![{block.caption or ''}]({block.url})"]
    raise ValueError(f"Unknown block kind: {kind!r}")


def render_markdown(blocks: Iterable[Block]) -> str:
    """Render blocks as markdown, one newline-terminated line per block (code blocks span several)."""
    return "".join(f"{line}\n" for block in blocks for line in _render_lines(block))


def render_document(title: str, blocks: Iterable[Block]) -> str:
    """Render a titled document: an H1 title, a blank line, then the blocks."""
    return f"# {title}\n\n{render_markdown(blocks)}"
