"""Line classification and the code-fence state machine

Each line is matched against a fixed list of prefixes on its stripped form,
first match wins. The only state carried between lines is whether a code
fence is open: Outside, or InsideFence holding the block being built.
"""

import re
from dataclasses import dataclass
from typing import Optional, Union

from mdblocks.core.models import (
    PLAIN_TEXT, Block, BulletedBlock, CodeBlock, DividerBlock, HeadingBlock,
    ImageBlock, ParagraphBlock, QuoteBlock, TodoBlock,
)


FENCE = "```"
IMAGE_RE = re.compile(r"!\[([^\]]*)\]\(([^)\s]+)\)")

HEADING_PREFIXES = (("### ", 3), ("## ", 2), ("# ", 1))    # longest first
TODO_PREFIXES = (("- [ ] ", False), ("- [x] ", True), ("- [X] ", True))


@dataclass(frozen=True)
class Outside:
    """No fence open."""


@dataclass(frozen=True)
class InsideFence:
    """An open fence; each line yields a new state with the line added."""
    language: str = PLAIN_TEXT
    lines: tuple[str, ...] = ()

    def close(self) -> CodeBlock:
        return CodeBlock(language=self.language, lines=list(self.lines))


FenceState = Union[Outside, InsideFence]

OUTSIDE = Outside()


def _fence_language(stripped: str) -> str:
    """Return the first token after the fence marker, or the plain-text marker."""
    tokens = stripped[len(FENCE):].split()
    return tokens[0] if tokens else PLAIN_TEXT


def _classify_outside(line: str, stripped: str) -> Block:
    if not stripped:
        return ParagraphBlock(text="")

    for prefix, level in HEADING_PREFIXES:
        if stripped.startswith(prefix):
            return HeadingBlock(text=stripped[len(prefix):], level=level)

    # Checklist items also start with "- " so they must be tried first.
    for prefix, checked in TODO_PREFIXES:
        if stripped.startswith(prefix):
            return TodoBlock(text=stripped[len(prefix):], checked=checked)

    if stripped.startswith("- "):
        return BulletedBlock(text=stripped[2:])
    if stripped.startswith("> "):
        return QuoteBlock(text=stripped[2:])
    if stripped.startswith("---"):
        return DividerBlock()

    m = IMAGE_RE.fullmatch(stripped)
    if m:
        return ImageBlock(url=m.group(2), caption=m.group(1) or None)

    return ParagraphBlock(text=line)


def classify(line: str, state: FenceState = OUTSIDE) -> tuple[Optional[Block], FenceState]:
    """Classify one line given the current fence state.

    Returns (block, new_state). block is None while a fence is opening or
    accumulating; the closing fence line emits the finished CodeBlock.
    """
    stripped = line.strip()

    if stripped.startswith(FENCE):
        if isinstance(state, InsideFence):
            return state.close(), OUTSIDE
        return None, InsideFence(language=_fence_language(stripped))

    if isinstance(state, InsideFence):
        return None, InsideFence(language=state.language, lines=(*state.lines, line))

    return _classify_outside(line, stripped), state


def flush(state: FenceState) -> Optional[CodeBlock]:
    """Close a fence left open at end of input; None when Outside."""
    if isinstance(state, InsideFence):
        return state.close()
    return None
