"""Unit tests for core/render.py"""

import pytest

from mdblocks.core.models import (
    BulletedBlock, CodeBlock, DividerBlock, HeadingBlock, ImageBlock, NumberedBlock,
    ParagraphBlock, QuoteBlock, TodoBlock,
)
from mdblocks.core.render import render_document, render_markdown
from mdblocks.core.transpile import transpile


@pytest.mark.parametrize("block,expected", [
    (ParagraphBlock(text="hello"),               "hello\n"),
    (ParagraphBlock(text=""),                    "\n"),
    (HeadingBlock(text="T", level=2),            "## T\n"),
    (BulletedBlock(text="b"),                    "- b\n"),
    (NumberedBlock(text="n"),                    "1. n\n"),
    (TodoBlock(text="t", checked=False),         "- [ ] t\n"),
    (TodoBlock(text="t", checked=True),          "- [x] t\n"),
    (QuoteBlock(text="q"),                       "> q\n"),
    (DividerBlock(),                             "---\n"),
    (CodeBlock(language="py", lines=["x = 1"]),  "```py\nx = 1\n```\n"),
    (CodeBlock(lines=["a", "b"]),                "```\na\nb\n```\n"),
    (ImageBlock(url="u", caption="c"),           "![c](u)\n"),
    (ImageBlock(url="u"),                        "![](u)\n"),
])
def test_render_block(block, expected):
    assert render_markdown([block]) == expected


ROUND_TRIP_CASES = [
    [ParagraphBlock(text="one"), ParagraphBlock(text="two")],
    [HeadingBlock(text="H1", level=1), HeadingBlock(text="H2", level=2), HeadingBlock(text="H3", level=3)],
    [BulletedBlock(text="a"), TodoBlock(text="b"), TodoBlock(text="c", checked=True)],
    [QuoteBlock(text="wise words"), DividerBlock(), ParagraphBlock(text="")],
    [ParagraphBlock(text="")],
    [DividerBlock(), DividerBlock()],
    [],
]


@pytest.mark.parametrize("blocks", ROUND_TRIP_CASES)
def test_round_trip(blocks):
    """Rendering then transpiling yields an equal block sequence."""
    assert transpile(render_markdown(blocks)) == blocks


@pytest.mark.parametrize("block,normalized", [
    (HeadingBlock(text="x  ", level=1),  HeadingBlock(text="x", level=1)),
    (BulletedBlock(text="b\t"),          BulletedBlock(text="b")),
    (TodoBlock(text=" t ", checked=True), TodoBlock(text=" t", checked=True)),
    (QuoteBlock(text="q "),              QuoteBlock(text="q")),
])
def test_round_trip_trims_prefixed_text(block, normalized):
    """Prefixed blocks lose trailing whitespace; leading whitespace after the prefix stays."""
    assert transpile(render_markdown([block])) == [normalized]


def test_round_trip_keeps_paragraph_whitespace():
    assert transpile(render_markdown([ParagraphBlock(text="  spaced  ")])) == [ParagraphBlock(text="  spaced  ")]


def test_round_trip_code_and_image():
    """Code and image blocks survive a round trip as well."""
    blocks = [
        CodeBlock(language="python", lines=["def f():", "    return 1"]),
        CodeBlock(lines=[]),
        ImageBlock(url="https://x/a.png", caption="A"),
    ]
    assert transpile(render_markdown(blocks)) == blocks


def test_render_is_stable_over_transpile(sample_md):
    """Re-rendering a transpiled document reproduces the source."""
    assert render_markdown(transpile(sample_md)) == sample_md


def test_render_document_title():
    assert render_document("Notes", [BulletedBlock(text="x")]) == "# Notes\n\n- x\n"
