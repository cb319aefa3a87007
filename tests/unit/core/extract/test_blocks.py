"""Unit tests for core/extract/blocks.py"""

from mdfolio.core.extract.blocks import code_blocks, heading_titles
from mdfolio.core.parse import split_documents


def _doc(text: str):
    return split_documents(text, "_posts/2016-01-10-post.md")[0]


def test_code_blocks_languages_and_lines(post_md):
    """Each fence reports its language, 1-based file line, and content size."""
    blocks = code_blocks(_doc(post_md))
    assert [b.language for b in blocks] == ["swift", "swift"]
    assert [b.line for b in blocks] == [8, 14]
    assert all(b.closed for b in blocks)
    assert blocks[0].lines == 1


def test_unclosed_fence_at_end():
    blocks = code_blocks(_doc("---\nlayout: post\n---\n\n```swift\nlet x = 1\n"))
    assert len(blocks) == 1
    assert not blocks[0].closed
    assert blocks[0].line == 5


def test_unclosed_empty_fence_at_end():
    blocks = code_blocks(_doc("Text.\n\n```\n"))
    assert len(blocks) == 1
    assert not blocks[0].closed


def test_shorter_closing_fence_does_not_close():
    """A ```` opener is only closed by four or more backticks."""
    blocks = code_blocks(_doc("````swift\nlet x = 1\n```\n"))
    assert not blocks[0].closed


def test_mismatched_fence_character_does_not_close():
    blocks = code_blocks(_doc("~~~\nlet x = 1\n```\n"))
    assert not blocks[0].closed


def test_longer_closing_fence_closes():
    blocks = code_blocks(_doc("```\nlet x = 1\n`````\n"))
    assert blocks[0].closed


def test_fence_in_blockquote_closes():
    blocks = code_blocks(_doc("> ```swift\n> let x = 1\n> ```\n"))
    assert len(blocks) == 1
    assert blocks[0].closed


def test_fence_without_language():
    blocks = code_blocks(_doc("```\nplain\n```\n"))
    assert blocks[0].language == ""


def test_indented_code_is_not_a_fence():
    assert code_blocks(_doc("    let x = 1\n")) == []


def test_heading_titles(post_md):
    assert heading_titles(_doc(post_md)) == ["Unwrapping"]
