"""Fenced code and heading inspection over markdown-it token streams"""

import re
from functools import lru_cache

from markdown_it import MarkdownIt

from mdfolio.core.models import CodeBlock, ContentDocument


NEWLINE_RE = re.compile(r'\r\n?|\n')
CLOSING_FENCE_RE = re.compile(r'^[ \t>]*(`{3,}|~{3,})[ \t]*$')


@lru_cache(maxsize=None)
def make_parser(preset: str = 'gfm-like') -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name."""
    return MarkdownIt(preset, options_update={"linkify": False})


def tokenize(doc: ContentDocument, preset: str = 'gfm-like') -> list:
    return make_parser(preset).parse(doc.body)


def _is_closed(token, source_lines: list[str]) -> bool:
    """True when the last line of the fence token's range is a matching closing fence."""
    start, end = token.map
    if end - 1 <= start or end > len(source_lines):
        return False
    m = CLOSING_FENCE_RE.match(source_lines[end - 1])
    return bool(m) and m.group(1)[0] == token.markup[0] and len(m.group(1)) >= len(token.markup)


def code_blocks(doc: ContentDocument, preset: str = 'gfm-like') -> list[CodeBlock]:
    """Return every fenced code listing in doc with its language and balance state."""
    source_lines = NEWLINE_RE.split(doc.body)
    blocks = []
    for tok in tokenize(doc, preset):
        if tok.type != 'fence' or not tok.map:
            continue
        closed = _is_closed(tok, source_lines)
        blocks.append(CodeBlock(
            language=tok.info.split()[0] if tok.info.strip() else '',
            line=doc.offset + tok.map[0] + 1,
            lines=len(tok.content.splitlines()),
            closed=closed,
        ))
    return blocks


def heading_titles(doc: ContentDocument, preset: str = 'gfm-like') -> list[str]:
    """Return the inline text of each heading, in document order."""
    tokens = tokenize(doc, preset)
    return [
        tokens[i + 1].content
        for i, tok in enumerate(tokens)
        if tok.type == 'heading_open' and i + 1 < len(tokens)
    ]
