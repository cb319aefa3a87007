"""Jekyll-style URL derivation for pages and posts

Posts live under ``_posts/`` (or ``_drafts/``) and are named
``YYYY-MM-DD-title.md``; everything else is a page. An explicit ``permalink``
in the front matter always wins, with placeholders expanded the same way as
the site-wide style templates below.
"""

import re
from datetime import date, datetime
from pathlib import PurePosixPath
from typing import Any, Optional

from mdfolio.core.models import ContentDocument
from mdfolio.core.utils.slug import slugify


POST_NAME_RE = re.compile(r'^(\d{4})-(\d{2})-(\d{2})-(.+)$')
DATE_PREFIX_RE = re.compile(r'^(\d{4})-(\d{2})-(\d{2})')
PLACEHOLDER_RE = re.compile(
    r':(categories|year|month|day|i_month|i_day|short_year|y_day|title|slug|path|basename|output_ext)'
)
OUTPUT_EXT = '.html'
PAGE_PLACEHOLDERS = {'path', 'basename', 'title', 'slug', 'output_ext'}

STYLES = {
    'date':    '/:categories/:year/:month/:day/:title:output_ext',
    'pretty':  '/:categories/:year/:month/:day/:title/',
    'ordinal': '/:categories/:year/:y_day/:title:output_ext',
    'none':    '/:categories/:title:output_ext',
}


def _to_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and (m := DATE_PREFIX_RE.match(value.strip())):
        try:
            return date(*map(int, m.groups()))
        except ValueError:
            return None
    return None


def parse_post_name(path: str) -> Optional[tuple[date, str]]:
    """Return (date, title) from a YYYY-MM-DD-title filename, or None if it doesn't match."""
    m = POST_NAME_RE.match(PurePosixPath(path).stem)
    if not m:
        return None
    try:
        return date(int(m.group(1)), int(m.group(2)), int(m.group(3))), m.group(4)
    except ValueError:
        return None


def post_date(doc: ContentDocument) -> Optional[date]:
    """Front matter date, falling back to the filename date."""
    if (found := _to_date(doc.date)) is not None:
        return found
    parsed = parse_post_name(doc.path)
    return parsed[0] if parsed else None


def post_title(doc: ContentDocument) -> str:
    """The :title segment: front matter slug, else the filename title."""
    if doc.frontmatter.get('slug'):
        return slugify(str(doc.frontmatter['slug']))
    parsed = parse_post_name(doc.path)
    return parsed[1] if parsed else PurePosixPath(doc.path).stem


def categories(doc: ContentDocument) -> list[str]:
    """Directories above _posts plus front matter categories, slugified and deduplicated."""
    parts = PurePosixPath(doc.path).parts[:-1]
    dirs = [p for p in parts if p not in ('_posts', '_drafts')] if doc.is_post else []
    declared = doc.frontmatter.get('categories', doc.frontmatter.get('category'))
    if isinstance(declared, str):
        declared = declared.split()
    elif not isinstance(declared, list):
        declared = []
    names = (slugify(str(c)) for c in [*dirs, *declared])
    return list(dict.fromkeys(n for n in names if n))


def _expand(template: str, values: dict[str, str]) -> str:
    url = PLACEHOLDER_RE.sub(lambda m: values.get(m.group(1), ''), template)
    url = re.sub(r'/{2,}', '/', url)
    return url if url.startswith('/') else '/' + url


def _post_values(doc: ContentDocument, when: date) -> dict[str, str]:
    title = post_title(doc)
    return {
        'categories': '/'.join(categories(doc)),
        'year':       f"{when.year:04d}",
        'month':      f"{when.month:02d}",
        'day':        f"{when.day:02d}",
        'i_month':    str(when.month),
        'i_day':      str(when.day),
        'short_year': f"{when.year % 100:02d}",
        'y_day':      f"{when.timetuple().tm_yday:03d}",
        'title':      title,
        'slug':       title,
        'output_ext': OUTPUT_EXT,
    }


def _page_values(doc: ContentDocument) -> dict[str, str]:
    path = PurePosixPath(doc.path)
    return {
        'path':       str(path.parent) if str(path.parent) != '.' else '',
        'basename':   path.stem,
        'title':      slugify(str(doc.frontmatter.get('slug') or path.stem)),
        'slug':       slugify(str(doc.frontmatter.get('slug') or path.stem)),
        'output_ext': OUTPUT_EXT,
    }


def unsupported_placeholders(doc: ContentDocument) -> list[str]:
    """Placeholders in a page's explicit permalink that only posts have values for."""
    if doc.is_post or not doc.permalink:
        return []
    found = PLACEHOLDER_RE.findall(str(doc.permalink))
    return sorted({p for p in found if p not in PAGE_PLACEHOLDERS})


def _page_url(doc: ContentDocument, style: str) -> str:
    values = _page_values(doc)
    if values['basename'] == 'index':
        return _expand(f"/{values['path']}/", values)
    template = STYLES.get(style, style)
    if template.endswith('/'):
        return _expand('/:path/:basename/', values)
    return _expand('/:path/:basename:output_ext', values)


def resolve_permalink(doc: ContentDocument, style: str = 'date') -> Optional[str]:
    """Return the URL an external generator would route doc to, or None for an undated post."""
    explicit = doc.permalink
    if doc.is_post:
        when = post_date(doc)
        if explicit and not PLACEHOLDER_RE.search(str(explicit)):
            return _expand(str(explicit), {})
        if when is None:
            return None
        return _expand(str(explicit) if explicit else STYLES.get(style, style), _post_values(doc, when))
    if explicit:
        return _expand(str(explicit), _page_values(doc))
    return _page_url(doc, style)
