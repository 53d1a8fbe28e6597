from __future__ import annotations

import enum
import functools
import logging
import re
from dataclasses import dataclass

from pulse.services.entities import decode_entities

logger = logging.getLogger(__name__)

_RSS_BLOCK_RE = re.compile(r"<item\b[\s\S]*?</item>", re.IGNORECASE)
_ATOM_BLOCK_RE = re.compile(r"<entry\b[\s\S]*?</entry>", re.IGNORECASE)

_LINK_TAG_RE = re.compile(r"<link\b([^>]*)>", re.IGNORECASE)
_ATTR_RE = re.compile(r"""([\w:.-]+)\s*=\s*(["'])(.*?)\2""", re.DOTALL)
_LINK_CDATA_RE = re.compile(r"<link><!\[CDATA\[(.*?)\]\]></link>", re.IGNORECASE | re.DOTALL)
_LINK_TEXT_RE = re.compile(r"<link>(.*?)</link>", re.IGNORECASE | re.DOTALL)


class Dialect(str, enum.Enum):
    RSS = "rss"
    ATOM = "atom"

    @property
    def id_tag(self) -> str:
        return "guid" if self is Dialect.RSS else "id"


@dataclass(frozen=True)
class FeedEntry:
    title: str
    link: str | None
    identifier: str


def extract_blocks(document: str) -> tuple[list[str], Dialect]:
    """
    Split a feed document into raw entry fragments.

    RSS <item> blocks win; <entry> blocks are only looked for when there are none.
    """
    blocks = _RSS_BLOCK_RE.findall(document or "")
    if blocks:
        return blocks, Dialect.RSS
    return _ATOM_BLOCK_RE.findall(document or ""), Dialect.ATOM


@functools.lru_cache(maxsize=None)
def _tag_patterns(tag: str) -> tuple[re.Pattern, re.Pattern]:
    t = re.escape(tag)
    cdata = re.compile(rf"<{t}\b[^>]*><!\[CDATA\[(.*?)\]\]></{t}>", re.IGNORECASE | re.DOTALL)
    plain = re.compile(rf"<{t}\b[^>]*>([\s\S]*?)</{t}>", re.IGNORECASE)
    return cdata, plain


def first_tag_text(fragment: str, tag: str) -> str | None:
    cdata, plain = _tag_patterns(tag)

    m = cdata.search(fragment) or plain.search(fragment)
    if not m:
        return None
    return decode_entities(m.group(1).strip())


def _link_attrs(fragment: str) -> list[dict[str, str]]:
    """Attributes of every <link ...> tag, names lower-cased, in document order."""
    return [
        {name.lower(): value.strip() for name, _, value in _ATTR_RE.findall(m.group(1))}
        for m in _LINK_TAG_RE.finditer(fragment)
    ]


def extract_link(fragment: str) -> str | None:
    # Atom: rel="alternate" first, then any href; attribute order doesn't matter
    links = [a for a in _link_attrs(fragment) if a.get("href")]
    for attrs in links:
        if attrs.get("rel", "").lower() == "alternate":
            return attrs["href"]
    if links:
        return links[0]["href"]

    # RSS: link text
    m = _LINK_CDATA_RE.search(fragment) or _LINK_TEXT_RE.search(fragment)
    if m and m.group(1).strip():
        return decode_entities(m.group(1).strip())

    return None


def extract_entry(fragment: str, dialect: Dialect) -> FeedEntry | None:
    """
    Pull title/link/identifier out of one fragment; None when it can't be used.
    """
    title = first_tag_text(fragment, "title")
    if not title:
        return None

    link = extract_link(fragment)
    identifier = first_tag_text(fragment, dialect.id_tag) or link or title
    if not (link or identifier):
        return None

    return FeedEntry(title=title, link=link, identifier=identifier)


def parse_feed(document: str, limit: int) -> list[FeedEntry]:
    blocks, dialect = extract_blocks(document)
    out: list[FeedEntry] = []
    if limit <= 0:
        return out

    for block in blocks:
        entry = extract_entry(block, dialect)
        if entry is None:
            logger.debug("Dropping %s fragment without usable title/link", dialect.value)
            continue
        out.append(entry)
        if len(out) >= limit:
            break
    return out
