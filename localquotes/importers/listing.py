"""
Quote listing format shared by the importers.

A listing is a note tagged with the quote tag. Each `:::Author:::` line opens
a section and every following line is a quote of that author:

    #quotes

    :::Marcus Aurelius:::
    - You have power over your mind, not outside events. #stoic #control
    - The best revenge is not to be like your enemy.

Inline `#tags` become tags of the quote and are removed from its text.
"""

import re
from typing import List, Optional

from ..models import Quote


AUTHOR_PATTERN = re.compile(r"^\s*(?:[-*]\s+)?:::(.+?):::\s*$")
TAG_PATTERN = re.compile(r"(?<!\S)#([\w/-]+)")
BULLET_PATTERN = re.compile(r"^\s*(?:[-*+>]\s+)+")
HEADING_PATTERN = re.compile(r"^\s*#{1,6}\s")
EMPHASIS_CHARS = "*_~`"


def has_quote_tag(text: str, quote_tag: str) -> bool:
    """
    Check whether a note is tagged as a quote listing.

    Accepts `#tag`, `[[tag]]` and `tags:`/`tags::` property lines.
    """
    tag = re.escape(quote_tag.lower())
    lowered = text.lower()
    if re.search(rf"(?<!\S)#{tag}(?![\w/-])", lowered):
        return True
    if f"[[{quote_tag.lower()}]]" in lowered:
        return True
    return re.search(rf"^\s*tags::?.*\b{tag}\b", lowered, re.MULTILINE) is not None


def _clean_author(raw: str) -> str:
    return " ".join(raw.strip(EMPHASIS_CHARS + " ").split())


def parse_quote_line(line: str, author: str) -> Optional[Quote]:
    """Turn one listing line into a quote, or None for blank lines."""
    body = BULLET_PATTERN.sub("", line).strip()
    if not body:
        return None

    tags = frozenset(tag.lower() for tag in TAG_PATTERN.findall(body))
    text = " ".join(TAG_PATTERN.sub("", body).split())
    if not text:
        return None
    return Quote(author=author, text=text, tags=tags)


def parse_quote_listing(text: str, minimal_quote_length: int = 0) -> List[Quote]:
    """
    Parse every quote in a listing.

    Args:
        text: Note contents
        minimal_quote_length: Quotes with shorter text are skipped

    Returns:
        Quotes in listing order
    """
    quotes: List[Quote] = []
    author: Optional[str] = None

    for line in text.splitlines():
        header = AUTHOR_PATTERN.match(line)
        if header:
            author = _clean_author(header.group(1)) or None
            continue

        if HEADING_PATTERN.match(line):
            author = None
            continue

        if author is None:
            continue

        quote = parse_quote_line(line, author)
        if quote is not None and len(quote.text) >= minimal_quote_length:
            quotes.append(quote)

    return quotes
