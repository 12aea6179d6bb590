"""
Quote search and random selection.

A search expression filters the vault; one quote is then drawn from the
matches, either uniformly or weighted by how many eligible quotes each author
has.

Expression grammar:
    expression  := alternative ("|" alternative)*
    alternative := term ("&" term)*
    term        := ["!"] ("#" tag | "random" | "*" | author name)

Tags and author names are compared case-insensitively.
"""

import logging
import random
from collections import defaultdict
from typing import Callable, Dict, List, Optional, Sequence

from .models import Quote, QuoteContent
from .fallback import no_match_content


MATCH_ALL_TERMS = {"random", "*"}

QuotePredicate = Callable[[Quote], bool]


def _normalise(value: str) -> str:
    return " ".join(value.split()).lower()


def _compile_term(term: str) -> Optional[QuotePredicate]:
    term = term.strip()
    negate = False
    while term.startswith("!"):
        negate = not negate
        term = term[1:].strip()

    if not term:
        return None

    if term.lower() in MATCH_ALL_TERMS:
        predicate: QuotePredicate = lambda quote: True
    elif term.startswith("#"):
        tag = term[1:].strip().lower()
        predicate = lambda quote: tag in quote.tags
    else:
        author = _normalise(term)
        predicate = lambda quote: _normalise(quote.author) == author

    if negate:
        return lambda quote: not predicate(quote)
    return predicate


def compile_expression(expression: Optional[str]) -> QuotePredicate:
    """
    Compile a search expression into a predicate over quotes.

    Blank expressions and blank alternatives match nothing.
    """
    alternatives: List[List[QuotePredicate]] = []
    for raw_alternative in (expression or "").split("|"):
        terms = [_compile_term(t) for t in raw_alternative.split("&")]
        if not terms or any(t is None for t in terms):
            continue
        alternatives.append(terms)

    def matches(quote: Quote) -> bool:
        return any(all(term(quote) for term in terms) for terms in alternatives)

    return matches


def filter_quotes(vault: Sequence[Quote], expression: Optional[str]) -> List[Quote]:
    """Return the quotes of the vault matching an expression, in vault order."""
    matches = compile_expression(expression)
    return [quote for quote in vault if matches(quote)]


def _weighted_pick(candidates: List[Quote], rng: random.Random) -> Quote:
    # One ticket per eligible quote, counted per author. Drawing an author by
    # ticket count and then one of their quotes gives each quote
    # (n / total) * (1 / n) = 1 / total, the same as a single draw.
    by_author: Dict[str, List[Quote]] = defaultdict(list)
    for quote in candidates:
        by_author[quote.author].append(quote)

    authors = list(by_author)
    author = rng.choices(authors, weights=[len(by_author[a]) for a in authors])[0]
    return rng.choice(by_author[author])


def select_quote(
    vault: Sequence[Quote],
    expression: Optional[str],
    weighted: bool = False,
    rng: Optional[random.Random] = None
) -> Optional[QuoteContent]:
    """
    Pick one quote matching an expression.

    Args:
        vault: Quotes to choose from
        expression: Search expression
        weighted: Draw authors proportionally to their eligible quote count
        rng: Random source; a fresh entropy-seeded one when omitted

    Returns:
        The chosen quote's content, or None when nothing matches
    """
    candidates = filter_quotes(vault, expression)
    if not candidates:
        return None

    rng = rng or random.Random()
    if weighted:
        quote = _weighted_pick(candidates, rng)
    else:
        quote = rng.choice(candidates)
    return quote.to_content()


def search_quote(
    vault: Sequence[Quote],
    expression: Optional[str],
    weighted: bool = False,
    rng: Optional[random.Random] = None
) -> QuoteContent:
    """
    Like `select_quote`, but a miss becomes a visible "no match" content.
    """
    content = select_quote(vault, expression, weighted, rng)
    if content is None:
        logging.warning(f"No quotes matched search '{expression}'")
        return no_match_content(expression)
    return content
