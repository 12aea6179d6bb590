"""
Fallback content for blocks that cannot show a real quote.

Misconfiguration and empty searches are reported inline, as the content of
the block itself, so one broken block never breaks the rest of the note.
"""

from typing import Optional

from .models import QuoteContent


FALLBACK_AUTHOR = "Local Quotes"

ERROR_TEXT = (
    "You caught an error! If you can't understand what is wrong "
    "you can write an issue on GitHub"
)
TEMPLATE_FOLDER_UNSET_TEXT = "Your template folder isn't set! Change it in the settings."
TEMPLATE_PLACEHOLDER_TEXT = "Your one time quote will be placed there, when time comes!"


def fallback_content(text: str) -> QuoteContent:
    """Build a diagnostic content attributed to the plugin itself."""
    return QuoteContent(author=FALLBACK_AUTHOR, text=text)


def no_match_content(search: Optional[str]) -> QuoteContent:
    """Content shown when a search expression matches no quote."""
    return fallback_content(f"No quotes found for search '{search}'")
