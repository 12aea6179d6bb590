"""
Local Quotes: cached quote blocks for your notes.

Picks quotes from a personal quote vault by search expression and keeps each
block's pick until its refresh interval runs out, or for good in one-time
blocks.
"""

__version__ = "0.1.0"
__author__ = "Local Quotes Project"

# Import main components
from .app import LocalQuotes
from .database import DatabaseManager
from .models import Quote, QuoteContent, BlockMetadata, OneTimeBlock, LocalQuotesSettings
from .importers import BaseImporter, MockImporter, MarkdownImporter, LogseqEDNImporter
from .selection import select_quote, search_quote

__all__ = [
    "LocalQuotes",
    "DatabaseManager",
    "Quote",
    "QuoteContent",
    "BlockMetadata",
    "OneTimeBlock",
    "LocalQuotesSettings",
    "BaseImporter",
    "MockImporter",
    "MarkdownImporter",
    "LogseqEDNImporter",
    "select_quote",
    "search_quote"
]
