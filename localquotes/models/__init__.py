"""Data models for Local Quotes."""

from .quotes import Quote, QuoteContent
from .blocks import BlockDescriptor, OneTimeBlockDescriptor, BlockMetadata, OneTimeBlock
from .settings import LocalQuotesSettings, SECONDS_IN_DAY

__all__ = [
    "Quote",
    "QuoteContent",
    "BlockDescriptor",
    "OneTimeBlockDescriptor",
    "BlockMetadata",
    "OneTimeBlock",
    "LocalQuotesSettings",
    "SECONDS_IN_DAY"
]
