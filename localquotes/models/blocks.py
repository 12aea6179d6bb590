"""
Block state models for Local Quotes.

Recurring blocks (`BlockMetadata`) are keyed by their declared id and refresh
on a timer; one-time blocks (`OneTimeBlock`) are keyed by the hosting note's
filename and keep their quote until their search changes.
"""

from typing import Optional
from pydantic import BaseModel, Field

from .quotes import QuoteContent


class BlockDescriptor(BaseModel):
    """
    Parsed body of a recurring quote block.
    """

    id: Optional[str] = Field(
        None,
        description="Stable block identity chosen when the block was written"
    )

    search: Optional[str] = Field(
        None,
        description="Search expression the block declares"
    )

    custom_class: Optional[str] = Field(
        None,
        description="Extra CSS classes for the rendered block"
    )

    refresh: Optional[int] = Field(
        None,
        description="Refresh interval in seconds, overrides the global default"
    )


class OneTimeBlockDescriptor(BaseModel):
    """
    Parsed body of a one-time quote block.
    """

    search: Optional[str] = Field(
        None,
        description="Search expression the block declares"
    )

    custom_class: Optional[str] = Field(
        None,
        description="Extra CSS classes for the rendered block"
    )


class BlockMetadata(BaseModel):
    """
    Cached state of a recurring quote block.
    """

    id: Optional[str] = Field(
        ...,
        description="Block identity; None only for synthetic error states"
    )

    search: Optional[str] = Field(
        None,
        description="Search expression currently applied to the content"
    )

    content: QuoteContent = Field(
        ...,
        description="Last resolved quote"
    )

    custom_class: Optional[str] = Field(
        None,
        description="Extra CSS classes for the rendered block"
    )

    refresh: Optional[int] = Field(
        None,
        description="Refresh interval in seconds, None means the global default"
    )

    last_update: int = Field(
        0,
        description="Epoch seconds of the last resolution"
    )


class OneTimeBlock(BaseModel):
    """
    Pinned state of a one-time quote block.
    """

    filename: Optional[str] = Field(
        ...,
        description="Last path segment of the hosting note; None for placeholders"
    )

    search: Optional[str] = Field(
        None,
        description="Search expression the quote was picked with"
    )

    content: QuoteContent = Field(
        ...,
        description="The pinned quote"
    )

    custom_class: Optional[str] = Field(
        None,
        description="Extra CSS classes for the rendered block"
    )
