"""
Quote data models for Local Quotes.

This module defines the quotes held in the vault and the resolved content
that is handed to the rendering side.
"""

from typing import FrozenSet, Iterable
from pydantic import BaseModel, ConfigDict, Field, field_validator


class Quote(BaseModel):
    """
    A single quote from the vault.

    Quotes are frozen: the vault is read-only while blocks are being resolved.
    """

    model_config = ConfigDict(frozen=True)

    author: str = Field(
        ...,
        description="Name of the quote's author as written in the listing"
    )

    text: str = Field(
        ...,
        description="The quote itself, with inline tags stripped"
    )

    tags: FrozenSet[str] = Field(
        default_factory=frozenset,
        description="Lower-cased tags used by search expressions"
    )

    @field_validator("tags", mode="before")
    @classmethod
    def normalise_tags(cls, tags: Iterable[str]) -> FrozenSet[str]:
        """Store tags lower-cased and without a leading '#'."""
        normalised = (tag.strip().lstrip("#").strip().lower() for tag in tags)
        return frozenset(tag for tag in normalised if tag)

    def to_content(self) -> "QuoteContent":
        """Return the renderable part of the quote."""
        return QuoteContent(author=self.author, text=self.text)


class QuoteContent(BaseModel):
    """
    The resolved content of a block: the only thing a renderer consumes.
    """

    author: str = Field(
        ...,
        description="Author line shown under the quote"
    )

    text: str = Field(
        ...,
        description="Quote body"
    )
