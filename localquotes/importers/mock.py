"""
Mock importer for testing Local Quotes.

This module provides a hardcoded quote vault for demos and for exercising the
resolvers without reading any notes.
"""

from typing import List

from ..models import Quote
from .base import BaseImporter


class MockImporter(BaseImporter):
    """
    Mock importer that returns hardcoded quotes.
    """

    def __init__(self):
        """Initialize the mock importer with test data."""
        self._test_quotes = self._create_test_quotes()

    def get_all_quotes(self) -> List[Quote]:
        """
        Return all hardcoded test quotes.

        Returns:
            List of test Quote objects
        """
        return list(self._test_quotes)

    def _create_test_quotes(self) -> List[Quote]:
        """
        Create hardcoded quotes covering several authors and tags.

        Returns:
            List of test quotes
        """
        return [
            Quote(
                author="Marcus Aurelius",
                text="You have power over your mind, not outside events.",
                tags=frozenset({"stoic", "control"})
            ),
            Quote(
                author="Marcus Aurelius",
                text="The best revenge is not to be like your enemy.",
                tags=frozenset({"stoic"})
            ),
            Quote(
                author="Marcus Aurelius",
                text="Waste no more time arguing what a good man should be. Be one.",
                tags=frozenset({"stoic", "action"})
            ),
            Quote(
                author="Seneca",
                text="We suffer more often in imagination than in reality.",
                tags=frozenset({"stoic", "fear"})
            ),
            Quote(
                author="Seneca",
                text="Luck is what happens when preparation meets opportunity.",
                tags=frozenset({"action"})
            ),
            Quote(
                author="Ada Lovelace",
                text="The more I study, the more insatiable do I feel my genius for it to be.",
                tags=frozenset({"science"})
            )
        ]
