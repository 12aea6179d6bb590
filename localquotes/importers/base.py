"""
Base importer interface for Local Quotes.

This module defines the abstract interface that all quote vault importers must
implement.
"""

from abc import ABC, abstractmethod
from typing import List

from ..models import Quote


class BaseImporter(ABC):
    """
    Abstract base class for all quote importers.

    Each importer reads quote listings from a specific source (a folder of
    Markdown notes, a Logseq export, ...) and returns them as Quote objects.
    """

    @abstractmethod
    def get_all_quotes(self) -> List[Quote]:
        """
        Retrieve all quotes from the data source.

        Returns:
            List of Quote objects in source order
        """
        pass
