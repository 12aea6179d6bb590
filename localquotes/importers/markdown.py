"""
Markdown folder importer for Local Quotes.

Scans a folder of Markdown notes for quote listings.
"""

import logging
from pathlib import Path
from typing import List

from ..models import Quote
from .base import BaseImporter
from .listing import has_quote_tag, parse_quote_listing


class MarkdownImporter(BaseImporter):
    """
    Importer for a folder of Markdown notes (an Obsidian vault, for instance).
    """

    def __init__(self, notes_dir: str, quote_tag: str = "quotes", minimal_quote_length: int = 5):
        """
        Initialize the Markdown importer.

        Args:
            notes_dir: Root folder of the notes
            quote_tag: Tag marking a note as a quote listing
            minimal_quote_length: Shorter quotes are skipped
        """
        self.notes_dir = Path(notes_dir)
        self.quote_tag = quote_tag
        self.minimal_quote_length = minimal_quote_length

        if not self.notes_dir.is_dir():
            logging.warning(f"Notes directory not found: {notes_dir}")

        logging.info(f"Initialized Markdown importer for: {self.notes_dir}")

    def get_all_quotes(self) -> List[Quote]:
        """
        Read every tagged note under the notes folder.

        Returns:
            Quotes ordered by note path, then by position in the note
        """
        quotes: List[Quote] = []
        if not self.notes_dir.is_dir():
            return quotes

        for note_path in sorted(self.notes_dir.rglob("*.md")):
            try:
                content = note_path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logging.error(f"Failed to read note {note_path}: {e}")
                continue

            if not has_quote_tag(content, self.quote_tag):
                continue

            note_quotes = parse_quote_listing(content, self.minimal_quote_length)
            logging.info(f"Found {len(note_quotes)} quotes in {note_path.relative_to(self.notes_dir)}")
            quotes.extend(note_quotes)

        logging.info(f"Importer finished. Found {len(quotes)} quotes.")
        return quotes
