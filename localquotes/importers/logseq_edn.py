"""
Logseq EDN importer for Local Quotes.

This module reads a classic Logseq `logseq.edn` export and collects the quote
listings found on pages tagged with the quote tag. A page's block tree is
flattened depth-first into lines and parsed with the shared listing format,
so an author block can hold its quotes as child blocks.
"""

import collections.abc
import logging
from pathlib import Path
from typing import Any, List, Optional

import edn_format

from ..models import Quote
from .base import BaseImporter
from .listing import has_quote_tag, parse_quote_listing


class LogseqEDNImporter(BaseImporter):
    """
    Importer for classic Logseq EDN exports.
    """

    def __init__(self, logseq_db_path: str, quote_tag: str = "quotes", minimal_quote_length: int = 5):
        """
        Initialize the Logseq EDN importer.

        Args:
            logseq_db_path: Directory containing logseq.edn
            quote_tag: Tag marking a page as a quote listing
            minimal_quote_length: Shorter quotes are skipped
        """
        self.logseq_db_path = Path(logseq_db_path)
        self.quote_tag = quote_tag
        self.minimal_quote_length = minimal_quote_length

        logging.info(f"Initialized Logseq EDN importer for: {self.logseq_db_path}")

    def get_all_quotes(self) -> List[Quote]:
        """
        Parse the export and return the quotes of every tagged page.

        Returns:
            Quotes in export order; an empty list if the export can't be read
        """
        edn_file = self._find_main_edn_file()
        if not edn_file:
            return []

        try:
            with open(edn_file, 'r', encoding='utf-8') as f:
                parsed_data = edn_format.loads(f.read())
        except (OSError, ValueError) as e:
            logging.error(f"Failed to parse Logseq export {edn_file}: {e}", exc_info=True)
            return []

        if not isinstance(parsed_data, collections.abc.Mapping):
            logging.error(f"Parsed EDN data is not a map, got {type(parsed_data)}.")
            return []

        quotes = self._parse_edn_data(parsed_data)
        logging.info(f"Importer finished. Found {len(quotes)} quotes.")
        return quotes

    def _parse_edn_data(self, edn_data: collections.abc.Mapping) -> List[Quote]:
        pages = self._get_logseq_value(edn_data, 'blocks')
        if not self._is_block_list(pages):
            logging.error("Failed to get a valid list from ':blocks' key.")
            return []

        quotes: List[Quote] = []
        for page in pages:
            if not isinstance(page, collections.abc.Mapping):
                continue

            page_name = self._get_logseq_value(page, 'block/page-name', '')
            lines: List[str] = []
            for block in self._get_logseq_value(page, 'block/children', []) or []:
                self._collect_lines(block, lines)

            page_text = "\n".join(lines)
            if not (has_quote_tag(page_text, self.quote_tag) or self._page_has_tag(page)):
                continue

            page_quotes = parse_quote_listing(page_text, self.minimal_quote_length)
            logging.info(f"Found {len(page_quotes)} quotes on page '{page_name}'")
            quotes.extend(page_quotes)

        return quotes

    def _page_has_tag(self, page: collections.abc.Mapping) -> bool:
        properties = self._get_logseq_value(page, 'block/properties')
        tags = self._get_logseq_value(properties, 'tags')
        if isinstance(tags, str):
            tags = [tags]
        if not self._is_block_list(tags) and not isinstance(tags, (set, frozenset)):
            return False
        return any(str(tag).lower() == self.quote_tag.lower() for tag in tags)

    def _collect_lines(self, block: Any, lines: List[str]) -> None:
        if not isinstance(block, collections.abc.Mapping):
            return

        content = self._get_logseq_value(block, 'block/content')
        if content is None:
            content = self._get_logseq_value(block, 'block/title', '')
        if content:
            lines.extend(str(content).splitlines())

        children = self._get_logseq_value(block, 'block/children', [])
        if self._is_block_list(children):
            for child in children:
                self._collect_lines(child, lines)

    @staticmethod
    def _is_block_list(value: Any) -> bool:
        return isinstance(value, collections.abc.Sequence) and not isinstance(value, str)

    @staticmethod
    def _get_logseq_value(data: Any, key: str, default: Any = None) -> Any:
        if not isinstance(data, collections.abc.Mapping):
            return default
        return data.get(edn_format.Keyword(key), default)

    def _find_main_edn_file(self) -> Optional[Path]:
        db_file = self.logseq_db_path / "logseq.edn"
        if db_file.is_file():
            return db_file
        logging.error(f"Could not find logseq.edn inside the specified directory: {self.logseq_db_path}")
        return None
