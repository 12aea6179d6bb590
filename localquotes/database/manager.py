"""
Database manager for Local Quotes.

This module persists the quote vault, the settings and both block stores in
DuckDB so cached quotes survive between sessions.
"""

import duckdb
import json
import logging
from typing import Iterable, List, Optional

from ..models import (
    BlockMetadata,
    LocalQuotesSettings,
    OneTimeBlock,
    Quote,
    QuoteContent,
)


class DatabaseManager:
    """
    Manages the DuckDB database holding the persisted plugin state.
    """

    def __init__(self, db_path: str = "localquotes.db"):
        """
        Initialize the database manager.

        Args:
            db_path: Path to the DuckDB database file
        """
        self.db_path = db_path
        self.connection = None

    def connect(self):
        """Establish connection to the database."""
        self.connection = duckdb.connect(self.db_path)

    def disconnect(self):
        """Close the database connection."""
        if self.connection:
            self.connection.close()
            self.connection = None

    def __enter__(self):
        """Context manager entry."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.disconnect()

    def _require_connection(self):
        if not self.connection:
            raise RuntimeError("Database connection not established")
        return self.connection

    def initialize_database(self):
        """
        Create all necessary tables if they don't exist.
        """
        connection = self._require_connection()

        connection.execute("""
            CREATE TABLE IF NOT EXISTS settings (
                setting_key VARCHAR NOT NULL,
                setting_value VARCHAR NOT NULL
            )
        """)

        connection.execute("""
            CREATE TABLE IF NOT EXISTS quotes (
                position INTEGER NOT NULL,
                author VARCHAR NOT NULL,
                quote_text VARCHAR NOT NULL,
                tags VARCHAR NOT NULL
            )
        """)

        connection.execute("""
            CREATE TABLE IF NOT EXISTS block_metadata (
                block_id VARCHAR NOT NULL,
                position INTEGER NOT NULL,
                search VARCHAR,
                author VARCHAR NOT NULL,
                quote_text VARCHAR NOT NULL,
                custom_class VARCHAR,
                refresh BIGINT,
                last_update BIGINT NOT NULL
            )
        """)

        connection.execute("""
            CREATE TABLE IF NOT EXISTS one_time_blocks (
                filename VARCHAR NOT NULL,
                position INTEGER NOT NULL,
                search VARCHAR,
                author VARCHAR NOT NULL,
                quote_text VARCHAR NOT NULL,
                custom_class VARCHAR
            )
        """)

    def _replace_rows(self, table: str, insert_sql: str, rows: List[list]):
        """
        Replace the contents of a table in one transaction.

        Tables carry no primary keys: identities are unique in the stores,
        and DuckDB rejects re-inserting a key deleted in the same transaction.
        """
        connection = self._require_connection()
        connection.begin()
        try:
            connection.execute(f"DELETE FROM {table}")
            if rows:
                connection.executemany(insert_sql, rows)
            connection.commit()
            logging.debug(f"Saved {len(rows)} rows to {table}")
        except duckdb.Error:
            connection.rollback()
            raise

    def save_settings(self, settings: LocalQuotesSettings):
        """
        Persist the settings as key/JSON-value pairs.

        Args:
            settings: Settings to store
        """
        rows = [[key, json.dumps(value)] for key, value in settings.model_dump().items()]
        self._replace_rows(
            "settings",
            "INSERT INTO settings (setting_key, setting_value) VALUES (?, ?)",
            rows
        )

    def load_settings(self) -> Optional[LocalQuotesSettings]:
        """
        Load persisted settings.

        Returns:
            The settings, or None if none were saved yet
        """
        connection = self._require_connection()
        results = connection.execute(
            "SELECT setting_key, setting_value FROM settings"
        ).fetchall()

        if not results:
            return None
        return LocalQuotesSettings(**{row[0]: json.loads(row[1]) for row in results})

    def save_quotes(self, quotes: Iterable[Quote]):
        """
        Replace the stored quote vault.

        Args:
            quotes: Quotes in vault order
        """
        rows = [
            [position, quote.author, quote.text, json.dumps(sorted(quote.tags))]
            for position, quote in enumerate(quotes)
        ]
        self._replace_rows(
            "quotes",
            "INSERT INTO quotes (position, author, quote_text, tags) VALUES (?, ?, ?, ?)",
            rows
        )

    def load_quotes(self) -> List[Quote]:
        """
        Load the quote vault.

        Returns:
            Quotes in their saved order
        """
        connection = self._require_connection()
        results = connection.execute("""
            SELECT author, quote_text, tags
            FROM quotes
            ORDER BY position
        """).fetchall()

        return [
            Quote(author=row[0], text=row[1], tags=frozenset(json.loads(row[2])))
            for row in results
        ]

    def save_block_metadata(self, states: Iterable[BlockMetadata]):
        """
        Replace the stored recurring block states.

        Args:
            states: States in store order
        """
        rows = [
            [
                bm.id, position, bm.search, bm.content.author, bm.content.text,
                bm.custom_class, bm.refresh, bm.last_update
            ]
            for position, bm in enumerate(states)
        ]
        self._replace_rows(
            "block_metadata",
            """
            INSERT INTO block_metadata (
                block_id, position, search, author, quote_text,
                custom_class, refresh, last_update
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            rows
        )

    def load_block_metadata(self) -> List[BlockMetadata]:
        """
        Load recurring block states.

        Returns:
            States in their saved order
        """
        connection = self._require_connection()
        results = connection.execute("""
            SELECT block_id, search, author, quote_text, custom_class, refresh, last_update
            FROM block_metadata
            ORDER BY position
        """).fetchall()

        return [
            BlockMetadata(
                id=row[0],
                search=row[1],
                content=QuoteContent(author=row[2], text=row[3]),
                custom_class=row[4],
                refresh=row[5],
                last_update=row[6]
            )
            for row in results
        ]

    def save_one_time_blocks(self, states: Iterable[OneTimeBlock]):
        """
        Replace the stored one-time block states.

        Args:
            states: States in store order
        """
        rows = [
            [
                otb.filename, position, otb.search, otb.content.author,
                otb.content.text, otb.custom_class
            ]
            for position, otb in enumerate(states)
        ]
        self._replace_rows(
            "one_time_blocks",
            """
            INSERT INTO one_time_blocks (
                filename, position, search, author, quote_text, custom_class
            ) VALUES (?, ?, ?, ?, ?, ?)
            """,
            rows
        )

    def load_one_time_blocks(self) -> List[OneTimeBlock]:
        """
        Load one-time block states.

        Returns:
            States in their saved order
        """
        connection = self._require_connection()
        results = connection.execute("""
            SELECT filename, search, author, quote_text, custom_class
            FROM one_time_blocks
            ORDER BY position
        """).fetchall()

        return [
            OneTimeBlock(
                filename=row[0],
                search=row[1],
                content=QuoteContent(author=row[2], text=row[3]),
                custom_class=row[4]
            )
            for row in results
        ]
