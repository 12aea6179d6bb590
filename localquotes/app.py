"""
Application object for Local Quotes.

`LocalQuotes` owns everything a session needs: the settings, the quote vault,
both block stores and the database they are persisted to. Resolving a block
only touches memory and marks state dirty; `save()` writes dirty state out.
"""

import logging
import random
from typing import Callable, Iterable, List, Optional

import duckdb

from .database import DatabaseManager
from .importers import BaseImporter
from .models import BlockMetadata, LocalQuotesSettings, OneTimeBlock, Quote
from .parser import parse_code_block, parse_one_time_code_block
from .resolvers import select_block_metadata, select_one_time_block
from .stores import BlockMetadataStore, OneTimeBlockStore
from .utils import generate_block_id, get_current_seconds


class LocalQuotes:
    """
    Quote vault plus cached block states for one set of notes.
    """

    def __init__(
        self,
        settings: Optional[LocalQuotesSettings] = None,
        quote_vault: Optional[Iterable[Quote]] = None,
        block_metadata: Optional[Iterable[BlockMetadata]] = None,
        one_time_blocks: Optional[Iterable[OneTimeBlock]] = None,
        database: Optional[DatabaseManager] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], int] = get_current_seconds
    ):
        """
        Initialize the application state.

        Args:
            settings: Runtime settings, defaults when omitted
            quote_vault: Initial quotes
            block_metadata: Initial recurring block states
            one_time_blocks: Initial one-time block states
            database: Connected database used by save(); None keeps state in memory
            rng: Random source shared by all selections
            clock: Returns the current epoch seconds
        """
        self.settings = settings or LocalQuotesSettings()
        self.quote_vault: List[Quote] = list(quote_vault or [])
        self.block_metadata = BlockMetadataStore(block_metadata)
        self.one_time_blocks = OneTimeBlockStore(one_time_blocks)
        self.database = database
        self.rng = rng or random.Random()
        self.clock = clock

        self._vault_dirty = False
        self._settings_dirty = False

    @classmethod
    def from_database(
        cls,
        database: DatabaseManager,
        settings: Optional[LocalQuotesSettings] = None,
        **kwargs
    ) -> "LocalQuotes":
        """
        Restore a session from the database.

        Args:
            database: Connected database manager
            settings: Settings overriding the persisted ones

        Returns:
            LocalQuotes bound to the database
        """
        database.initialize_database()

        persisted_settings = database.load_settings()
        app = cls(
            settings=settings or persisted_settings,
            quote_vault=database.load_quotes(),
            block_metadata=database.load_block_metadata(),
            one_time_blocks=database.load_one_time_blocks(),
            database=database,
            **kwargs
        )
        app._settings_dirty = settings is not None and settings != persisted_settings

        logging.info(
            f"Loaded {len(app.quote_vault)} quotes, {len(app.block_metadata)} blocks "
            f"and {len(app.one_time_blocks)} one-time blocks"
        )
        return app

    # Block resolution

    def select_block_metadata(self, source: str) -> BlockMetadata:
        """
        Resolve the body of a recurring quote block.

        Args:
            source: Raw block body

        Returns:
            The block's current state
        """
        return select_block_metadata(
            parse_code_block(source),
            self.quote_vault,
            self.block_metadata,
            self.settings.default_reload_interval,
            weighted=self.settings.use_weighted_random,
            weighted_on_creation=self.settings.weighted_on_creation,
            rng=self.rng,
            clock=self.clock
        )

    def select_one_time_block(self, source: str, source_path: str) -> OneTimeBlock:
        """
        Resolve the body of a one-time quote block.

        Args:
            source: Raw block body
            source_path: Vault-relative path of the note holding the block

        Returns:
            The note's pinned state or a placeholder
        """
        return select_one_time_block(
            parse_one_time_code_block(source),
            source_path,
            self.settings.template_folder,
            self.quote_vault,
            self.one_time_blocks,
            weighted=self.settings.use_weighted_random,
            rng=self.rng,
            saver=self.save
        )

    def new_block_source(self, search: str, refresh: Optional[int] = None,
                         custom_class: Optional[str] = None) -> str:
        """
        Build the body of a new recurring block with a fresh id.

        Args:
            search: Search expression
            refresh: Optional refresh interval in seconds
            custom_class: Optional CSS classes

        Returns:
            Block body ready to paste into a note
        """
        while True:
            block_id = generate_block_id(self.settings.auto_generated_id_length, self.rng)
            if block_id not in self.block_metadata:
                break

        lines = [f"id: {block_id}", f"search: {search}"]
        if refresh is not None:
            lines.append(f"refresh: {refresh}")
        if custom_class:
            lines.append(f"class: {custom_class}")
        return "\n".join(lines)

    # Vault and settings

    def load_vault(self, importer: BaseImporter) -> int:
        """
        Replace the vault with the quotes of an importer.

        Resolutions already running keep the previous list.

        Returns:
            Number of quotes loaded
        """
        self.quote_vault = importer.get_all_quotes()
        self._vault_dirty = True
        logging.info(f"Quote vault now holds {len(self.quote_vault)} quotes")
        return len(self.quote_vault)

    def update_settings(self, **changes) -> LocalQuotesSettings:
        """
        Change settings, validating the new values.

        Returns:
            The new settings
        """
        self.settings = LocalQuotesSettings(**{**self.settings.model_dump(), **changes})
        self._settings_dirty = True
        return self.settings

    # Bulk clearing

    def clear_block_metadata(self) -> int:
        """Forget every recurring block state, then save."""
        removed = self.block_metadata.clear()
        self.save()
        return removed

    def clear_one_time_blocks(self) -> int:
        """Forget every pinned one-time quote, then save."""
        removed = self.one_time_blocks.clear()
        self.save()
        return removed

    # Persistence

    @property
    def dirty(self) -> bool:
        """True when some state has not been saved yet."""
        return (
            self._vault_dirty
            or self._settings_dirty
            or self.block_metadata.dirty
            or self.one_time_blocks.dirty
        )

    def save(self) -> bool:
        """
        Write dirty state to the database.

        Failures are logged and the state stays dirty, so the next save
        retries. Resolution never depends on a save succeeding.

        Returns:
            True if nothing is left unsaved
        """
        if not self.dirty:
            return True

        if self.database is None:
            logging.debug("No database configured, keeping state in memory")
            return False

        try:
            if self._settings_dirty:
                self.database.save_settings(self.settings)
                self._settings_dirty = False

            if self._vault_dirty:
                self.database.save_quotes(self.quote_vault)
                self._vault_dirty = False

            with self.block_metadata.lock:
                if self.block_metadata.dirty:
                    self.database.save_block_metadata(self.block_metadata.all())
                    self.block_metadata.mark_clean()

            with self.one_time_blocks.lock:
                if self.one_time_blocks.dirty:
                    self.database.save_one_time_blocks(self.one_time_blocks.all())
                    self.one_time_blocks.mark_clean()

        except (duckdb.Error, RuntimeError) as e:
            logging.error(f"Failed to save Local Quotes state: {e}")
            return False

        logging.info("Local Quotes state saved")
        return True
