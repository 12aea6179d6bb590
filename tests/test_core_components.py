"""
Unit tests for core Local Quotes components.

Tests configuration management, data models, the block body parser, the
block stores and database persistence.
"""

import shutil
import tempfile
import unittest
from pathlib import Path

from pydantic import ValidationError

from localquotes.config import ConfigManager
from localquotes.database import DatabaseManager
from localquotes.models import (
    BlockMetadata,
    LocalQuotesSettings,
    OneTimeBlock,
    Quote,
    QuoteContent,
)
from localquotes.parser import parse_code_block, parse_one_time_code_block
from localquotes.stores import BlockMetadataStore, OneTimeBlockStore
from localquotes.utils import filename_from_path, generate_block_id, is_inside_folder


class TestConfigManager(unittest.TestCase):
    """Test configuration management functionality."""

    def setUp(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()
        self.config_path = Path(self.temp_dir) / "test_config.yaml"

    def tearDown(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.temp_dir)

    def test_config_creation_with_defaults(self):
        """Test config manager falls back to defaults when file missing."""
        config = ConfigManager(str(self.config_path))

        self.assertEqual(config.database_filename, "localquotes.db")
        self.assertEqual(config.get("quotes.default_reload_interval"), 86400)
        self.assertEqual(config.quote_settings().template_folder, "")

    def test_config_loading_from_file(self):
        """Test loading configuration from YAML file."""
        test_config = """
quotes:
  quote_tag: "sayings"
  default_reload_interval: 600
  use_weighted_random: true
  template_folder: "Templates"

database:
  filename: "test.db"
"""
        with open(self.config_path, 'w') as f:
            f.write(test_config)

        config = ConfigManager(str(self.config_path))

        self.assertEqual(config.database_filename, "test.db")
        self.assertEqual(config.quote_settings().template_folder, "Templates")

        settings = config.quote_settings()
        self.assertEqual(settings.quote_tag, "sayings")
        self.assertEqual(settings.default_reload_interval, 600)
        self.assertTrue(settings.use_weighted_random)
        # Keys missing from the file take the model defaults
        self.assertEqual(settings.minimal_quote_length, 5)
        self.assertFalse(settings.weighted_on_creation)

    def test_broken_yaml_falls_back_to_defaults(self):
        """Test that an unparsable file does not break startup."""
        with open(self.config_path, 'w') as f:
            f.write("quotes: [unclosed")

        config = ConfigManager(str(self.config_path))
        self.assertEqual(config.get("quotes.quote_tag"), "quotes")

    def test_dot_notation_access(self):
        """Test accessing config values with dot notation."""
        config = ConfigManager(str(self.config_path))

        self.assertEqual(config.get("quotes.quote_tag"), "quotes")
        self.assertEqual(config.get("paths.log_file"), "localquotes.log")
        self.assertEqual(config.get("nonexistent.key", "default"), "default")

    def test_config_reload(self):
        """Test configuration reloading."""
        with open(self.config_path, 'w') as f:
            f.write("quotes:\n  template_folder: 'One'")

        config = ConfigManager(str(self.config_path))
        self.assertEqual(config.quote_settings().template_folder, "One")

        with open(self.config_path, 'w') as f:
            f.write("quotes:\n  template_folder: 'Two'")

        config.reload()
        self.assertEqual(config.quote_settings().template_folder, "Two")


class TestDataModels(unittest.TestCase):
    """Test data model validation and functionality."""

    def test_quote_is_frozen(self):
        """Quotes can't be changed once in the vault."""
        quote = Quote(author="Seneca", text="Begin at once to live.", tags={"life"})

        self.assertEqual(quote.tags, frozenset({"life"}))
        with self.assertRaises(ValidationError):
            quote.text = "Something else"

    def test_quote_tags_are_normalised(self):
        """Test that tags are stored lower-cased and without '#'."""
        quote = Quote(author="Seneca", text="Begin at once to live.", tags=["Stoic", "#Life", " "])

        self.assertEqual(quote.tags, frozenset({"stoic", "life"}))

    def test_quote_to_content(self):
        """Test that content drops the tags."""
        quote = Quote(author="Seneca", text="Begin at once to live.", tags={"life"})
        content = quote.to_content()

        self.assertEqual(content, QuoteContent(author="Seneca", text="Begin at once to live."))

    def test_block_metadata_defaults(self):
        """Test BlockMetadata optional fields."""
        bm = BlockMetadata(id="abc", content=QuoteContent(author="A", text="Text"))

        self.assertIsNone(bm.search)
        self.assertIsNone(bm.refresh)
        self.assertIsNone(bm.custom_class)
        self.assertEqual(bm.last_update, 0)

    def test_settings_validation(self):
        """Test that settings reject impossible values."""
        with self.assertRaises(ValidationError):
            LocalQuotesSettings(default_reload_interval=-1)
        with self.assertRaises(ValidationError):
            LocalQuotesSettings(auto_generated_id_length=0)


class TestParser(unittest.TestCase):
    """Test block body parsing."""

    def test_parse_full_block(self):
        """Test a block declaring every field."""
        descriptor = parse_code_block(
            "id: morning\nsearch: Seneca | #stoic\nrefresh: 3600\nclass: wide muted"
        )

        self.assertEqual(descriptor.id, "morning")
        self.assertEqual(descriptor.search, "Seneca | #stoic")
        self.assertEqual(descriptor.refresh, 3600)
        self.assertEqual(descriptor.custom_class, "wide muted")

    def test_absent_fields_are_none(self):
        """Test that missing fields decode to None."""
        descriptor = parse_code_block("search: Seneca")

        self.assertIsNone(descriptor.id)
        self.assertIsNone(descriptor.refresh)
        self.assertIsNone(descriptor.custom_class)

    def test_malformed_body_does_not_raise(self):
        """Test garbage bodies and bad refresh values."""
        descriptor = parse_code_block("just some text\n: no key\nrefresh: soon\nid:")

        self.assertIsNone(descriptor.id)
        self.assertIsNone(descriptor.search)
        self.assertIsNone(descriptor.refresh)

    def test_negative_refresh_is_ignored(self):
        """Test that negative refresh intervals are dropped."""
        self.assertIsNone(parse_code_block("id: a\nsearch: b\nrefresh: -5").refresh)

    def test_values_keep_colons_and_hashes(self):
        """Test that only the first colon splits key and value."""
        descriptor = parse_code_block("id: a\nsearch: #time: now")
        self.assertEqual(descriptor.search, "#time: now")

    def test_custom_class_aliases(self):
        """Test the accepted spellings of the class key."""
        self.assertEqual(parse_code_block("customClass: red").custom_class, "red")
        self.assertEqual(parse_one_time_code_block("class: red").custom_class, "red")

    def test_parse_one_time_block(self):
        """Test one-time block bodies."""
        descriptor = parse_one_time_code_block("search: random\nclass: big")

        self.assertEqual(descriptor.search, "random")
        self.assertEqual(descriptor.custom_class, "big")


class TestUtilityFunctions(unittest.TestCase):
    """Test utility functions."""

    def test_filename_from_path(self):
        """Test filename extraction from note paths."""
        self.assertEqual(filename_from_path("journals/2024_05_22.md"), "2024_05_22.md")
        self.assertEqual(filename_from_path("note.md"), "note.md")
        self.assertEqual(filename_from_path("a\\b\\c.md"), "c.md")

    def test_is_inside_folder(self):
        """Test template folder prefix matching."""
        self.assertTrue(is_inside_folder("Templates/daily.md", "Templates"))
        self.assertTrue(is_inside_folder("/Templates/daily.md", "Templates/"))
        self.assertTrue(is_inside_folder("Templates/sub/daily.md", "Templates"))
        self.assertFalse(is_inside_folder("journals/daily.md", "Templates"))
        self.assertFalse(is_inside_folder("journals/daily.md", ""))

    def test_generate_block_id(self):
        """Test generated ids have the requested length and alphabet."""
        block_id = generate_block_id(8)

        self.assertEqual(len(block_id), 8)
        self.assertTrue(block_id.isalnum())
        self.assertEqual(block_id, block_id.lower())


class TestBlockStores(unittest.TestCase):
    """Test the keyed block stores."""

    def _bm(self, block_id, author="A"):
        return BlockMetadata(id=block_id, search=author, content=QuoteContent(author=author, text="Text"))

    def test_upsert_and_get(self):
        """Test one entry per identity."""
        store = BlockMetadataStore()
        store.upsert(self._bm("a"))
        store.upsert(self._bm("b"))
        store.upsert(self._bm("a", author="B"))

        self.assertEqual(len(store), 2)
        self.assertEqual(store.get("a").content.author, "B")
        self.assertIsNone(store.get("missing"))
        self.assertIsNone(store.get(None))

    def test_all_keeps_insertion_order(self):
        """Test the ordered listing view."""
        store = BlockMetadataStore([self._bm("b"), self._bm("a"), self._bm("c")])

        self.assertEqual([bm.id for bm in store.all()], ["b", "a", "c"])
        self.assertFalse(store.dirty)

    def test_dirty_flag(self):
        """Test dirty tracking for persistence."""
        store = OneTimeBlockStore()
        self.assertFalse(store.dirty)

        store.upsert(OneTimeBlock(filename="x.md", content=QuoteContent(author="A", text="T")))
        self.assertTrue(store.dirty)

        store.mark_clean()
        self.assertFalse(store.dirty)

        store.touch()
        self.assertTrue(store.dirty)

    def test_clear(self):
        """Test bulk clearing."""
        store = BlockMetadataStore([self._bm("a"), self._bm("b")])

        self.assertEqual(store.clear(), 2)
        self.assertEqual(len(store), 0)
        self.assertTrue(store.dirty)

    def test_states_without_identity_are_rejected(self):
        """Test that synthetic states can't be stored."""
        store = BlockMetadataStore()
        with self.assertRaises(ValueError):
            store.upsert(self._bm(None))


class TestDatabaseManager(unittest.TestCase):
    """Test database persistence functionality."""

    def setUp(self):
        """Set up test database."""
        self.temp_dir = tempfile.mkdtemp()
        self.db_path = Path(self.temp_dir) / "test.db"

    def tearDown(self):
        """Clean up test database."""
        shutil.rmtree(self.temp_dir)

    def test_database_initialization(self):
        """Test database creation and table initialization."""
        with DatabaseManager(str(self.db_path)) as db:
            db.initialize_database()

            self.assertTrue(self.db_path.exists())
            self.assertIsNone(db.load_settings())
            self.assertEqual(db.load_quotes(), [])
            self.assertEqual(db.load_block_metadata(), [])
            self.assertEqual(db.load_one_time_blocks(), [])

    def test_operations_require_connection(self):
        """Test that a closed manager refuses to work."""
        db = DatabaseManager(str(self.db_path))
        with self.assertRaises(RuntimeError):
            db.initialize_database()
        with self.assertRaises(RuntimeError):
            db.load_quotes()

    def test_state_survives_reconnect(self):
        """Test that saved state is there in the next session."""
        settings = LocalQuotesSettings(template_folder="Templates", use_weighted_random=True)
        quotes = [
            Quote(author="Seneca", text="Begin at once to live.", tags={"life", "action"}),
            Quote(author="Epictetus", text="First say to yourself what you would be.")
        ]
        block = BlockMetadata(
            id="morning", search="Seneca", content=quotes[0].to_content(),
            custom_class="wide", refresh=None, last_update=1700000000
        )
        pinned = OneTimeBlock(
            filename="2024-05-22.md", search="random", content=quotes[1].to_content()
        )

        with DatabaseManager(str(self.db_path)) as db:
            db.initialize_database()
            db.save_settings(settings)
            db.save_quotes(quotes)
            db.save_block_metadata([block])
            db.save_one_time_blocks([pinned])

        with DatabaseManager(str(self.db_path)) as db:
            self.assertEqual(db.load_settings(), settings)
            self.assertEqual(db.load_quotes(), quotes)
            self.assertEqual(db.load_block_metadata(), [block])
            self.assertEqual(db.load_one_time_blocks(), [pinned])

    def test_save_replaces_previous_rows(self):
        """Test that a save reflects removals, such as a bulk clear."""
        content = QuoteContent(author="A", text="Text")

        with DatabaseManager(str(self.db_path)) as db:
            db.initialize_database()
            db.save_block_metadata([
                BlockMetadata(id="a", content=content),
                BlockMetadata(id="b", content=content)
            ])
            db.save_block_metadata([BlockMetadata(id="b", content=content)])

            self.assertEqual([bm.id for bm in db.load_block_metadata()], ["b"])

            db.save_block_metadata([])
            self.assertEqual(db.load_block_metadata(), [])


if __name__ == '__main__':
    unittest.main(verbosity=2)
