#!/usr/bin/env python3
"""
Local Quotes - cached quote blocks for your notes

Main entry point for Local Quotes. Imports quote listings into the vault,
resolves the quote blocks of a note and manages the cached block states.
"""

import argparse
import logging
import re
import sys
from pathlib import Path
from typing import List, Tuple

from localquotes import LocalQuotes
from localquotes.config import config
from localquotes.database import DatabaseManager
from localquotes.importers import BaseImporter, LogseqEDNImporter, MarkdownImporter, MockImporter
from localquotes.models import QuoteContent


RECURRING_FENCE = "localquote"
ONE_TIME_FENCE = "localquote-once"

FENCE_PATTERN = re.compile(
    rf"^```({ONE_TIME_FENCE}|{RECURRING_FENCE})[ \t]*\n(.*?)^```",
    re.MULTILINE | re.DOTALL
)


def setup_logging():
    """Configure logging for the application."""
    level = getattr(logging, config.get("logging.level", "INFO").upper())
    format_str = config.get("logging.format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    log_file = config.log_filename

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stderr),
            logging.FileHandler(log_file)
        ]
    )


def find_quote_blocks(note_text: str) -> List[Tuple[str, str]]:
    """
    Find the quote blocks of a note.

    Args:
        note_text: Markdown contents of the note

    Returns:
        (fence language, block body) pairs in note order
    """
    return [(m.group(1), m.group(2)) for m in FENCE_PATTERN.finditer(note_text)]


def format_content(content: QuoteContent) -> str:
    """Plain-text rendering of a resolved quote."""
    return f"{content.text}\n— {content.author}"


def note_source_path(note_path: Path, notes_root: Path) -> str:
    """
    Vault-relative path of a note, as used for template folder checks.

    Raises:
        ValueError: If the note is not inside the notes root
    """
    try:
        return note_path.resolve().relative_to(notes_root.resolve()).as_posix()
    except ValueError:
        raise ValueError(
            f"{note_path} is not inside the notes root {notes_root}; pass --notes-root"
        ) from None


def build_importer(args) -> BaseImporter:
    """Create the importer selected on the command line."""
    settings = config.quote_settings()

    if args.importer == "mock":
        return MockImporter()
    if args.importer == "logseq":
        if not args.path:
            raise ValueError("--path is required for the logseq importer")
        return LogseqEDNImporter(args.path, settings.quote_tag, settings.minimal_quote_length)
    if args.importer == "markdown":
        return MarkdownImporter(args.path or config.notes_directory, settings.quote_tag,
                                settings.minimal_quote_length)
    raise ValueError(f"Unknown importer type: {args.importer}")


def confirm_clear(what: str) -> bool:
    """
    Ask user to confirm clearing cached block states.

    Returns:
        True if user confirms, False otherwise
    """
    print(f"\nThis will forget all {what}. Quotes will be picked again on next use.")

    while True:
        response = input("Do you want to continue? (yes/no): ").strip().lower()
        if response in ['yes', 'y']:
            return True
        elif response in ['no', 'n']:
            return False
        else:
            print("Please enter 'yes' or 'no'")


def run_import(app: LocalQuotes, args):
    """Replace the quote vault with the quotes of the selected importer."""
    count = app.load_vault(build_importer(args))
    app.save()
    print(f"Imported {count} quotes.")


def run_render(app: LocalQuotes, args):
    """Resolve and print every quote block of a note."""
    note_path = Path(args.note)
    note_text = note_path.read_text(encoding="utf-8")
    source_path = note_source_path(note_path, Path(args.notes_root or config.notes_directory))

    blocks = find_quote_blocks(note_text)
    if not blocks:
        print(f"No quote blocks found in {note_path}")
        return

    for language, body in blocks:
        if language == ONE_TIME_FENCE:
            state = app.select_one_time_block(body, source_path)
        else:
            state = app.select_block_metadata(body)
        print(format_content(state.content))
        print()

    app.save()


def run_new_block(app: LocalQuotes, args):
    """Print a new recurring block with a generated id."""
    body = app.new_block_source(args.search, args.refresh, args.custom_class)
    print(f"```{RECURRING_FENCE}\n{body}\n```")


def run_list(app: LocalQuotes, args):
    """List cached block states."""
    print(f"Quote vault: {len(app.quote_vault)} quotes")

    print(f"\nRecurring blocks ({len(app.block_metadata)}):")
    for bm in app.block_metadata.all():
        refresh = "default" if bm.refresh is None else f"{bm.refresh}s"
        print(f"  {bm.id}: search='{bm.search}' refresh={refresh} -> {bm.content.author}")

    print(f"\nOne-time blocks ({len(app.one_time_blocks)}):")
    for otb in app.one_time_blocks.all():
        print(f"  {otb.filename}: search='{otb.search}' -> {otb.content.author}")


def run_clear(app: LocalQuotes, args):
    """Bulk clear one of the block stores."""
    if args.command == "clear-blocks":
        if args.yes or confirm_clear("recurring block metadata"):
            print(f"Cleared {app.clear_block_metadata()} recurring blocks.")
    else:
        if args.yes or confirm_clear("one-time blocks"):
            print(f"Cleared {app.clear_one_time_blocks()} one-time blocks.")


COMMANDS = {
    "import": run_import,
    "render": run_render,
    "new-block": run_new_block,
    "list": run_list,
    "clear-blocks": run_clear,
    "clear-one-time": run_clear,
}


def parse_arguments(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Local Quotes - cached quote blocks for your notes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py import --importer markdown --path ~/vault     # Load quote listings from notes
  python main.py import --importer logseq --path ~/logseq      # Load quote listings from Logseq
  python main.py render ~/vault/journal/today.md --notes-root ~/vault   # Print the quotes of a note
  python main.py new-block --search "Seneca | #stoic"          # Create a block body
  python main.py clear-one-time --yes                          # Forget pinned one-time quotes
        """
    )

    parser.add_argument(
        "--db",
        type=str,
        default=None,
        help="Path to the state database (default: from config.yaml)"
    )

    parser.add_argument(
        "--version",
        action="version",
        version="Local Quotes 0.1.0"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    import_parser = subparsers.add_parser("import", help="Load quotes into the vault")
    import_parser.add_argument(
        "--importer",
        choices=["markdown", "logseq", "mock"],
        default="markdown",
        help="Quote source to use (default: markdown)"
    )
    import_parser.add_argument("--path", type=str, help="Notes folder or Logseq directory")

    render_parser = subparsers.add_parser("render", help="Resolve the quote blocks of a note")
    render_parser.add_argument("note", type=str, help="Markdown note to render")
    render_parser.add_argument(
        "--notes-root",
        type=str,
        help="Root of the notes, for template folder checks (default: from config.yaml)"
    )

    new_block_parser = subparsers.add_parser("new-block", help="Print a new quote block")
    new_block_parser.add_argument("--search", required=True, help="Search expression")
    new_block_parser.add_argument("--refresh", type=int, help="Refresh interval in seconds")
    new_block_parser.add_argument("--class", dest="custom_class", help="Extra CSS classes")

    subparsers.add_parser("list", help="List cached blocks")

    for name, what in (("clear-blocks", "recurring block metadata"), ("clear-one-time", "one-time blocks")):
        clear_parser = subparsers.add_parser(name, help=f"Clear {what}")
        clear_parser.add_argument("--yes", action="store_true", help="Don't ask for confirmation")

    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point."""
    args = parse_arguments(argv)
    setup_logging()

    with DatabaseManager(args.db or config.database_filename) as db:
        app = LocalQuotes.from_database(db, settings=config.quote_settings())

        try:
            COMMANDS[args.command](app, args)

        except KeyboardInterrupt:
            logging.info("Interrupted by user")
            print("\nInterrupted.")

        except (ValueError, OSError) as e:
            logging.error(f"Command '{args.command}' failed: {e}")
            print(f"\n{args.command} failed: {e}")
            sys.exit(1)

        finally:
            if not app.save():
                logging.warning("Some Local Quotes state could not be saved")


if __name__ == "__main__":
    main()
