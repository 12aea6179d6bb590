"""Quote vault importers for various source formats."""

from .base import BaseImporter
from .mock import MockImporter
from .markdown import MarkdownImporter
from .logseq_edn import LogseqEDNImporter

__all__ = ["BaseImporter", "MockImporter", "MarkdownImporter", "LogseqEDNImporter"]
