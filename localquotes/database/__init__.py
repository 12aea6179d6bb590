"""Persistence for Local Quotes."""

from .manager import DatabaseManager

__all__ = ["DatabaseManager"]
