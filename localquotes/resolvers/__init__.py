"""Block resolvers."""

from .block_metadata import select_block_metadata, error_block_metadata
from .one_time_block import select_one_time_block, placeholder_one_time_block

__all__ = [
    "select_block_metadata",
    "error_block_metadata",
    "select_one_time_block",
    "placeholder_one_time_block"
]
