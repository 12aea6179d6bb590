"""Block state stores."""

from .block_store import KeyedStore, BlockMetadataStore, OneTimeBlockStore

__all__ = ["KeyedStore", "BlockMetadataStore", "OneTimeBlockStore"]
