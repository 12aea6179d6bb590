"""
Resolver for recurring quote blocks.

A recurring block keeps its quote until its refresh interval elapses or its
declaration changes. The refresh interval comes from the block itself or,
when the block declares none, from the global default.
"""

import logging
import random
from typing import Callable, Optional, Sequence

from ..fallback import ERROR_TEXT, fallback_content
from ..models import BlockDescriptor, BlockMetadata, Quote
from ..selection import search_quote
from ..stores import BlockMetadataStore
from ..utils import get_current_seconds


def error_block_metadata() -> BlockMetadata:
    """Synthetic state returned for invalid blocks; never stored."""
    return BlockMetadata(
        id=None,
        search=None,
        content=fallback_content(ERROR_TEXT),
        custom_class=None,
        refresh=None,
        last_update=0
    )


def make_block_metadata(
    descriptor: BlockDescriptor,
    vault: Sequence[Quote],
    store: BlockMetadataStore,
    weighted: bool = False,
    rng: Optional[random.Random] = None,
    clock: Callable[[], int] = get_current_seconds
) -> BlockMetadata:
    """
    Resolve a block seen for the first time and add it to the store.
    """
    block_metadata = BlockMetadata(
        id=descriptor.id,
        search=descriptor.search,
        content=search_quote(vault, descriptor.search, weighted, rng),
        custom_class=descriptor.custom_class,
        refresh=descriptor.refresh,
        last_update=clock()
    )
    store.upsert(block_metadata)

    logging.info(f"Created block metadata '{descriptor.id}' for search '{descriptor.search}'")
    return block_metadata


def update_block_metadata(
    prev: BlockMetadata,
    descriptor: BlockDescriptor,
    vault: Sequence[Quote],
    store: BlockMetadataStore,
    default_reload_interval: int,
    weighted: bool = False,
    rng: Optional[random.Random] = None,
    clock: Callable[[], int] = get_current_seconds
) -> BlockMetadata:
    """
    Apply a block's current declaration to its stored state.

    Changing the search or the refresh interval pulls a new quote at once,
    a class change only restyles. Independently, an expired interval pulls a
    new quote and restarts the timer.
    """
    changed = False

    if prev.search != descriptor.search:
        prev.search = descriptor.search
        prev.content = search_quote(vault, prev.search, weighted, rng)
        changed = True
        logging.info(f"Block '{prev.id}' search changed to '{prev.search}'")

    if prev.custom_class != descriptor.custom_class:
        prev.custom_class = descriptor.custom_class
        changed = True

    if prev.refresh != descriptor.refresh:
        prev.refresh = descriptor.refresh
        prev.content = search_quote(vault, prev.search, weighted, rng)
        changed = True
        logging.info(f"Block '{prev.id}' refresh interval changed to {prev.refresh}")

    refresh_interval = default_reload_interval if prev.refresh is None else prev.refresh
    now = clock()

    if prev.last_update + refresh_interval < now:
        prev.content = search_quote(vault, prev.search, weighted, rng)
        prev.last_update = max(prev.last_update, now)
        changed = True
        logging.debug(f"Block '{prev.id}' expired, pulled a new quote")

    if changed:
        store.touch()

    return prev


def select_block_metadata(
    descriptor: BlockDescriptor,
    vault: Sequence[Quote],
    store: BlockMetadataStore,
    default_reload_interval: int,
    weighted: bool = False,
    weighted_on_creation: bool = False,
    rng: Optional[random.Random] = None,
    clock: Callable[[], int] = get_current_seconds
) -> BlockMetadata:
    """
    Resolve a recurring block against the store.

    Args:
        descriptor: Parsed block body
        vault: Quotes to choose from
        store: Recurring block states
        default_reload_interval: Refresh interval for blocks that declare none
        weighted: Use weighted random when pulling a new quote
        weighted_on_creation: Also use weighted random for a block's first quote
        rng: Random source
        clock: Returns the current epoch seconds

    Returns:
        The stored state, or a synthetic error state for invalid blocks. The
        stored state is mutated by later resolutions of the same id.
    """
    if not (descriptor.id and descriptor.search) or len(vault) == 0:
        logging.warning(
            f"Invalid quote block (id={descriptor.id!r}, search={descriptor.search!r}, "
            f"vault size={len(vault)})"
        )
        return error_block_metadata()

    with store.lock:
        prev = store.get(descriptor.id)
        if prev is None:
            return make_block_metadata(
                descriptor, vault, store, weighted and weighted_on_creation, rng, clock
            )
        return update_block_metadata(
            prev, descriptor, vault, store, default_reload_interval, weighted, rng, clock
        )
