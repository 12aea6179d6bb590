"""
Resolver for one-time quote blocks.

A one-time block gets a quote once per note and keeps it: there is no
refresh interval, only a change of the declared search picks again. Notes in
the template folder never receive a quote, so a template can be edited
without pinning a quote to it.
"""

import logging
import random
from typing import Callable, Optional, Sequence

from ..fallback import (
    ERROR_TEXT,
    TEMPLATE_FOLDER_UNSET_TEXT,
    TEMPLATE_PLACEHOLDER_TEXT,
    fallback_content,
)
from ..models import OneTimeBlock, OneTimeBlockDescriptor, Quote
from ..selection import search_quote
from ..stores import OneTimeBlockStore
from ..utils import filename_from_path, is_inside_folder


def placeholder_one_time_block(text: str, custom_class: Optional[str] = None) -> OneTimeBlock:
    """Synthetic state shown instead of a quote; never stored."""
    return OneTimeBlock(
        filename=None,
        search=None,
        content=fallback_content(text),
        custom_class=custom_class
    )


def _save(saver: Optional[Callable[[], None]]) -> None:
    if saver is None:
        return
    try:
        saver()
    except Exception as e:
        logging.error(f"Failed to save one-time blocks, keeping them in memory: {e}")


def make_one_time_block(
    filename: str,
    descriptor: OneTimeBlockDescriptor,
    vault: Sequence[Quote],
    store: OneTimeBlockStore,
    weighted: bool = False,
    rng: Optional[random.Random] = None
) -> OneTimeBlock:
    """Pick the quote of a note seen for the first time."""
    one_time_block = OneTimeBlock(
        filename=filename,
        search=descriptor.search,
        content=search_quote(vault, descriptor.search, weighted, rng),
        custom_class=descriptor.custom_class
    )
    store.upsert(one_time_block)

    logging.info(f"Pinned one-time quote for '{filename}'")
    return one_time_block


def update_one_time_block(
    prev: OneTimeBlock,
    descriptor: OneTimeBlockDescriptor,
    vault: Sequence[Quote],
    store: OneTimeBlockStore,
    weighted: bool = False,
    rng: Optional[random.Random] = None
) -> bool:
    """
    Apply a block's current declaration to its pinned state.

    Returns:
        True if the stored state changed
    """
    changed = False

    if prev.custom_class != descriptor.custom_class:
        prev.custom_class = descriptor.custom_class
        changed = True

    if prev.search != descriptor.search:
        prev.search = descriptor.search
        prev.content = search_quote(vault, prev.search, weighted, rng)
        changed = True
        logging.info(f"One-time block '{prev.filename}' search changed, picked a new quote")

    if changed:
        store.touch()
    return changed


def select_one_time_block(
    descriptor: OneTimeBlockDescriptor,
    context_path: str,
    template_folder: Optional[str],
    vault: Sequence[Quote],
    store: OneTimeBlockStore,
    weighted: bool = False,
    rng: Optional[random.Random] = None,
    saver: Optional[Callable[[], None]] = None
) -> OneTimeBlock:
    """
    Resolve a one-time block for the note at `context_path`.

    Args:
        descriptor: Parsed block body
        context_path: Vault-relative path of the hosting note
        template_folder: Folder excluded from one-time quotes
        vault: Quotes to choose from
        store: One-time block states
        weighted: Use weighted random when picking
        rng: Random source
        saver: Called after the store changed; failures are only logged

    Returns:
        The pinned state, or a placeholder state that is not stored
    """
    if not template_folder:
        return placeholder_one_time_block(TEMPLATE_FOLDER_UNSET_TEXT, descriptor.custom_class)

    if is_inside_folder(context_path, template_folder):
        return placeholder_one_time_block(TEMPLATE_PLACEHOLDER_TEXT, descriptor.custom_class)

    if not descriptor.search:
        logging.warning(f"One-time block in '{context_path}' has no search")
        return placeholder_one_time_block(ERROR_TEXT, descriptor.custom_class)

    filename = filename_from_path(context_path)

    with store.lock:
        prev = store.get(filename)
        if prev is None:
            if len(vault) == 0:
                logging.warning(f"Quote vault is empty, not pinning a quote for '{filename}'")
                return placeholder_one_time_block(ERROR_TEXT, descriptor.custom_class)
            result = make_one_time_block(filename, descriptor, vault, store, weighted, rng)
            changed = True
        else:
            changed = update_one_time_block(prev, descriptor, vault, store, weighted, rng)
            result = prev

    if changed:
        _save(saver)
    return result
