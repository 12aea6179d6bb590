"""
Keyed block stores for Local Quotes.

Each store holds one state per identity (block id or note filename) in
insertion order. Lookups are by key; the ordered view is kept for listing
and bulk clearing.

A store is shared between resolvers and the clearing commands, so it carries
its own re-entrant lock. Resolvers hold `store.lock` across a whole
lookup-then-mutate section.
"""

import logging
import threading
from typing import Callable, Dict, Generic, Iterable, List, Optional, TypeVar

from ..models import BlockMetadata, OneTimeBlock


StateT = TypeVar("StateT")


class KeyedStore(Generic[StateT]):
    """
    Insertion-ordered map of block states with a dirty flag.
    """

    def __init__(self, key_of: Callable[[StateT], Optional[str]], states: Optional[Iterable[StateT]] = None):
        """
        Initialize the store.

        Args:
            key_of: Returns the identity of a state
            states: Initial states, e.g. loaded from the database
        """
        self._key_of = key_of
        self._states: Dict[str, StateT] = {}
        self.lock = threading.RLock()
        self.dirty = False

        for state in states or []:
            self._states[self._require_key(state)] = state

    def _require_key(self, state: StateT) -> str:
        key = self._key_of(state)
        if not key:
            raise ValueError(f"Cannot store a state without identity: {state!r}")
        return key

    def get(self, key: Optional[str]) -> Optional[StateT]:
        """Return the state stored under a key, or None."""
        if key is None:
            return None
        with self.lock:
            return self._states.get(key)

    def upsert(self, state: StateT) -> None:
        """Insert a new state or replace the one with the same identity."""
        key = self._require_key(state)
        with self.lock:
            self._states[key] = state
            self.dirty = True

    def touch(self) -> None:
        """Flag an in-place mutation of a stored state."""
        with self.lock:
            self.dirty = True

    def all(self) -> List[StateT]:
        """All states in insertion order."""
        with self.lock:
            return list(self._states.values())

    def clear(self) -> int:
        """
        Remove every state.

        Returns:
            The number of states removed
        """
        with self.lock:
            removed = len(self._states)
            self._states.clear()
            self.dirty = True
        logging.info(f"Cleared {removed} entries from {type(self).__name__}")
        return removed

    def mark_clean(self) -> None:
        """Reset the dirty flag once the state has been persisted."""
        with self.lock:
            self.dirty = False

    def __len__(self) -> int:
        with self.lock:
            return len(self._states)

    def __contains__(self, key: object) -> bool:
        with self.lock:
            return key in self._states


class BlockMetadataStore(KeyedStore[BlockMetadata]):
    """Recurring block states keyed by block id."""

    def __init__(self, states: Optional[Iterable[BlockMetadata]] = None):
        super().__init__(lambda bm: bm.id, states)


class OneTimeBlockStore(KeyedStore[OneTimeBlock]):
    """One-time block states keyed by note filename."""

    def __init__(self, states: Optional[Iterable[OneTimeBlock]] = None):
        super().__init__(lambda otb: otb.filename, states)
