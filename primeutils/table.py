"""
Growable primality table.

A PrimalityTable owns one boolean numpy buffer whose entry i is True iff i
is prime, plus the lock that serializes its growth. Only the first
`capacity` entries are sieved; the buffer itself is over-allocated
geometrically so that a run of small growth steps does not recopy the
whole table each time. Entries below the current capacity never change
once set, so reads of them take no lock.
"""

import logging
import threading
from typing import Optional

import numpy as np

from .errors import InvalidArgument, ResourceExhausted, check_natural
from .sieve import extend_sieve

logger = logging.getLogger(__name__)


class PrimalityTable:
    """
    Process-wide store of known primality flags.

    Parameters
    ----------
    initial_capacity : int
        Number of entries to sieve at construction.
    max_capacity : int, optional
        Growth ceiling. None means limited only by available memory.
    """

    def __init__(self, initial_capacity: int = 0, max_capacity: Optional[int] = None):
        if max_capacity is not None:
            max_capacity = check_natural(max_capacity, 'max_capacity')
        self._max_capacity = max_capacity
        self._lock = threading.Lock()
        self._flags = np.zeros(0, dtype=bool)
        self._capacity = 0
        self.ensure_capacity(initial_capacity)

    @property
    def capacity(self) -> int:
        """Number of leading entries whose primality is known."""
        return self._capacity

    @property
    def allocated(self) -> int:
        """Length of the backing buffer, always >= capacity."""
        return len(self._flags)

    @property
    def max_capacity(self) -> Optional[int]:
        return self._max_capacity

    def ensure_capacity(self, n: int) -> None:
        """
        Grow the table so that flags[0..n) are known.

        A no-op when the table is already large enough. Only the entries
        in [capacity, n) are sieved. The buffer is reallocated (and the
        known entries copied) only when n exceeds its length, and then to
        at least twice its previous length. On failure the table keeps its
        previous capacity and contents.

        Raises
        ------
        ResourceExhausted
            When n exceeds max_capacity or the buffer cannot be allocated.
        """
        n = check_natural(n)
        if n <= self._capacity:
            return

        if self._max_capacity is not None and n > self._max_capacity:
            raise ResourceExhausted(
                f"capacity {n:,} exceeds max_capacity {self._max_capacity:,}"
            )

        with self._lock:
            old_length = self._capacity
            if n <= old_length:
                # Grown by another thread while we waited
                return

            flags = self._flags
            if n > len(flags):
                flags = self._reallocate(n)

            # Slots at and above capacity are not visible to readers
            flags[old_length:n] = True
            if old_length < 2:
                flags[old_length:min(2, n)] = False
            extend_sieve(flags, old_length, n)

            self._flags = flags
            self._capacity = n
            logger.debug("Extended primality table %d -> %d", old_length, n)

    def _reallocate(self, n: int) -> np.ndarray:
        """Return a larger buffer holding the known entries. Lock must be held."""
        size = max(n, 2 * len(self._flags))
        if self._max_capacity is not None:
            size = min(size, self._max_capacity)

        try:
            flags = np.empty(size, dtype=bool)
        except (MemoryError, ValueError, OverflowError) as exc:
            if size == n:
                raise ResourceExhausted(f"cannot allocate table of {n:,} entries") from exc
            # Headroom did not fit; try the exact size
            try:
                flags = np.empty(n, dtype=bool)
            except (MemoryError, ValueError, OverflowError) as exc:
                raise ResourceExhausted(f"cannot allocate table of {n:,} entries") from exc

        flags[:self._capacity] = self._flags[:self._capacity]
        logger.debug("Reallocated primality table buffer %d -> %d",
                     len(self._flags), len(flags))
        return flags

    def snapshot(self, n: int) -> np.ndarray:
        """Return an independent copy of flags[0..n)."""
        n = check_natural(n)
        self.ensure_capacity(n)
        return self._flags[:n].copy()

    def window(self, start: int, stop: int) -> np.ndarray:
        """Return an independent copy of flags[start:stop]."""
        start = check_natural(start, 'start')
        stop = check_natural(stop, 'stop')
        if start > stop:
            raise InvalidArgument(f"start {start} is greater than stop {stop}")
        self.ensure_capacity(stop)
        return self._flags[start:stop].copy()

    def at(self, n: int) -> bool:
        """Return whether n is prime, growing the table if needed."""
        n = check_natural(n)
        self.ensure_capacity(n + 1)
        return bool(self._flags[n])

    def __repr__(self) -> str:
        return (f"PrimalityTable(capacity={self._capacity}, allocated={self.allocated}, "
                f"max_capacity={self._max_capacity})")
