"""
Primality queries over a PrimalityTable.

Responsibility: membership, listing and nearest-prime search. All state
lives in the table; PrimeQueries only holds a reference to it.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

import numpy as np

from .config import DEFAULTS, validate_config
from .errors import InvalidArgument, check_bound, check_natural
from .table import PrimalityTable

logger = logging.getLogger(__name__)


class PrimeQueries:
    """
    Query operations backed by a shared primality table.

    Parameters
    ----------
    table : PrimalityTable, optional
        Table to read and grow. A fresh, private table when omitted.
    search_window : int
        Entries examined per step of the upward nearest-prime scan.
    """

    def __init__(self, table: Optional[PrimalityTable] = None,
                 search_window: int = DEFAULTS['search_window']):
        search_window = check_natural(search_window, 'search_window')
        if search_window == 0:
            raise InvalidArgument("search_window must be positive")
        self.table = table if table is not None else PrimalityTable()
        self.search_window = search_window

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> 'PrimeQueries':
        """Build queries and their table from a config mapping."""
        config = validate_config(config)
        table = PrimalityTable(
            initial_capacity=config['initial_capacity'],
            max_capacity=config['max_capacity'],
        )
        return cls(table, search_window=config['search_window'])

    def is_prime(self, n: int) -> bool:
        return self.table.at(n)

    def list_primes(self, n: int) -> np.ndarray:
        """
        Return all primes strictly below n, ascending.

        Parameters
        ----------
        n : int
            Exclusive upper bound.

        Returns
        -------
        np.ndarray
            Array of primes (int64), empty when n <= 2.
        """
        flags = self.table.snapshot(n)
        return np.flatnonzero(flags).astype(np.int64)

    def get_sieve(self, n: int) -> np.ndarray:
        """Return a copy of the primality flags for [0, n)."""
        return self.table.snapshot(n)

    def labeled_sieve(self, n: int) -> List[Dict[int, bool]]:
        """
        Return the flags for [0, n) as one {number: is_prime} dict each.

        e.g. labeled_sieve(4) -> [{0: False}, {1: False}, {2: True}, {3: True}]
        """
        return [{i: bool(flag)} for i, flag in enumerate(self.get_sieve(n))]

    def nearest_prime(self, n: int, lower: Optional[int] = None,
                      upper: Optional[int] = None) -> Optional[int]:
        """
        Return the prime closest to n within [lower, upper].

        n itself is returned when prime. Otherwise the nearest prime below
        and above n are compared; on equal distance the smaller one wins.

        Parameters
        ----------
        n : int
            Starting point; must lie within the bounds.
        lower : int, optional
            Inclusive lower bound. None means unbounded.
        upper : int, optional
            Inclusive upper bound. None means unbounded, in which case the
            upward scan stops at max(2n, 2): by Bertrand's postulate a prime
            always lies in (n, 2n) for n >= 2.

        Returns
        -------
        int or None
            The nearest prime, or None when no prime lies within the bounds.
        """
        n = check_natural(n)
        lower = check_bound(lower, 'lower')
        upper = check_bound(upper, 'upper')

        if lower is not None and upper is not None and lower > upper:
            raise InvalidArgument(f"lower bound {lower} is greater than upper bound {upper}")
        if lower is not None and n < lower:
            raise InvalidArgument(f"n={n} is below lower bound {lower}")
        if upper is not None and n > upper:
            raise InvalidArgument(f"n={n} is above upper bound {upper}")

        if self.is_prime(n):
            return n

        below = self._prime_below(n, 0 if lower is None else max(lower, 0))
        ceiling = max(2 * n, 2) if upper is None else upper
        above = self._prime_above(n, ceiling)

        if below is None:
            return above
        if above is None:
            return below
        if above - n < n - below:
            return above
        return below

    def _prime_below(self, n: int, floor: int) -> Optional[int]:
        """Greatest prime p with floor <= p < n."""
        if floor >= n:
            return None
        # n <= capacity here: is_prime(n) has already grown the table past n
        candidates = np.flatnonzero(self.table.window(floor, n))
        if len(candidates) == 0:
            return None
        return floor + int(candidates[-1])

    def _prime_above(self, n: int, ceiling: int) -> Optional[int]:
        """Least prime p with n < p <= ceiling, scanned window by window."""
        start = n + 1
        while start <= ceiling:
            stop = min(start + self.search_window, ceiling + 1)
            logger.debug("Scanning [%d, %d) for a prime above %d", start, stop, n)
            candidates = np.flatnonzero(self.table.window(start, stop))
            if len(candidates) > 0:
                return start + int(candidates[0])
            start = stop
        return None
