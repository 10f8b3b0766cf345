"""
Module-level primality queries on one process-wide table.

Every call below shares the same PrimalityTable, so results computed for
one bound are reused by all later calls. Code that needs an isolated
table should build its own PrimeQueries instead.

    >>> from primeutils.primes import list_primes, nearest_prime
    >>> list_primes(20).tolist()
    [2, 3, 5, 7, 11, 13, 17, 19]
    >>> nearest_prime(10)
    11
"""

from typing import Any, Dict, List, Mapping, Optional

import numpy as np

from .config import DEFAULTS
from .queries import PrimeQueries

_queries = PrimeQueries.from_config(DEFAULTS)


def default_queries() -> PrimeQueries:
    """Return the process-wide PrimeQueries."""
    return _queries


def configure(config: Mapping[str, Any]) -> PrimeQueries:
    """
    Replace the process-wide table with one built from config.

    Results held by the previous table are discarded.
    """
    global _queries
    _queries = PrimeQueries.from_config(config)
    return _queries


def is_prime(n: int) -> bool:
    return _queries.is_prime(n)


def list_primes(n: int) -> np.ndarray:
    return _queries.list_primes(n)


def nearest_prime(n: int, lower: Optional[int] = None,
                  upper: Optional[int] = None) -> Optional[int]:
    return _queries.nearest_prime(n, lower, upper)


def get_sieve(n: int) -> np.ndarray:
    return _queries.get_sieve(n)


def labeled_sieve(n: int) -> List[Dict[int, bool]]:
    return _queries.labeled_sieve(n)
