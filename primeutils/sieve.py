"""
Incremental Sieve of Eratosthenes.

Responsibility: marking composites in a boolean flag array. No storage,
no locking, no queries.
"""

from math import isqrt

import numpy as np

from .errors import InvalidArgument, check_natural


def extend_sieve(flags: np.ndarray, old_length: int, new_length: int) -> np.ndarray:
    """
    Mark composites in flags[old_length:new_length] in place.

    flags[:old_length] must already be correct and flags[old_length:new_length]
    must be True. Entries below old_length are never written.

    Parameters
    ----------
    flags : np.ndarray
        Boolean array with len(flags) >= new_length.
    old_length : int
        Number of leading entries already sieved.
    new_length : int
        Number of leading entries correct on return.

    Returns
    -------
    np.ndarray
        The same array, for chaining.
    """
    old_length = check_natural(old_length, 'old_length')
    new_length = check_natural(new_length, 'new_length')
    if new_length > len(flags):
        raise InvalidArgument(
            f"new_length {new_length} exceeds buffer length {len(flags)}"
        )
    if old_length >= new_length or new_length <= 2:
        return flags

    for p in range(2, isqrt(new_length - 1) + 1):
        if not flags[p]:
            continue
        # First multiple of p inside the fresh range, never below p^2
        first = -(-old_length // p) * p
        start = max(p * p, first)
        flags[start:new_length:p] = False

    return flags


def prime_flags_upto(N: int) -> np.ndarray:
    """
    Return boolean array where flags[i] is True iff i is prime.

    Sieves from scratch, with no shared state.

    Parameters
    ----------
    N : int
        Upper bound (inclusive).

    Returns
    -------
    np.ndarray
        Boolean array of length N+1.
    """
    N = check_natural(N, 'N')
    flags = np.ones(N + 1, dtype=bool)
    flags[:2] = False
    return extend_sieve(flags, 0, N + 1)


def primes_upto(N: int) -> np.ndarray:
    """Ascending int64 array of every prime <= N, sieved from scratch."""
    return np.flatnonzero(prime_flags_upto(N)).astype(np.int64)
