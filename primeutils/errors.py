"""
Error taxonomy and argument checks.

Responsibility: reject out-of-domain inputs before they reach the table.
A missing nearest prime is a result (None), not an error, and has no
class here.
"""

from numbers import Integral
from typing import Optional


class InvalidArgument(ValueError):
    """Negative, non-integer or otherwise out-of-domain input."""


class ResourceExhausted(MemoryError):
    """The primality table cannot grow to the requested capacity."""


def check_natural(n, name: str = 'n') -> int:
    """
    Validate that n is a natural number (integer >= 0).

    bool is rejected even though it is an Integral subclass.
    numpy integer scalars are accepted and converted to int.

    Returns
    -------
    int
        n as a Python int.
    """
    if isinstance(n, bool) or not isinstance(n, Integral):
        raise InvalidArgument(f"{name} must be an integer, got {type(n).__name__}")
    n = int(n)
    if n < 0:
        raise InvalidArgument(f"{name} must be >= 0, got {n}")
    return n


def check_bound(value, name: str) -> Optional[int]:
    """Validate an optional search bound; None means unbounded."""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise InvalidArgument(f"{name} must be an integer or None, got {type(value).__name__}")
    return int(value)
