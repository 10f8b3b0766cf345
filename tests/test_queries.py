"""
Tests for PrimeQueries: membership, listing and nearest-prime search.
"""

import numpy as np
import pytest

from primeutils.errors import InvalidArgument
from primeutils.queries import PrimeQueries
from primeutils.sieve import primes_upto
from primeutils.table import PrimalityTable


@pytest.fixture
def queries():
    """Queries over a private, empty table."""
    return PrimeQueries(PrimalityTable())


def brute_nearest(n, lower=None, upper=None):
    """Nearest prime by scanning a fixed list, smaller one on ties."""
    primes = [int(p) for p in primes_upto(4 * n + 10)]
    if n in primes:
        return n
    lo = 0 if lower is None else lower
    hi = max(2 * n, 2) if upper is None else upper
    below = [p for p in primes if lo <= p < n]
    above = [p for p in primes if n < p <= hi]
    candidates = ([below[-1]] if below else []) + ([above[0]] if above else [])
    if not candidates:
        return None
    return min(candidates, key=lambda p: (abs(p - n), p))


class TestIsPrime:

    def test_edge_cases(self, queries):
        """0 and 1 are not prime, 2 is."""
        assert queries.is_prime(0) is False
        assert queries.is_prime(1) is False
        assert queries.is_prime(2) is True

    def test_trial_division_oracle(self, queries):
        for n in range(300):
            expected = n >= 2 and all(n % d for d in range(2, n))
            assert queries.is_prime(n) == expected, f"is_prime({n})"

    def test_larger_primes(self, queries):
        """Test some larger known primes."""
        for p in [7919, 104729, 1299709]:
            assert queries.is_prime(p), f"{p} should be prime"
        assert not queries.is_prime(7917)

    def test_descending_queries_reuse_table(self, queries):
        """Querying below the capacity does not grow the table."""
        queries.is_prime(1000)
        queries.is_prime(10)
        assert queries.table.capacity == 1001

    @pytest.mark.parametrize("bad", [-1, 3.0, "7", None, False])
    def test_invalid_argument(self, queries, bad):
        with pytest.raises(InvalidArgument):
            queries.is_prime(bad)


class TestListPrimes:

    def test_below_20(self, queries):
        assert queries.list_primes(20).tolist() == [2, 3, 5, 7, 11, 13, 17, 19]

    def test_bound_is_exclusive(self, queries):
        assert queries.list_primes(19).tolist() == [2, 3, 5, 7, 11, 13, 17]

    @pytest.mark.parametrize("n", [0, 1, 2])
    def test_empty_for_small_n(self, queries, n):
        assert len(queries.list_primes(n)) == 0

    def test_count_below_1000(self, queries):
        assert len(queries.list_primes(1000)) == 168

    def test_negative(self, queries):
        with pytest.raises(InvalidArgument):
            queries.list_primes(-5)


class TestGetSieve:

    def test_one_entry(self, queries):
        """get_sieve(1) is [False]."""
        assert queries.get_sieve(1).tolist() == [False]

    def test_copy(self, queries):
        flags = queries.get_sieve(10)
        flags[:] = True
        assert queries.get_sieve(10).tolist() == [
            False, False, True, True, False, True, False, True, False, False
        ]

    def test_dtype(self, queries):
        assert queries.get_sieve(5).dtype == bool

    def test_negative(self, queries):
        with pytest.raises(InvalidArgument):
            queries.get_sieve(-1)

    def test_labeled_sieve(self, queries):
        assert queries.labeled_sieve(6) == [
            {0: False}, {1: False}, {2: True}, {3: True}, {4: False}, {5: True}
        ]
        assert queries.labeled_sieve(0) == []


class TestNearestPrime:

    def test_prime_returns_itself(self, queries):
        assert queries.nearest_prime(13) == 13
        assert queries.nearest_prime(2) == 2

    def test_closer_above(self, queries):
        """10 is not prime; 11 is closer than 7."""
        assert queries.nearest_prime(10) == 11

    def test_closer_below(self, queries):
        """24: 23 is one away, 29 is five away."""
        assert queries.nearest_prime(24) == 23

    def test_upper_bound_blocks_upward(self, queries):
        """With upper=10 only 7 remains."""
        assert queries.nearest_prime(10, None, 10) == 7

    def test_lower_bound_blocks_downward(self, queries):
        assert queries.nearest_prime(24, 24, None) == 29

    def test_pinned_bounds_none_found(self, queries):
        """nearest_prime(8, 8, 8) has no candidate at all."""
        assert queries.nearest_prime(8, 8, 8) is None

    def test_window_without_primes(self, queries):
        """No prime lies in [24, 28]."""
        assert queries.nearest_prime(26, 24, 28) is None

    def test_tie_prefers_lower(self, queries):
        """9 is two away from both 7 and 11; the smaller wins."""
        assert queries.nearest_prime(9) == 7
        assert queries.nearest_prime(15) == 13

    @pytest.mark.parametrize("n", [0, 1])
    def test_below_two(self, queries, n):
        """The only candidate for 0 and 1 lies above them."""
        assert queries.nearest_prime(n) == 2

    def test_negative_lower_bound_allowed(self, queries):
        assert queries.nearest_prime(4, -100, 100) == 3

    def test_only_upward(self, queries):
        assert queries.nearest_prime(1, 0, 1) is None
        assert queries.nearest_prime(1, 1, 5) == 2

    def test_unbounded_upward_terminates(self, queries):
        """The gap after 1327 is 34; the upward scan still finds 1361."""
        assert queries.nearest_prime(1350, 1340) == 1361

    def test_small_search_window(self):
        """The upward scan crosses window boundaries."""
        queries = PrimeQueries(PrimalityTable(), search_window=1)
        assert queries.nearest_prime(1350, 1340) == 1361
        assert queries.nearest_prime(90, 90) == 97

    def test_grows_only_as_needed(self, queries):
        """The upward scan sieves window by window, not to 2n at once."""
        queries = PrimeQueries(PrimalityTable(), search_window=16)
        queries.nearest_prime(1000)
        assert queries.table.capacity < 2000

    def test_matches_brute_force(self, queries):
        for n in range(0, 400):
            assert queries.nearest_prime(n) == brute_nearest(n), f"nearest_prime({n})"

    def test_bounded_matches_brute_force(self, queries):
        rng = np.random.default_rng(7)
        for _ in range(200):
            n = int(rng.integers(0, 500))
            lower = n - int(rng.integers(0, 20))
            upper = n + int(rng.integers(0, 20))
            expected = brute_nearest(n, lower, upper)
            assert queries.nearest_prime(n, lower, upper) == expected, (
                f"nearest_prime({n}, {lower}, {upper})"
            )

    def test_lower_above_upper(self, queries):
        with pytest.raises(InvalidArgument):
            queries.nearest_prime(10, 12, 11)

    @pytest.mark.parametrize("lower, upper", [(11, None), (None, 9), (20, 30)])
    def test_n_outside_bounds(self, queries, lower, upper):
        with pytest.raises(InvalidArgument):
            queries.nearest_prime(10, lower, upper)

    @pytest.mark.parametrize("bad", [-3, 2.0, None])
    def test_invalid_n(self, queries, bad):
        with pytest.raises(InvalidArgument):
            queries.nearest_prime(bad)

    def test_invalid_bound_type(self, queries):
        with pytest.raises(InvalidArgument):
            queries.nearest_prime(10, 1.5, None)


class TestSharedTable:
    """Several PrimeQueries over one table."""

    def test_results_accumulate(self):
        table = PrimalityTable()
        first = PrimeQueries(table)
        second = PrimeQueries(table)
        first.list_primes(500)
        assert second.table.capacity == 500
        assert second.is_prime(499)
        assert table.capacity == 500

    def test_zero_search_window(self):
        with pytest.raises(InvalidArgument):
            PrimeQueries(search_window=0)


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
