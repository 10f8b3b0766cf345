#!/usr/bin/env python3
"""
Verify incremental table growth against a from-scratch sieve.

Grows one PrimalityTable through a schedule of increasing bounds and, at
each step, compares the table against prime_flags_upto for the same bound.
Also checks that earlier answers never change as the table grows.

Usage:
    python verify_sieve.py
    python verify_sieve.py --max 10000000 --steps 20
    python verify_sieve.py --config config/default.yaml
"""

import argparse
import logging
import time

import numpy as np

from primeutils.config import load_config
from primeutils.queries import PrimeQueries
from primeutils.sieve import prime_flags_upto, primes_upto


def growth_schedule(max_n: int, steps: int) -> np.ndarray:
    """Geometrically spaced, strictly increasing bounds ending at max_n."""
    bounds = np.unique(np.geomspace(2, max_n, num=steps).astype(np.int64))
    if bounds[-1] != max_n:
        bounds = np.append(bounds, max_n)
    return bounds


def verify_growth(queries: PrimeQueries, bounds: np.ndarray, verbose: bool = True) -> bool:
    """Check the table against a fresh sieve after each growth step."""
    ok = True
    previous = np.zeros(0, dtype=bool)
    t_incremental = 0.0
    t_scratch = 0.0

    for n in bounds:
        n = int(n)

        t0 = time.time()
        flags = queries.get_sieve(n)
        t_incremental += time.time() - t0

        t0 = time.time()
        expected = prime_flags_upto(n)[:n]
        t_scratch += time.time() - t0

        matches = np.array_equal(flags, expected)
        stable = np.array_equal(flags[:len(previous)], previous)
        if verbose:
            status = "✓" if matches and stable else "✗"
            print(f"  n={n:>12,}  primes={int(flags.sum()):>10,}  {status}")
        if not matches:
            mismatches = np.flatnonzero(flags != expected)
            print(f"    mismatch at {mismatches[:10].tolist()}")
            ok = False
        if not stable:
            print(f"    earlier entries changed while growing to {n:,}")
            ok = False
        previous = flags

    if verbose:
        print(f"\n  Incremental total: {t_incremental:.3f}s")
        print(f"  From-scratch total: {t_scratch:.3f}s")
    return ok


def verify_nearest(queries: PrimeQueries, samples: int, max_n: int, seed: int) -> bool:
    """Compare nearest_prime with a brute-force scan of a fresh sieve."""
    rng = np.random.default_rng(seed)
    primes = primes_upto(2 * max_n + 2)

    errors = 0
    for n in rng.integers(0, max_n, size=samples):
        n = int(n)
        got = queries.nearest_prime(n)
        i = np.searchsorted(primes, n)
        if i < len(primes) and primes[i] == n:
            expected = n
        else:
            above = int(primes[i])
            below = int(primes[i - 1]) if i > 0 else None
            if below is None or above - n < n - below:
                expected = above
            else:
                expected = below
        if got != expected:
            print(f"  nearest_prime({n}) = {got}, expected {expected}")
            errors += 1

    print(f"  {samples - errors}/{samples} nearest_prime samples agree")
    return errors == 0


def main():
    parser = argparse.ArgumentParser(description='Verify incremental sieve growth')
    parser.add_argument('--config', type=str, default=None,
                        help='Path to YAML config file')
    parser.add_argument('--max', type=int, default=10**6,
                        help='Largest bound to grow the table to')
    parser.add_argument('--steps', type=int, default=12,
                        help='Number of growth steps')
    parser.add_argument('--samples', type=int, default=1000,
                        help='Random nearest_prime checks')
    parser.add_argument('--seed', type=int, default=0)
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Log every table extension')
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    config = load_config(args.config)
    queries = PrimeQueries.from_config(config)

    print("=" * 60)
    print("Incremental sieve verification")
    print("=" * 60)
    print(f"  max = {args.max:,}")
    print(f"  steps = {args.steps}")
    print(f"  search_window = {config['search_window']}")
    print()

    print("-" * 60)
    print("1. Growth vs from-scratch sieve")
    print("-" * 60)
    growth_ok = verify_growth(queries, growth_schedule(args.max, args.steps))
    print()

    print("-" * 60)
    print("2. nearest_prime vs brute force")
    print("-" * 60)
    nearest_ok = verify_nearest(queries, args.samples, args.max, args.seed)
    print()

    print("=" * 60)
    if growth_ok and nearest_ok:
        print("ALL CHECKS PASSED")
    else:
        print("VERIFICATION FAILED")
        raise SystemExit(1)


if __name__ == '__main__':
    main()
