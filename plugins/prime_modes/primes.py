"""
Prime Oracle - Precomputed primality over a bounded integer range

Builds a Sieve of Eratosthenes once at startup and answers primality,
next-prime and range queries from it. The sieve array is flagged
read-only after construction, so one oracle can be shared by every
mode (and any worker threads) without locking.

Queries outside [0, max_n] raise PrimeRangeError. They are never
clamped: a clamped lookup would silently report the wrong answer.
"""

import math
import numpy as np

from .errors import ConfigurationError, PrimeRangeError, PrimeNotFoundError


def _sieve(max_n):
    """Boolean primality table for [0, max_n]."""
    table = np.ones(max_n + 1, dtype=bool)
    table[:2] = False
    for i in range(2, math.isqrt(max_n) + 1):
        if table[i]:
            table[i * i::i] = False
    return table


class PrimeRange:
    """Primes in [lo, hi], ascending.

    Iterating twice walks the range twice; nothing is materialised
    up front, so a wide range costs nothing until it is consumed.
    """

    def __init__(self, table, lo, hi):
        self._table = table
        self.lo = lo
        self.hi = hi

    def __iter__(self):
        for n in range(max(self.lo, 2), self.hi + 1):
            if self._table[n]:
                yield n

    def __repr__(self):
        return f"PrimeRange({self.lo}, {self.hi})"


class PrimeOracle:
    """Read-only primality service over [0, max_n]."""

    def __init__(self, max_n=10000):
        if int(max_n) != max_n or max_n < 0:
            raise ConfigurationError(f"max_n must be a non-negative integer, got {max_n!r}")
        self._max_n = int(max_n)
        self._table = _sieve(self._max_n)
        self._table.setflags(write=False)

    @classmethod
    def build(cls, max_n):
        return cls(max_n)

    @property
    def max_n(self):
        return self._max_n

    def _check(self, n, name="n"):
        if n < 0 or n > self._max_n:
            raise PrimeRangeError(f"{name}={n} outside sieve range [0, {self._max_n}]")

    def is_prime(self, n):
        self._check(n)
        return bool(self._table[int(n)])

    def is_prime_array(self, values):
        """Vectorised is_prime for an integer array of any shape."""
        values = np.asarray(values)
        if values.size:
            lo, hi = int(values.min()), int(values.max())
            if lo < 0 or hi > self._max_n:
                bad = lo if lo < 0 else hi
                raise PrimeRangeError(
                    f"value {bad} outside sieve range [0, {self._max_n}]")
        return self._table[values.astype(np.intp)]

    def next_prime(self, n):
        """Smallest prime strictly greater than n, searching up to max_n."""
        self._check(n)
        tail = np.flatnonzero(self._table[int(n) + 1:])
        if tail.size == 0:
            raise PrimeNotFoundError(f"no prime above {n} within [0, {self._max_n}]")
        return int(n) + 1 + int(tail[0])

    def prime_indices_in_range(self, lo, hi):
        """Lazy, restartable iterable of the primes in [lo, hi]."""
        self._check(lo, "lo")
        self._check(hi, "hi")
        return PrimeRange(self._table, int(lo), int(hi))

    def count_primes(self, lo, hi):
        self._check(lo, "lo")
        self._check(hi, "hi")
        if lo > hi:
            return 0
        return int(self._table[int(lo):int(hi) + 1].sum())

    def __repr__(self):
        return f"PrimeOracle(max_n={self._max_n})"
