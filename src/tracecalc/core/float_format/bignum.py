"""
Arbitrary-precision decimal integers for exact float rendering.

``BigDecimal`` stores base-10 digits least-significant first and supports
just enough arithmetic (in-place add and multiply) to scale a binary
mantissa by powers of 2 or 5 without ever touching a hardware float.

``PowerCache`` memoizes those powers. Each exponent is computed once via
binary decomposition and then served from the cache.
"""

from __future__ import annotations

import logging
import threading

logger = logging.getLogger(__name__)


class BigDecimal:
    """Unsigned decimal integer, digits stored LSB-first.

    Zero is the empty digit list; there are never most-significant zeros.
    """

    __slots__ = ("_digits",)

    def __init__(self, value: int = 0, extra_digits: int = 0, fill_digit: int = 0) -> None:
        if value < 0:
            raise ValueError(f"BigDecimal value must be non-negative, got {value}")
        if not 0 <= fill_digit <= 9:
            raise ValueError(f"fill_digit must be a decimal digit, got {fill_digit}")
        if extra_digits < 0:
            raise ValueError(f"extra_digits must be non-negative, got {extra_digits}")

        self._digits: list[int] = [fill_digit] * extra_digits
        if value:
            self._digits.extend(int(c) for c in reversed(str(value)))
        self._contract()

    # -- Internal helpers --

    def _normalise(self, start: int = 0, stop: int = 0) -> None:
        """Propagate carries from ``start`` upward.

        Digits at or above ``stop`` must already be in 0..9, so the pass
        ends there as soon as no carry is pending.
        """
        digits = self._digits
        carry = 0
        for i in range(start, len(digits)):
            if i >= stop and not carry:
                return
            carry += digits[i]
            digits[i] = carry % 10
            carry //= 10
        assert not carry, "carry overflowed the allocated digits"

    def _contract(self) -> None:
        digits = self._digits
        while digits and digits[-1] == 0:
            digits.pop()

    def _expand(self, size: int) -> None:
        if size > len(self._digits):
            self._digits.extend([0] * (size - len(self._digits)))

    # -- Arithmetic --

    def __iadd__(self, rhs: BigDecimal) -> BigDecimal:
        rhs_digits = list(rhs._digits)
        self._expand(max(len(self._digits), len(rhs_digits)) + 1)
        digits = self._digits
        for i, d in enumerate(rhs_digits):
            digits[i] += d
        self._normalise(0, len(rhs_digits))
        self._contract()
        return self

    def __imul__(self, rhs: BigDecimal) -> BigDecimal:
        # Snapshot so that ``x *= x`` reads the original digits.
        rhs_digits = list(rhs._digits)
        old_size = len(self._digits)
        self._expand(old_size + len(rhs_digits) + 1)
        digits = self._digits
        for i in reversed(range(old_size)):
            digit = digits[i]
            digits[i] = 0
            if digit:
                for j, r in enumerate(rhs_digits):
                    digits[i + j] += r * digit
                self._normalise(i, i + len(rhs_digits))
        self._contract()
        return self

    # -- Accessors --

    def digit(self, i: int) -> int:
        """Digit at position ``i`` (0 = least significant), 0 out of range."""
        if 0 <= i < len(self._digits):
            return self._digits[i]
        return 0

    def digit_count(self) -> int:
        """Number of stored digits; 0 for the value zero."""
        return len(self._digits)

    def copy(self) -> BigDecimal:
        clone = BigDecimal()
        clone._digits = list(self._digits)
        return clone

    def __int__(self) -> int:
        return int(str(self))

    def __str__(self) -> str:
        if not self._digits:
            return "0"
        return "".join(str(d) for d in reversed(self._digits))

    def __repr__(self) -> str:
        return f"BigDecimal({self})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BigDecimal):
            return NotImplemented
        return self._digits == other._digits

    __hash__ = None  # type: ignore[assignment]


class PowerCache:
    """Memoized powers of 2 and 5 as ``BigDecimal`` values.

    Entries are append-only and never evicted. Population runs under a
    re-entrant lock so one instance may be shared between threads.

    Attributes:
        hits: Lookups answered straight from the cache.
        misses: Entries computed (each exponent at most once per base).
    """

    BASES = (2, 5)

    def __init__(self) -> None:
        self._powers: dict[int, dict[int, BigDecimal]] = {base: {} for base in self.BASES}
        self._lock = threading.RLock()
        self.hits = 0
        self.misses = 0

    def power_of(self, base: int, exponent: int) -> BigDecimal:
        """Return ``base ** exponent`` as a fresh ``BigDecimal``.

        Args:
            base: 2 or 5
            exponent: Non-negative exponent

        Raises:
            ValueError: On an unsupported base or a negative exponent.
        """
        if base not in self.BASES:
            raise ValueError(f"base must be 2 or 5, got {base}")
        if exponent < 0:
            raise ValueError(f"exponent must be non-negative, got {exponent}")
        with self._lock:
            return self._lookup(base, exponent).copy()

    def _lookup(self, base: int, exponent: int) -> BigDecimal:
        powers = self._powers[base]
        cached = powers.get(exponent)
        if cached is not None:
            self.hits += 1
            return cached

        lowbit = exponent & -exponent
        if exponent != lowbit:
            value = self._lookup(base, exponent - lowbit).copy()
            value *= self._lookup(base, lowbit)
        elif exponent > 1:
            half = self._lookup(base, exponent // 2)
            value = half.copy()
            value *= half
        else:
            value = BigDecimal(base if exponent == 1 else 1)

        powers[exponent] = value
        self.misses += 1
        logger.debug("Computed %d**%d (%d digits)", base, exponent, value.digit_count())
        return value

    def __contains__(self, key: tuple[int, int]) -> bool:
        base, exponent = key
        return exponent in self._powers.get(base, {})

    def __len__(self) -> int:
        return sum(len(p) for p in self._powers.values())

    def clear(self) -> None:
        """Drop every cached entry and reset the counters."""
        with self._lock:
            for powers in self._powers.values():
                powers.clear()
            self.hits = 0
            self.misses = 0


_default_cache: PowerCache | None = None
_default_cache_lock = threading.Lock()


def default_power_cache() -> PowerCache:
    """Process-wide cache, created on first use."""
    global _default_cache
    if _default_cache is None:
        with _default_cache_lock:
            if _default_cache is None:
                _default_cache = PowerCache()
    return _default_cache
