"""Tests for BigDecimal arithmetic and the power-of-2/5 cache."""

from __future__ import annotations

import pytest

from tracecalc.core.float_format.bignum import BigDecimal, PowerCache, default_power_cache


class TestBigDecimalConstruction:
    """Construction from integers, with optional low-order filler."""

    def test_zero_has_no_digits(self) -> None:
        zero = BigDecimal(0)
        assert zero.digit_count() == 0
        assert str(zero) == "0"
        assert int(zero) == 0

    def test_digits_lsb_first(self) -> None:
        value = BigDecimal(1234)
        assert value.digit_count() == 4
        assert [value.digit(i) for i in range(4)] == [4, 3, 2, 1]

    def test_uint64_max(self) -> None:
        assert int(BigDecimal(2**64 - 1)) == 2**64 - 1

    def test_extra_zero_digits(self) -> None:
        assert int(BigDecimal(5, 3)) == 5000

    def test_extra_fill_digits(self) -> None:
        # 4 followed by three nines is 5 * 10**3 - 1
        assert int(BigDecimal(4, 3, 9)) == 4999

    def test_no_leading_zeros_from_filler(self) -> None:
        assert BigDecimal(0, 3, 0).digit_count() == 0
        assert int(BigDecimal(0, 2, 9)) == 99

    def test_rejects_negative(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            BigDecimal(-1)

    def test_rejects_bad_fill(self) -> None:
        with pytest.raises(ValueError, match="decimal digit"):
            BigDecimal(1, 2, 10)


class TestBigDecimalDigitAccess:
    """digit() treats the number as infinitely zero-padded."""

    def test_out_of_range_is_zero(self) -> None:
        value = BigDecimal(987)
        assert value.digit(-1) == 0
        assert value.digit(3) == 0
        assert value.digit(1000) == 0

    def test_zero_reads_zero_everywhere(self) -> None:
        assert BigDecimal().digit(0) == 0


class TestBigDecimalAddition:
    """In-place addition with carry propagation."""

    def test_simple(self) -> None:
        value = BigDecimal(123)
        value += BigDecimal(877)
        assert int(value) == 1000
        assert value.digit_count() == 4

    def test_carry_through_receiver_digits(self) -> None:
        # The carry runs through nines that lie above the addend's length
        value = BigDecimal(99999)
        value += BigDecimal(1)
        assert int(value) == 100000

    def test_carry_out_of_longer_receiver(self) -> None:
        # The receiver is longer than the addend and the carry leaves its top digit
        value = BigDecimal(900001)
        value += BigDecimal(99999)
        assert int(value) == 1000000
        assert value.digit_count() == 7

    def test_rounding_addend_carries_to_new_digit(self) -> None:
        value = BigDecimal(99999999999)
        value += BigDecimal(5, 2)
        assert int(value) == 100000000499

    def test_shorter_receiver(self) -> None:
        value = BigDecimal(7)
        value += BigDecimal(99993)
        assert int(value) == 100000

    def test_add_zero(self) -> None:
        value = BigDecimal(42)
        value += BigDecimal()
        assert int(value) == 42
        zero = BigDecimal()
        zero += BigDecimal()
        assert zero.digit_count() == 0

    def test_add_to_self(self) -> None:
        value = BigDecimal(555)
        value += value
        assert int(value) == 1110


class TestBigDecimalMultiplication:
    """In-place schoolbook multiplication."""

    @pytest.mark.parametrize(
        "a, b",
        [
            (0, 12345),
            (12345, 0),
            (1, 1),
            (9, 9),
            (99999, 99999),
            (123456789, 987654321),
            (2**64 - 1, 2**64 - 1),
        ],
    )
    def test_matches_int(self, a: int, b: int) -> None:
        value = BigDecimal(a)
        value *= BigDecimal(b)
        assert int(value) == a * b

    def test_square_in_place(self) -> None:
        value = BigDecimal(99999999)
        value *= value
        assert int(value) == 99999999**2

    def test_no_leading_zeros(self) -> None:
        value = BigDecimal(10)
        value *= BigDecimal(10)
        assert value.digit_count() == 3

    def test_rhs_untouched(self) -> None:
        rhs = BigDecimal(321)
        value = BigDecimal(123)
        value *= rhs
        assert int(rhs) == 321


class TestBigDecimalHelpers:
    def test_copy_is_independent(self) -> None:
        original = BigDecimal(12)
        clone = original.copy()
        clone += BigDecimal(1)
        assert int(original) == 12
        assert int(clone) == 13

    def test_equality(self) -> None:
        assert BigDecimal(100) == BigDecimal(1, 2)
        assert BigDecimal(100) != BigDecimal(101)

    def test_repr(self) -> None:
        assert repr(BigDecimal(42)) == "BigDecimal(42)"


class TestPowerCache:
    """Memoized powers of 2 and 5."""

    @pytest.mark.parametrize("base", [2, 5])
    @pytest.mark.parametrize("exponent", [0, 1, 2, 3, 7, 8, 63, 64, 100, 149, 1074])
    def test_values(self, power_cache: PowerCache, base: int, exponent: int) -> None:
        assert int(power_cache.power_of(base, exponent)) == base**exponent

    def test_idempotent(self, power_cache: PowerCache) -> None:
        first = power_cache.power_of(5, 300)
        second = power_cache.power_of(5, 300)
        assert first == second
        assert first is not second

    def test_never_recomputes(self, power_cache: PowerCache) -> None:
        power_cache.power_of(5, 300)
        computed = power_cache.misses
        hits = power_cache.hits
        for _ in range(5):
            power_cache.power_of(5, 300)
        assert power_cache.misses == computed
        assert power_cache.hits == hits + 5

    def test_binary_decomposition_entries(self, power_cache: PowerCache) -> None:
        # 13 = 8 + 4 + 1: 13 -> (12, 1), 12 -> (8, 4), 8 -> 4 -> 2 -> 1
        power_cache.power_of(2, 13)
        for exponent in (1, 2, 4, 8, 12, 13):
            assert (2, exponent) in power_cache
        assert (2, 3) not in power_cache
        assert len(power_cache) == power_cache.misses == 6

    def test_subresults_reused(self, power_cache: PowerCache) -> None:
        power_cache.power_of(5, 12)
        before = power_cache.misses
        # 14 = 12 + 2; both already cached
        power_cache.power_of(5, 14)
        assert power_cache.misses == before + 1

    def test_bases_cached_separately(self, power_cache: PowerCache) -> None:
        power_cache.power_of(2, 10)
        assert (5, 10) not in power_cache
        assert int(power_cache.power_of(5, 10)) == 5**10

    def test_returned_value_cannot_corrupt_cache(self, power_cache: PowerCache) -> None:
        value = power_cache.power_of(2, 16)
        value *= BigDecimal(3)
        assert int(power_cache.power_of(2, 16)) == 2**16

    def test_clear(self, power_cache: PowerCache) -> None:
        power_cache.power_of(5, 40)
        power_cache.clear()
        assert len(power_cache) == 0
        assert power_cache.misses == 0

    def test_rejects_other_bases(self, power_cache: PowerCache) -> None:
        with pytest.raises(ValueError, match="base must be 2 or 5"):
            power_cache.power_of(3, 4)

    def test_rejects_negative_exponent(self, power_cache: PowerCache) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            power_cache.power_of(2, -1)

    def test_default_cache_is_singleton(self) -> None:
        assert default_power_cache() is default_power_cache()
