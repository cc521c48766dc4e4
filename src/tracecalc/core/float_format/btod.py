"""
Exact binary-to-decimal rendering of IEEE-754 values.

The value ``mantissa * 2**exponent`` is scaled into a ``BigDecimal`` and
rounded half-to-even on its decimal digits, so the output is exactly the
correctly rounded decimal expansion. No hardware float is involved.

Usage:
    from tracecalc.core.float_format import float_to_decimal_string

    float_to_decimal_string(0x3F800000)
    # ' 1.00000000e+00'
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from tracecalc.core.float_format.bignum import BigDecimal, PowerCache, default_power_cache


def float_to_decimal(
    mantissa: int,
    exponent: int,
    precision: int,
    cache: PowerCache | None = None,
) -> str:
    """Render ``mantissa * 2**exponent`` to ``precision`` significant digits.

    Args:
        mantissa: Unsigned significand, implicit bit already included.
        exponent: Base-2 exponent applied to the mantissa.
        precision: Number of significant decimal digits (>= 1).
        cache: Power cache to use; the process-wide one if omitted.

    Returns:
        ``D.DDDe±EE`` with ``precision - 1`` fractional digits.

    Raises:
        ValueError: On a negative mantissa or a precision below 1.
    """
    if mantissa < 0:
        raise ValueError(f"mantissa must be non-negative, got {mantissa}")
    if precision < 1:
        raise ValueError(f"precision must be at least 1, got {precision}")
    if cache is None:
        cache = default_power_cache()
    elif not isinstance(cache, PowerCache):
        raise TypeError(f"cache must be a PowerCache, got {type(cache).__name__}")

    val = BigDecimal(mantissa)
    power10 = 0
    if exponent > 0:
        val *= cache.power_of(2, exponent)
    elif exponent < 0:
        # 2**-n == 5**n * 10**-n
        val *= cache.power_of(5, -exponent)
        power10 += exponent

    digitpos = val.digit_count() - 1
    power10 += digitpos

    # Ties go to even: if the last kept digit is odd, adding 5 at the first
    # dropped position rounds up; otherwise adding 5*10**cut - 1 only rounds
    # up when the dropped part is strictly more than half.
    cut = digitpos - precision
    if cut >= 0 and val.digit(cut) >= 5:
        if val.digit(cut + 1) & 1:
            val += BigDecimal(5, cut)
        else:
            val += BigDecimal(4, cut, 9)
        if val.digit_count() - 1 > digitpos:
            # 9.99...9 carried into a new leading digit
            digitpos += 1
            power10 += 1

    out = [str(val.digit(digitpos)), "."]
    out.extend(str(val.digit(digitpos - i)) for i in range(1, precision))
    out.append(f"e{0 if val.digit_count() == 0 else power10:+03d}")
    return "".join(out)


def ieee_to_decimal(
    bits: int,
    ebits: int,
    mbits: int,
    precision: int,
    cache: PowerCache | None = None,
) -> str:
    """Decode an IEEE-754 bit pattern and render it in decimal.

    The result always starts with a sign column: ``-`` or a space.
    Infinities and NaNs render as ``Inf`` and ``NaN``.
    """
    if ebits < 1 or mbits < 1:
        raise ValueError(f"field widths must be positive, got ebits={ebits} mbits={mbits}")
    if not 0 <= bits < 1 << (1 + ebits + mbits):
        raise ValueError(f"bit pattern {bits:#x} does not fit a {1 + ebits + mbits}-bit format")

    sign = "-" if bits >> (ebits + mbits) & 1 else " "
    biased = (bits >> mbits) & ((1 << ebits) - 1)
    mantissa = bits & ((1 << mbits) - 1)
    bias = (1 << (ebits - 1)) - 1

    if biased == (1 << ebits) - 1:
        return sign + ("NaN" if mantissa else "Inf")

    if biased:
        mantissa |= 1 << mbits
        exponent = biased - bias - mbits
    else:
        # Subnormal: no implicit bit, minimum exponent
        exponent = 1 - bias - mbits

    return sign + float_to_decimal(mantissa, exponent, precision, cache)


class FloatFormat(BaseModel):
    """An IEEE-754 binary interchange format and its output precision."""

    name: str = Field(description="Format name, e.g. binary32")
    ebits: int = Field(gt=0, description="Exponent field width")
    mbits: int = Field(gt=0, description="Stored mantissa field width")
    precision: int = Field(ge=1, description="Significant decimal digits rendered")

    model_config = ConfigDict(frozen=True)

    @property
    def width(self) -> int:
        """Total bit width including the sign bit."""
        return 1 + self.ebits + self.mbits

    def render(self, bits: int, cache: PowerCache | None = None) -> str:
        return ieee_to_decimal(bits, self.ebits, self.mbits, self.precision, cache)


FLOAT32 = FloatFormat(name="binary32", ebits=8, mbits=23, precision=9)
FLOAT64 = FloatFormat(name="binary64", ebits=11, mbits=52, precision=17)


def float_to_decimal_string(bits: int) -> str:
    """Render a 32-bit IEEE pattern with 9 significant digits."""
    return FLOAT32.render(bits)


def double_to_decimal_string(bits: int) -> str:
    """Render a 64-bit IEEE pattern with 17 significant digits."""
    return FLOAT64.render(bits)
