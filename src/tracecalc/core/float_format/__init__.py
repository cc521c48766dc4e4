"""
Exact decimal rendering of IEEE-754 binary floating point.

Usage:
    from tracecalc.core.float_format import double_to_decimal_string

    double_to_decimal_string(0x400921FB54442D18)
    # ' 3.1415926535897931e+00'
"""

from tracecalc.core.float_format.bignum import BigDecimal, PowerCache, default_power_cache
from tracecalc.core.float_format.btod import (
    FLOAT32,
    FLOAT64,
    FloatFormat,
    double_to_decimal_string,
    float_to_decimal,
    float_to_decimal_string,
    ieee_to_decimal,
)

__all__ = [
    "FLOAT32",
    "FLOAT64",
    "BigDecimal",
    "FloatFormat",
    "PowerCache",
    "default_power_cache",
    "double_to_decimal_string",
    "float_to_decimal",
    "float_to_decimal_string",
    "ieee_to_decimal",
]
