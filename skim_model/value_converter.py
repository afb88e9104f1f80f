"""
Value Converter.

Pure conversions between raw collateral units and normalized value units:

    value = raw * rate / 10**decimals
    raw   = value * 10**decimals / rate

Rounding is always chosen by the caller so that the pool, never the actor,
keeps the dust: value credited to the vault rounds down, value debited from it
rounds up.
"""

from enum import Enum

from .config import MIN_RATE_DECIMALS, MAX_RATE_DECIMALS
from .errors import InvalidRate


class Rounding(Enum):
    FLOOR = 0
    CEIL = 1


def mul_div(x, y, denominator, rounding=Rounding.FLOOR):
    """Computes x * y / denominator on integers with explicit rounding."""
    if denominator == 0:
        raise ZeroDivisionError("mul_div denominator is zero")
    product = x * y
    result = product // denominator
    if rounding == Rounding.CEIL and product % denominator > 0:
        result += 1
    return result


def validate_rate(rate, decimals):
    """
    Rejects readings from a malfunctioning rate reader.

    Raises:
        InvalidRate: If the rate is not positive or decimals are out of bounds
    """
    if not isinstance(decimals, int) or decimals < MIN_RATE_DECIMALS or decimals > MAX_RATE_DECIMALS:
        raise InvalidRate(
            f"Rate decimals must be between {MIN_RATE_DECIMALS} and {MAX_RATE_DECIMALS}, got {decimals}"
        )
    if rate is None or rate <= 0:
        raise InvalidRate(f"Rate must be greater than zero, got {rate}")


def raw_to_value(raw_amount, rate, decimals, rounding=Rounding.FLOOR):
    validate_rate(rate, decimals)
    return mul_div(raw_amount, rate, 10**decimals, rounding)


def value_to_raw(value, rate, decimals, rounding=Rounding.FLOOR):
    validate_rate(rate, decimals)
    return mul_div(value, 10**decimals, rate, rounding)


def vault_value(raw_balance, rate, decimals):
    """
    Current realizable value of the whole pool.

    Never persisted; recomputed from the live balance and rate on every call.
    Rounds down so the pool is never overvalued.
    """
    return raw_to_value(raw_balance, rate, decimals, Rounding.FLOOR)
