"""Exact conversions between display amounts and minor units, and cross-currency exchange.

All functions here are pure. Every computation runs in a local decimal context whose precision is
derived from the operands, so results never depend on the global `decimal` context and never pass
through floating-point numbers.

Rounding policy:
- display -> minor unit: extra fractional digits beyond the currency precision are truncated.
- minor unit -> display: the quotient is truncated to $scale fractional digits.
- exchange: the projected amount is truncated toward zero to a whole number of minor units.
"""
from __future__ import annotations

import re
from collections.abc import Mapping
from decimal import Decimal, ROUND_DOWN, localcontext
from typing import Any, Protocol

from wallet_currency.utils.numeric_tools import DecimalLike, as_decimal, exact_precision, strip_trailing_zeros

# Non-negative decimal with mandatory integer part and no leading zeros ("0", "12", "0.5", "12.345")
_DISPLAY_AMOUNT_PATTERN = re.compile(r"(0|[1-9][0-9]*)(\.[0-9]+)?")

# Optionally negative integer without leading zeros; plain zero is intentionally not matched
_MINOR_AMOUNT_PATTERN = re.compile(r"-?[1-9][0-9]*")

# Any integer without leading zeros, zero included
_INTEGER_PATTERN = re.compile(r"-?(0|[1-9][0-9]*)")

EXCHANGE_PERMISSION_PREFIX = "from"


class ExchangeParty(Protocol):
    """What the exchange checks need to know about a currency."""

    @property
    def id(self) -> str: ...

    @property
    def rate(self) -> Decimal: ...

    @property
    def types(self) -> Mapping[str, Any]: ...


def unit_factor_for(decimals: int) -> int:
    """Return exactly 10 ** $decimals as an arbitrary-precision integer."""
    # Raise: negative precision has no minor unit
    if decimals < 0:
        raise ValueError(f"Cannot call `unit_factor_for` because $decimals ({decimals}) is negative")
    return 10**decimals


def is_display_amount(value: str) -> bool:
    """Return True if $value is a well-formed non-negative display amount."""
    return isinstance(value, str) and _DISPLAY_AMOUNT_PATTERN.fullmatch(value) is not None


def is_integer_amount(value: str | int) -> bool:
    """Return True if $value is an int or a well-formed integer string (zero and negatives included)."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, str) and _INTEGER_PATTERN.fullmatch(value) is not None


def to_minor_unit(value: str, unit_factor: int) -> str | None:
    """Convert display amount $value into an integer count of minor units.

    Args:
        value: Non-negative decimal string such as "10", "0.5" or "12.345".
        unit_factor: Number of minor units in one display unit (10 ** decimals).

    Returns:
        Integer string of minor units, or None when $value is not a valid display amount.
        Fractional digits beyond the precision implied by $unit_factor are truncated.
    """
    if not is_display_amount(value):
        return None

    amount = Decimal(value)
    factor = Decimal(unit_factor)
    with localcontext() as ctx:
        ctx.prec = exact_precision(amount, factor)
        ctx.rounding = ROUND_DOWN
        product = (amount * factor).to_integral_value(rounding=ROUND_DOWN)
    return format(product, "f")


def from_minor_unit(value: str, unit_factor: int, scale: int) -> str:
    """Convert an integer count of minor units back into a display amount.

    Args:
        value: Integer string, optionally negative ("1500", "-1500").
        unit_factor: Number of minor units in one display unit (10 ** decimals).
        scale: Maximum number of fractional digits kept in the result.

    Returns:
        Display amount with trailing zeros removed ("1.5", "-2"). Malformed $value yields "0".
        When $unit_factor is 0 the input is returned unchanged.
    """
    if not unit_factor:
        return value
    if not isinstance(value, str) or _MINOR_AMOUNT_PATTERN.fullmatch(value) is None:
        return "0"

    scale = max(0, int(scale))
    negative = value.startswith("-")
    magnitude = Decimal(value.lstrip("-"))
    factor = Decimal(unit_factor)
    with localcontext() as ctx:
        ctx.prec = exact_precision(magnitude, factor) + scale
        ctx.rounding = ROUND_DOWN
        quotient = (magnitude / factor).quantize(Decimal(1).scaleb(-scale), rounding=ROUND_DOWN)

    amount = strip_trailing_zeros(format(quotient, "f"))
    # Zero after truncation carries no sign
    if negative and amount != "0":
        amount = "-" + amount
    return amount


def exchange_minor_units(amount_minor: str | int, from_rate: DecimalLike, to_rate: DecimalLike) -> str:
    """Project $amount_minor from the source currency into the target currency.

    The amount is normalized into the common reference unit by dividing by $from_rate and then
    projected into the target currency by multiplying by $to_rate. The result is truncated toward
    zero, so the receiving side is never credited more than the rates warrant.

    Returns:
        Integer string: floor($amount_minor * $to_rate / $from_rate).

    Raises:
        ValueError: If $amount_minor is not an integer or $from_rate is not positive.
    """
    # Raise: only whole minor units can be exchanged
    if not is_integer_amount(amount_minor):
        raise ValueError(f"Cannot call `exchange_minor_units` because $amount_minor ('{amount_minor}') is not an integer")

    amount = Decimal(amount_minor)
    source_rate = as_decimal(from_rate)
    target_rate = as_decimal(to_rate)

    # Raise: the source rate is a divisor
    if source_rate <= 0:
        raise ValueError(f"Cannot call `exchange_minor_units` because $from_rate ({source_rate}) is not positive")

    with localcontext() as ctx:
        ctx.prec = exact_precision(amount, source_rate, target_rate)
        ctx.rounding = ROUND_DOWN
        result = (amount * target_rate / source_rate).to_integral_value(rounding=ROUND_DOWN)
    return format(result, "f")


def exchange_permission_key(source_code: str) -> str:
    """Return the key a target currency declares in its types to accept inflow from $source_code."""
    return f"{EXCHANGE_PERMISSION_PREFIX}{source_code}"


def is_exchangeable(source: ExchangeParty, target: ExchangeParty) -> bool:
    """Return True if amounts of $source may be exchanged into $target.

    Both currencies need a positive rate, and $target must declare "from" + $source.id in its types.
    The permission is directed: B accepting inflow from A says nothing about A accepting B.
    """
    permission = target.types.get(exchange_permission_key(source.id))
    return source.rate > 0 and target.rate > 0 and permission is not None
