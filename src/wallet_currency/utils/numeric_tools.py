from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import TypeAlias

# Use where optimal type is `int`, but other types are also acceptable (and will be converted to `int`)
IntLike: TypeAlias = int | float | str | Decimal

# Use where optimal type is `Decimal`, but other types are also acceptable (and will be converted to `Decimal`)
DecimalLike: TypeAlias = Decimal | int | str | float


def as_decimal(value: DecimalLike) -> Decimal:
    """Converts input to `Decimal` safely.

    Ensures floats are converted via string to avoid precision noise.

    Args:
        value: Input value as `DecimalLike`.

    Returns:
        Value converted to `Decimal`.
    """
    if isinstance(value, Decimal):
        return value

    return Decimal(str(value))


def as_non_negative_int(value: IntLike | None, default: int) -> int:
    """Converts $value to a non-negative `int`, falling back to $default.

    Values that cannot be read as integers yield $default. Negative values are clamped to 0.
    Fractional values are truncated toward zero.

    Args:
        value: Input value (may be None).
        default: Value used when $value is None or unreadable.

    Returns:
        Non-negative integer.
    """
    if value is None or isinstance(value, bool):
        return default

    try:
        result = int(as_decimal(value)) if not isinstance(value, int) else value
    except (ValueError, TypeError, InvalidOperation, OverflowError):
        return default

    return max(0, result)


def as_non_negative_decimal(value: DecimalLike | None) -> Decimal:
    """Converts $value to a finite non-negative `Decimal`; anything else becomes 0."""
    if value is None or isinstance(value, bool):
        return Decimal("0")

    try:
        result = as_decimal(value)
    except (ValueError, TypeError, InvalidOperation):
        return Decimal("0")

    if not result.is_finite() or result < 0:
        return Decimal("0")
    return result


def exact_precision(*values: Decimal) -> int:
    """Return a decimal context precision large enough to keep $values exact.

    The result covers every significant digit and the full exponent range of the operands, so a
    product of $values is exact and the integer part of their quotient is never rounded.
    """
    total = 0
    for value in values:
        sign, digits, exponent = value.as_tuple()
        total += len(digits) + abs(int(exponent))
    return total + 10


def strip_trailing_zeros(text: str) -> str:
    """Strip trailing zero fractional digits and a dangling dot from a plain decimal string.

    Examples: "1.500000" -> "1.5", "2.000000" -> "2", "100" -> "100".
    """
    if "." not in text:
        return text
    return text.rstrip("0").rstrip(".")


def as_flag(value: object) -> bool:
    """Read a loosely typed configuration flag.

    Numeric strings count by their value ("0", "0.0" -> False, "1" -> True). Other strings are
    True unless empty. Everything else follows `bool`.
    """
    if isinstance(value, str):
        text = value.strip()
        try:
            return as_decimal(text) != 0
        except (ValueError, InvalidOperation):
            return bool(text)
    return bool(value)
