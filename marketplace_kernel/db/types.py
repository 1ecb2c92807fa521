"""
Module: marketplace_kernel.db.types
Responsibility: Conversion helpers for monetary values.  Centralizes
    precision so every model and service uses the same definition of money.
Architecture position: Kernel > DB.  May be imported by models/, domain/,
    services/, and selectors/.  MUST NOT import from any of those layers.

Invariants enforced:
    - No floats for money.  Balances and prices are Decimal with explicit
      precision; float inputs are converted through their string form.
    - money_from_value() is the ONLY sanctioned way to turn caller-supplied
      amounts into Decimals.  It rejects bools, NaN, infinities, and amounts
      finer than MONEY_DECIMAL_PLACES, so a stored amount always equals the
      amount that was accepted.

Failure modes:
    - ValueError on anything that is not a finite number the money columns
      can hold exactly.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

# Matches Numeric(38, 9) in Base.type_annotation_map
MONEY_DECIMAL_PLACES = 9
DEFAULT_ROUNDING = ROUND_HALF_UP

ZERO = Decimal("0")


def money_from_value(value: Any) -> Decimal:
    """
    Convert a caller-supplied amount to a Decimal.

    Accepts Decimal, int, float (via str), and numeric strings.

    Raises:
        ValueError: If value is missing, a bool, non-numeric, NaN, infinite,
            or has more than MONEY_DECIMAL_PLACES decimal places.
    """
    if value is None or isinstance(value, bool):
        raise ValueError(f"Not a monetary amount: {value!r}")

    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float, str)):
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation as exc:
            raise ValueError(f"Not a monetary amount: {value!r}") from exc
    else:
        raise ValueError(f"Not a monetary amount: {value!r}")

    if not amount.is_finite():
        raise ValueError(f"Not a finite amount: {value!r}")
    if amount.normalize().as_tuple().exponent < -MONEY_DECIMAL_PLACES:
        raise ValueError(
            f"More than {MONEY_DECIMAL_PLACES} decimal places: {value!r}"
        )
    return amount


def round_money(
    value: Decimal,
    decimal_places: int = 2,
    rounding: str = DEFAULT_ROUNDING,
) -> Decimal:
    """Round a monetary value for display (never used for ledger math)."""
    quantize_str = "0." + "0" * decimal_places
    return value.quantize(Decimal(quantize_str), rounding=rounding)
