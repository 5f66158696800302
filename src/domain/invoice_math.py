"""Invoice monetary arithmetic.

Pure functions; negative inputs are rejected by request validation before
anything reaches this module.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Union

from src.domain.invoice import AdditionalCharges, ServiceLine, Summary

Number = Union[Decimal, int, float, str]

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0")


def to_decimal(value: Optional[Number]) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    # str() first so floats keep their shortest repr instead of binary noise
    return Decimal(str(value))


def round2(value: Number) -> Decimal:
    """Round half away from zero to two decimal places"""
    return to_decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def line_amount(
    quantity: Number,
    rate: Number,
    explicit_amount: Optional[Number] = None,
) -> Decimal:
    if explicit_amount is not None:
        amount = to_decimal(explicit_amount)
        if amount >= 0:
            return amount
    return to_decimal(quantity) * to_decimal(rate)


def summarize(
    lines: Iterable[ServiceLine],
    additional_charges: AdditionalCharges,
    tax_percent: Number,
    discount: Number,
) -> Summary:
    """
    Compute the invoice summary

    subtotal is the exact sum; only tax_amount and total are rounded, each
    once. total never drops below zero.
    """
    tax_percent = to_decimal(tax_percent)
    discount = to_decimal(discount)

    subtotal = sum((to_decimal(line.amount) for line in lines), ZERO)
    subtotal += additional_charges.numeric_total()

    tax_amount = round2(subtotal * tax_percent / 100)
    total = round2(subtotal + tax_amount - discount)
    if total < 0:
        total = round2(ZERO)

    return Summary(
        subtotal=subtotal,
        tax_percent=tax_percent,
        tax_amount=tax_amount,
        discount=discount,
        total=total,
    )
