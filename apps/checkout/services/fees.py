"""
Basket fee splitting.

When a donor ticks "cover processing fees", the charity adds
``round(subtotal * rate) + fixed`` to the basket and apportions that fee
between the one-off charge (a PaymentIntent) and the recurring charges
(Stripe subscriptions), proportionally to their subtotals.

Example::

    >>> split = split_fees(1000, 1000, True)
    >>> split.fees_pence, split.one_off_fees_pence, split.recurring_fees_pence
    (44, 22, 22)

All values are integer pence. Rounding is half-up; the recurring side
absorbs the rounding remainder so that
``one_off_fees_pence + recurring_fees_pence == fees_pence`` always holds.
"""

from dataclasses import dataclass, asdict
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional

from django.conf import settings


def round_half_up(value) -> int:
    """Round a Decimal/int to the nearest integer, halves away from zero."""
    return int(Decimal(value).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def coerce_pence(value) -> int:
    """Coerce any input to a non-negative integer amount of pence (bad input -> 0)."""
    if isinstance(value, bool):
        return 0
    try:
        pence = int(value)
    except (TypeError, ValueError):
        return 0
    return max(pence, 0)


@dataclass(frozen=True)
class FeeSplit:
    """Derived totals for a basket, in pence."""

    one_off_subtotal_pence: int = 0
    recurring_subtotal_pence: int = 0
    fees_pence: int = 0
    one_off_fees_pence: int = 0
    recurring_fees_pence: int = 0
    one_off_total_pence: int = 0
    recurring_total_pence: int = 0
    total_pence: int = 0

    @property
    def subtotal_pence(self) -> int:
        return self.one_off_subtotal_pence + self.recurring_subtotal_pence

    def to_dict(self) -> dict:
        data = asdict(self)
        data['subtotal_pence'] = self.subtotal_pence
        return data


def calculate_fees(subtotal_pence: int, *, rate=None, fixed_pence: Optional[int] = None) -> int:
    """Processing fee for a subtotal: ``round(subtotal * rate) + fixed``."""
    rate = Decimal(str(settings.CHECKOUT_FEE_RATE if rate is None else rate))
    if fixed_pence is None:
        fixed_pence = settings.CHECKOUT_FEE_FIXED_PENCE
    return round_half_up(Decimal(coerce_pence(subtotal_pence)) * rate) + int(fixed_pence)


def split_fees(
    one_off_subtotal_pence,
    recurring_subtotal_pence,
    cover_fees: bool,
    *,
    rate=None,
    fixed_pence: Optional[int] = None
) -> FeeSplit:
    """
    Compute the processing fee and apportion it between one-off and recurring.

    Args:
        one_off_subtotal_pence: Sum of ONE_OFF line items.
        recurring_subtotal_pence: Sum of MONTHLY/YEARLY line items.
        cover_fees: Whether the donor opted to cover processing fees.
        rate: Override of ``settings.CHECKOUT_FEE_RATE``.
        fixed_pence: Override of ``settings.CHECKOUT_FEE_FIXED_PENCE``.

    Returns:
        FeeSplit with every derived total. Never raises; negative or
        non-numeric subtotals are treated as 0.

    Note:
        With ``cover_fees`` and both subtotals at zero the fixed fee still
        applies (``fees_pence == 20``) and is assigned to the one-off side.
    """
    one_off = coerce_pence(one_off_subtotal_pence)
    recurring = coerce_pence(recurring_subtotal_pence)
    subtotal = one_off + recurring

    if not cover_fees:
        return FeeSplit(
            one_off_subtotal_pence=one_off,
            recurring_subtotal_pence=recurring,
            one_off_total_pence=one_off,
            recurring_total_pence=recurring,
            total_pence=subtotal,
        )

    fees = calculate_fees(subtotal, rate=rate, fixed_pence=fixed_pence)

    if recurring == 0:
        one_off_fees = fees
    elif one_off == 0:
        one_off_fees = 0
    else:
        one_off_fees = round_half_up(Decimal(fees) * one_off / subtotal)
    recurring_fees = fees - one_off_fees

    one_off_total = one_off + one_off_fees
    recurring_total = recurring + recurring_fees

    return FeeSplit(
        one_off_subtotal_pence=one_off,
        recurring_subtotal_pence=recurring,
        fees_pence=fees,
        one_off_fees_pence=one_off_fees,
        recurring_fees_pence=recurring_fees,
        one_off_total_pence=one_off_total,
        recurring_total_pence=recurring_total,
        total_pence=one_off_total + recurring_total,
    )


def apportion(total_pence: int, weights: List[int]) -> List[int]:
    """
    Split ``total_pence`` proportionally to ``weights``.

    Used to share the recurring fee across several subscriptions. Shares are
    floored and the last entry takes the remainder, so the result sums to
    the total and no share is negative.

    Example::

        >>> apportion(10, [1, 1, 1])
        [3, 3, 4]
    """
    if not weights:
        return []

    weight_sum = sum(weights)
    if weight_sum <= 0:
        return [0] * (len(weights) - 1) + [total_pence]

    shares = []
    for weight in weights[:-1]:
        shares.append(total_pence * weight // weight_sum)
    shares.append(total_pence - sum(shares))
    return shares
