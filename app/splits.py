"""Resolve a split method and its parameters into concrete per-member shares.

This runs once when an expense is created or replaced. The resulting Split
list is stored with the expense and is what the balance calculator consumes.
"""

from decimal import Decimal, ROUND_HALF_UP

from app.ledger import Split
from app.money import EPSILON, from_cents, sum_amounts, to_amount, to_cents

SPLIT_METHODS = ("equal", "custom", "percentage")

HUNDRED = Decimal("100")


class SplitError(ValueError):
    """Raised when split parameters cannot produce a valid split."""


def _split_equal(total_cents: int, member_ids: list[str]) -> dict[str, int]:
    count = len(member_ids)
    base = total_cents // count
    remainder = total_cents - base * count
    # Leftover cents go to the first members in the given order
    return {mid: base + (1 if i < remainder else 0) for i, mid in enumerate(member_ids)}


def _split_percentage(
    total_cents: int,
    member_ids: list[str],
    percentages: dict[str, Decimal],
) -> dict[str, int]:
    result: dict[str, int] = {}
    allocated = 0
    for i, mid in enumerate(member_ids):
        if i == len(member_ids) - 1:
            if allocated > total_cents:
                raise SplitError("Split percentages must add up to 100")
            result[mid] = total_cents - allocated
        else:
            share = int((total_cents * percentages[mid] / HUNDRED).to_integral_value(rounding=ROUND_HALF_UP))
            result[mid] = share
            allocated += share
    return result


def resolve_splits(
    amount,
    method: str,
    member_ids: list[str],
    split_details: dict[str, float] | None = None,
) -> list[Split]:
    """Turn an expense amount and split parameters into a Split list.

    equal: amount divided across member_ids in cents, remainder cents to the
        first members in order.
    custom: split_details holds each member's amount; must add up to amount.
    percentage: split_details holds each member's percentage; must add up to
        100. The last member absorbs the rounding remainder.
    """
    total = to_amount(amount)
    split_details = split_details or {}

    if method not in SPLIT_METHODS:
        raise SplitError(f"Unknown split method: {method}")
    if not member_ids:
        raise SplitError("At least one member must share the expense")
    if len(set(member_ids)) != len(member_ids):
        raise SplitError("Duplicate member in split")

    if method == "equal":
        shares = _split_equal(to_cents(total), member_ids)
        return [Split(member_id=mid, amount=from_cents(c)) for mid, c in shares.items()]

    values = {}
    for mid in member_ids:
        if mid not in split_details:
            raise SplitError(f"Missing split value for member {mid}")
        values[mid] = to_amount(split_details[mid])
    extra = set(split_details) - set(member_ids)
    if extra:
        raise SplitError(f"Split values given for uninvolved members: {sorted(extra)}")

    if method == "custom":
        if abs(sum_amounts(values.values()) - total) > EPSILON:
            raise SplitError("Custom split amounts must add up to the expense amount")
        return [Split(member_id=mid, amount=values[mid]) for mid in member_ids]

    if abs(sum_amounts(values.values()) - HUNDRED) > EPSILON:
        raise SplitError("Split percentages must add up to 100")
    shares = _split_percentage(to_cents(total), member_ids, values)
    return [Split(member_id=mid, amount=from_cents(shares[mid])) for mid in member_ids]
