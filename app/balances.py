"""Balance computation and debt simplification.

Both are pure projections over a snapshot of a group's members and expenses.
Nothing here is stored; callers recompute after every change.
"""

import logging
from collections.abc import Iterable
from decimal import Decimal

from app.ledger import Balance, Expense, Member, RecordedSettlement, Transfer
from app.money import EPSILON, ZERO, is_negligible, sum_amounts

logger = logging.getLogger("splitsmart")


def compute_balances(
    members: list[Member],
    expenses: list[Expense],
    settlements: Iterable[RecordedSettlement] = (),
) -> list[Balance]:
    """Compute one signed balance per member, in member order.

    The payer is credited the full amount and every split member is debited
    their share. References to members outside `members` are dropped and
    logged, so the computation never fails on stale data.

    Settlements marked as settled are applied as offsetting adjustments
    (payer credited, receiver debited). Unsettled ones are ignored.
    """
    balances: dict[str, Decimal] = {m.id: ZERO for m in members}
    dropped = 0

    for expense in expenses:
        if expense.paid_by in balances:
            balances[expense.paid_by] += expense.amount
        else:
            dropped += 1
            logger.warning(
                "Expense payer not in group",
                extra={"extra_data": {"expense_id": expense.id, "member_id": expense.paid_by}},
            )

        for split in expense.splits:
            if split.member_id in balances:
                balances[split.member_id] -= split.amount
            else:
                dropped += 1
                logger.warning(
                    "Split member not in group",
                    extra={"extra_data": {"expense_id": expense.id, "member_id": split.member_id}},
                )

    for settlement in settlements:
        if not settlement.is_settled:
            continue
        if settlement.from_member not in balances or settlement.to_member not in balances:
            dropped += 1
            logger.warning(
                "Settlement references member not in group",
                extra={"extra_data": {"from": settlement.from_member, "to": settlement.to_member}},
            )
            continue
        balances[settlement.from_member] += settlement.amount
        balances[settlement.to_member] -= settlement.amount

    if dropped:
        logger.info("Balances computed with dropped references", extra={"extra_data": {"dropped": dropped}})

    return [Balance(member_id=mid, amount=amount) for mid, amount in balances.items()]


def balances_total(balances: list[Balance]) -> Decimal:
    return sum_amounts(b.amount for b in balances)


def simplify_settlements(
    balances: list[Balance],
    epsilon: Decimal = EPSILON,
) -> list[Transfer]:
    """Greedy debt simplification: match largest creditor with largest debtor.

    The result settles every balance when the input sums to zero, but it is a
    heuristic and does not guarantee the minimum number of transfers.

    Ordering is deterministic: ties in amount keep the input order.
    """
    total = balances_total(balances)
    if not is_negligible(total, epsilon):
        logger.warning(
            "Balances do not sum to zero; settlement plan will be incomplete",
            extra={"extra_data": {"total": str(total)}},
        )

    creditors = []
    debtors = []
    for index, balance in enumerate(balances):
        if balance.amount > epsilon:
            creditors.append({"id": balance.member_id, "amount": balance.amount, "index": index})
        elif balance.amount < -epsilon:
            debtors.append({"id": balance.member_id, "amount": -balance.amount, "index": index})

    creditors.sort(key=lambda x: (-x["amount"], x["index"]))
    debtors.sort(key=lambda x: (-x["amount"], x["index"]))

    transfers = []
    ci = 0
    di = 0

    while ci < len(creditors) and di < len(debtors):
        amount = min(creditors[ci]["amount"], debtors[di]["amount"])
        if amount > epsilon:
            transfers.append(Transfer(
                from_member=debtors[di]["id"],
                to_member=creditors[ci]["id"],
                amount=amount,
            ))
        creditors[ci]["amount"] -= amount
        debtors[di]["amount"] -= amount
        if creditors[ci]["amount"] <= epsilon:
            ci += 1
        if debtors[di]["amount"] <= epsilon:
            di += 1

    return transfers


def apply_transfers(balances: list[Balance], transfers: list[Transfer]) -> list[Balance]:
    """Return the balances left after every transfer is paid."""
    remaining = {b.member_id: b.amount for b in balances}
    for t in transfers:
        remaining[t.from_member] += t.amount
        remaining[t.to_member] -= t.amount
    return [Balance(member_id=mid, amount=amount) for mid, amount in remaining.items()]


def expenses_by_category(expenses: list[Expense]) -> dict[str, Decimal]:
    """Total spend per category, in first-seen order."""
    totals: dict[str, Decimal] = {}
    for expense in expenses:
        totals[expense.category] = totals.get(expense.category, ZERO) + expense.amount
    return totals


def owed_and_owing(balance: Decimal) -> tuple[Decimal, Decimal]:
    """Split a signed balance into (you're owed, you owe)."""
    if balance < 0:
        return ZERO, -balance
    return balance, ZERO
