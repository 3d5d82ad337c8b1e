from decimal import Decimal

from app import ledger
from app.balances import expenses_by_category
from app.categories import describe_category
from app.models import Group, Member, Expense, Settlement
from app.money import ZERO, format_amount


def serialize_member(member: Member) -> dict:
    return {
        "id": str(member.id),
        "groupId": str(member.group_id),
        "name": member.name,
        "email": member.email,
        "avatar": member.avatar,
        "joinedAt": member.joined_at.isoformat(),
    }


def serialize_expense(expense: Expense, member_names: dict[str, str] | None = None) -> dict:
    member_names = member_names or {}
    return {
        "id": str(expense.id),
        "groupId": str(expense.group_id),
        "description": expense.description,
        "amount": format_amount(expense.amount),
        "category": expense.category,
        "paidBy": str(expense.paid_by_id),
        "paidByName": member_names.get(expense.paid_by_id, "Unknown"),
        "splitMethod": expense.split_method,
        "splits": [
            {
                "memberId": str(s.member_id),
                "memberName": member_names.get(s.member_id, "Unknown"),
                "amount": format_amount(s.amount),
            }
            for s in expense.splits
        ],
        "date": expense.date.isoformat(),
    }


def serialize_settlement(settlement: Settlement) -> dict:
    return {
        "id": str(settlement.id),
        "groupId": str(settlement.group_id),
        "from": str(settlement.from_member_id),
        "to": str(settlement.to_member_id),
        "amount": format_amount(settlement.amount),
        "isSettled": settlement.is_settled,
        "settledAt": settlement.settled_at.isoformat() if settlement.settled_at else None,
        "createdAt": settlement.created_at.isoformat(),
    }


def serialize_group(group: Group) -> dict:
    return {
        "id": str(group.id),
        "name": group.name,
        "icon": group.icon,
        "createdBy": group.created_by,
        "createdAt": group.created_at.isoformat(),
        "updatedAt": group.updated_at.isoformat(),
        "members": [serialize_member(m) for m in group.members],
    }


def serialize_group_summary(group: Group) -> dict:
    total = sum((e.amount for e in group.expenses), ZERO)
    recent = max(group.expenses, key=lambda e: e.date, default=None)
    names = {m.id: m.name for m in group.members}
    return {
        "id": str(group.id),
        "name": group.name,
        "icon": group.icon,
        "createdBy": group.created_by,
        "createdAt": group.created_at.isoformat(),
        "totalExpenses": format_amount(total),
        "memberCount": len(group.members),
        "recentExpense": serialize_expense(recent, names) if recent else None,
    }


def serialize_balance(balance: ledger.Balance, member_names: dict[str, str]) -> dict:
    return {
        "memberId": balance.member_id,
        "memberName": member_names.get(balance.member_id, "Unknown"),
        "balance": format_amount(balance.amount),
    }


def serialize_transfer(transfer: ledger.Transfer, member_names: dict[str, str]) -> dict:
    return {
        "from": transfer.from_member,
        "fromName": member_names.get(transfer.from_member, "Unknown"),
        "to": transfer.to_member,
        "toName": member_names.get(transfer.to_member, "Unknown"),
        "amount": format_amount(transfer.amount),
    }


def serialize_category_totals(expenses: list[ledger.Expense]) -> list[dict]:
    totals: dict[str, Decimal] = expenses_by_category(expenses)
    return [
        {**describe_category(category), "total": format_amount(total)}
        for category, total in totals.items()
    ]
