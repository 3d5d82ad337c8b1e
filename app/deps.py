import logging

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from app import ledger
from app.database import get_db
from app.models import Expense, Group, Member, Settlement

logger = logging.getLogger("splitsmart")

DEFAULT_USER_ID = "default-user"


def get_user_id(request: Request) -> str:
    """Read the caller identity header; there is no authentication."""
    return request.headers.get("x-user-id") or DEFAULT_USER_ID


def get_group(
    group_id: str,
    db: Session = Depends(get_db),
) -> Group:
    group = db.query(Group).filter(Group.id == group_id).first()
    if not group:
        raise HTTPException(status_code=404, detail="Group not found")
    return group


def group_member_ids(db: Session, group_id: str) -> set[str]:
    return {m.id for m in db.query(Member.id).filter(Member.group_id == group_id).all()}


def load_snapshot(
    db: Session, group_id: str
) -> tuple[list[ledger.Member], list[ledger.Expense], list[ledger.RecordedSettlement]]:
    """Read a group's members, expenses and settlements as plain ledger records.

    Everything is read inside one session so balance math runs on a
    consistent snapshot.
    """
    members = [
        ledger.Member(id=m.id, name=m.name, email=m.email)
        for m in db.query(Member).filter(Member.group_id == group_id).order_by(Member.joined_at, Member.id).all()
    ]
    expenses = [
        ledger.Expense(
            id=e.id,
            description=e.description,
            amount=e.amount,
            category=e.category,
            paid_by=e.paid_by_id,
            split_method=e.split_method,
            splits=[ledger.Split(member_id=s.member_id, amount=s.amount) for s in e.splits],
        )
        for e in db.query(Expense).filter(Expense.group_id == group_id).order_by(Expense.created_at, Expense.id).all()
    ]
    settlements = [
        ledger.RecordedSettlement(
            from_member=s.from_member_id,
            to_member=s.to_member_id,
            amount=s.amount,
            is_settled=s.is_settled,
        )
        for s in db.query(Settlement).filter(Settlement.group_id == group_id).all()
    ]
    return members, expenses, settlements
