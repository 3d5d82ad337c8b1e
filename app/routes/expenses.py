import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.categories import CATEGORIES
from app.database import get_db
from app.deps import get_group
from app.ledger import Split
from app.models import Expense, ExpenseSplit, Member
from app.money import to_amount
from app.schemas import ExpenseIn
from app.serializers import serialize_expense
from app.splits import resolve_splits

logger = logging.getLogger("splitsmart")

router = APIRouter()


def _resolve_expense_splits(db: Session, group_id: str, data: ExpenseIn) -> list[Split]:
    """Validate an expense payload and resolve its split list once."""
    if data.category not in CATEGORIES:
        raise HTTPException(status_code=400, detail=f"Unknown category: {data.category}")

    member_ids = [
        m.id for m in db.query(Member.id)
        .filter(Member.group_id == group_id)
        .order_by(Member.joined_at, Member.id)
        .all()
    ]
    known = set(member_ids)
    if data.paid_by not in known:
        raise HTTPException(status_code=400, detail="Payer is not a member of this group")

    if data.split_method == "equal":
        involved = data.involved_members if data.involved_members is not None else member_ids
    else:
        involved = data.involved_members if data.involved_members is not None else list(data.split_details)
    for mid in involved:
        if mid not in known:
            raise HTTPException(status_code=400, detail=f"Member {mid} is not in this group")

    try:
        return resolve_splits(data.amount, data.split_method, involved, data.split_details)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _replace_splits(db: Session, expense: Expense, splits: list[Split], data: ExpenseIn):
    """Replace split rows for an expense."""
    # Delete existing
    db.query(ExpenseSplit).filter(ExpenseSplit.expense_id == expense.id).delete()
    # Add new
    for split in splits:
        raw = data.split_details.get(split.member_id) if data.split_method != "equal" else None
        db.add(ExpenseSplit(
            expense_id=expense.id,
            member_id=split.member_id,
            amount=split.amount,
            split_value=to_amount(raw) if raw is not None else None,
        ))


def _member_names(db: Session, group_id: str) -> dict[str, str]:
    return {m.id: m.name for m in db.query(Member).filter(Member.group_id == group_id).all()}


@router.get("/groups/{group_id}/expenses")
def list_expenses(group_id: str, db: Session = Depends(get_db)):
    group = get_group(group_id, db)
    names = _member_names(db, group.id)
    expenses = (
        db.query(Expense)
        .filter(Expense.group_id == group.id)
        .order_by(Expense.date.desc(), Expense.created_at.desc())
        .all()
    )
    return [serialize_expense(e, names) for e in expenses]


@router.post("/groups/{group_id}/expenses", status_code=201)
def add_expense(
    group_id: str,
    data: ExpenseIn,
    db: Session = Depends(get_db),
):
    group = get_group(group_id, db)
    splits = _resolve_expense_splits(db, group.id, data)

    expense = Expense(
        group_id=group.id,
        description=data.description,
        amount=to_amount(data.amount),
        category=data.category,
        paid_by_id=data.paid_by,
        split_method=data.split_method,
        date=data.date or datetime.utcnow(),
    )
    db.add(expense)
    db.flush()

    _replace_splits(db, expense, splits, data)

    group.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(expense)
    logger.info("Expense added", extra={"extra_data": {"group_id": group.id, "expense_id": expense.id}})
    return serialize_expense(expense, _member_names(db, group.id))


@router.put("/groups/{group_id}/expenses/{expense_id}")
def update_expense(
    group_id: str,
    expense_id: str,
    data: ExpenseIn,
    db: Session = Depends(get_db),
):
    group = get_group(group_id, db)
    expense = db.query(Expense).filter(
        Expense.id == expense_id, Expense.group_id == group.id
    ).first()
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")

    splits = _resolve_expense_splits(db, group.id, data)

    expense.description = data.description
    expense.amount = to_amount(data.amount)
    expense.category = data.category
    expense.paid_by_id = data.paid_by
    expense.split_method = data.split_method
    if data.date is not None:
        expense.date = data.date

    _replace_splits(db, expense, splits, data)

    group.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(expense)
    return serialize_expense(expense, _member_names(db, group.id))


@router.delete("/groups/{group_id}/expenses/{expense_id}", status_code=204)
def delete_expense(
    group_id: str,
    expense_id: str,
    db: Session = Depends(get_db),
):
    group = get_group(group_id, db)
    expense = db.query(Expense).filter(
        Expense.id == expense_id, Expense.group_id == group.id
    ).first()
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")

    db.delete(expense)
    group.updated_at = datetime.utcnow()
    db.commit()
    return None
