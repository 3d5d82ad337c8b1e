import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.database import get_db
from app.deps import get_group
from app.models import Member, Expense, ExpenseSplit, Settlement
from app.schemas import AddMemberIn
from app.serializers import serialize_member

logger = logging.getLogger("splitsmart")

router = APIRouter()


@router.get("/groups/{group_id}/members")
def list_members(group_id: str, db: Session = Depends(get_db)):
    group = get_group(group_id, db)
    return [serialize_member(m) for m in group.members]


@router.post("/groups/{group_id}/members", status_code=201)
def add_member(
    group_id: str,
    data: AddMemberIn,
    db: Session = Depends(get_db),
):
    group = get_group(group_id, db)
    if not data.name.strip():
        raise HTTPException(status_code=400, detail="Member name is required")

    member = Member(group_id=group.id, name=data.name, email=data.email, avatar=data.avatar)
    db.add(member)
    group.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(member)
    logger.info("Member added", extra={"extra_data": {"group_id": group.id, "member_name": data.name}})
    return serialize_member(member)


@router.delete("/groups/{group_id}/members/{member_id}", status_code=204)
def remove_member(
    group_id: str,
    member_id: str,
    db: Session = Depends(get_db),
):
    group = get_group(group_id, db)
    member = db.query(Member).filter(
        Member.id == member_id, Member.group_id == group.id
    ).first()
    if not member:
        raise HTTPException(status_code=404, detail="Member not found")

    # Check referential integrity
    in_splits = db.query(ExpenseSplit).filter(
        ExpenseSplit.member_id == member_id
    ).first()
    paid_expenses = db.query(Expense).filter(
        Expense.paid_by_id == member_id
    ).first()
    in_settlements = db.query(Settlement).filter(
        (Settlement.from_member_id == member_id) | (Settlement.to_member_id == member_id)
    ).first()

    if in_splits or paid_expenses or in_settlements:
        raise HTTPException(
            status_code=409,
            detail="Member is referenced in expenses or settlements",
        )

    db.delete(member)
    group.updated_at = datetime.utcnow()
    db.commit()
    return None
