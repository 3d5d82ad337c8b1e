import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from app.balances import compute_balances, owed_and_owing
from app.database import get_db
from app.deps import get_group, get_user_id, load_snapshot
from app.models import Group, Member
from app.money import ZERO, format_amount
from app.ratelimit import limiter
from app.schemas import CreateGroupIn, UpdateGroupIn
from app.serializers import serialize_group, serialize_group_summary

logger = logging.getLogger("splitsmart")

router = APIRouter()


def _user_groups(db: Session, user_id: str) -> list[Group]:
    """Groups the caller created or belongs to (matched by member email)."""
    member_group_ids = db.query(Member.group_id).filter(Member.email == user_id)
    return (
        db.query(Group)
        .filter((Group.created_by == user_id) | (Group.id.in_(member_group_ids)))
        .order_by(Group.created_at.desc())
        .all()
    )


@router.get("/groups")
def list_groups(request: Request, db: Session = Depends(get_db)):
    user_id = get_user_id(request)
    return [serialize_group_summary(g) for g in _user_groups(db, user_id)]


@router.post("/groups", status_code=201)
@limiter.limit("20/hour")
def create_group(request: Request, data: CreateGroupIn, db: Session = Depends(get_db)):
    if not data.name.strip():
        raise HTTPException(status_code=400, detail="Group name is required")

    group = Group(name=data.name, icon=data.icon, created_by=get_user_id(request))
    db.add(group)
    db.flush()  # get group.id

    for name in data.members:
        db.add(Member(group_id=group.id, name=name))

    db.commit()
    db.refresh(group)
    logger.info("Group created", extra={"extra_data": {"group_id": group.id, "member_count": len(data.members)}})
    return serialize_group(group)


@router.get("/groups/{group_id}")
def get_group_detail(group_id: str, db: Session = Depends(get_db)):
    group = get_group(group_id, db)
    return serialize_group(group)


@router.patch("/groups/{group_id}")
def update_group(group_id: str, data: UpdateGroupIn, db: Session = Depends(get_db)):
    group = get_group(group_id, db)

    if data.name is not None:
        if not data.name.strip():
            raise HTTPException(status_code=400, detail="Group name is required")
        group.name = data.name
    if data.icon is not None:
        group.icon = data.icon

    group.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(group)
    return serialize_group(group)


@router.delete("/groups/{group_id}", status_code=204)
def delete_group(group_id: str, db: Session = Depends(get_db)):
    group = get_group(group_id, db)
    db.delete(group)
    db.commit()
    logger.info("Group deleted", extra={"extra_data": {"group_id": group_id}})
    return None


@router.get("/user/stats")
def user_stats(request: Request, db: Session = Depends(get_db)):
    """Totals across the caller's groups.

    The caller's own balance is found by member email or name matching the
    X-User-Id header.
    """
    user_id = get_user_id(request)
    groups = _user_groups(db, user_id)

    total_expenses = ZERO
    total_owed = ZERO
    total_owing = ZERO
    for group in groups:
        members, expenses, settlements = load_snapshot(db, group.id)
        total_expenses += sum((e.amount for e in expenses), ZERO)

        mine = {m.id for m in members if user_id in (m.email, m.name)}
        for balance in compute_balances(members, expenses, settlements):
            if balance.member_id in mine:
                owed, owing = owed_and_owing(balance.amount)
                total_owed += owed
                total_owing += owing

    return {
        "totalGroups": len(groups),
        "totalExpenses": format_amount(total_expenses),
        "youOwe": format_amount(total_owing),
        "youreOwed": format_amount(total_owed),
    }
