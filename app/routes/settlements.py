import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.balances import compute_balances, simplify_settlements
from app.database import get_db
from app.deps import get_group, group_member_ids, load_snapshot
from app.models import Settlement
from app.money import InvalidAmountError, to_amount
from app.schemas import SettlementIn
from app.serializers import serialize_settlement, serialize_transfer

logger = logging.getLogger("splitsmart")

router = APIRouter()


@router.get("/groups/{group_id}/settlements/suggested")
def suggested_settlements(group_id: str, db: Session = Depends(get_db)):
    """Greedy transfer plan that would zero out the group's current balances."""
    group = get_group(group_id, db)
    members, expenses, settlements = load_snapshot(db, group.id)
    balances = compute_balances(members, expenses, settlements)
    transfers = simplify_settlements(balances)
    names = {m.id: m.name for m in members}
    return [serialize_transfer(t, names) for t in transfers]


@router.get("/groups/{group_id}/settlements")
def list_settlements(group_id: str, db: Session = Depends(get_db)):
    group = get_group(group_id, db)
    settlements = (
        db.query(Settlement)
        .filter(Settlement.group_id == group.id)
        .order_by(Settlement.created_at)
        .all()
    )
    return [serialize_settlement(s) for s in settlements]


@router.post("/groups/{group_id}/settlements", status_code=201)
def add_settlement(
    group_id: str,
    data: SettlementIn,
    db: Session = Depends(get_db),
):
    group = get_group(group_id, db)

    # Validate members belong to this group
    member_ids = group_member_ids(db, group.id)
    if data.from_member not in member_ids:
        raise HTTPException(status_code=400, detail="'from' member not in this group")
    if data.to not in member_ids:
        raise HTTPException(status_code=400, detail="'to' member not in this group")
    if data.from_member == data.to:
        raise HTTPException(status_code=400, detail="'from' and 'to' must differ")

    try:
        amount = to_amount(data.amount)
    except InvalidAmountError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if amount <= 0:
        raise HTTPException(status_code=400, detail="Settlement amount must be positive")

    settlement = Settlement(
        group_id=group.id,
        from_member_id=data.from_member,
        to_member_id=data.to,
        amount=amount,
        is_settled=data.is_settled,
        settled_at=datetime.utcnow() if data.is_settled else None,
    )
    db.add(settlement)
    group.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(settlement)
    return serialize_settlement(settlement)


@router.put("/groups/{group_id}/settlements/{settlement_id}/settle")
def mark_settlement_paid(
    group_id: str,
    settlement_id: str,
    db: Session = Depends(get_db),
):
    group = get_group(group_id, db)
    settlement = db.query(Settlement).filter(
        Settlement.id == settlement_id, Settlement.group_id == group.id
    ).first()
    if not settlement:
        raise HTTPException(status_code=404, detail="Settlement not found")

    if not settlement.is_settled:
        settlement.is_settled = True
        settlement.settled_at = datetime.utcnow()
        group.updated_at = datetime.utcnow()
        db.commit()
        db.refresh(settlement)
        logger.info("Settlement paid", extra={"extra_data": {"group_id": group.id, "settlement_id": settlement.id}})
    return serialize_settlement(settlement)


@router.delete("/groups/{group_id}/settlements/{settlement_id}", status_code=204)
def delete_settlement(
    group_id: str,
    settlement_id: str,
    db: Session = Depends(get_db),
):
    group = get_group(group_id, db)
    settlement = db.query(Settlement).filter(
        Settlement.id == settlement_id, Settlement.group_id == group.id
    ).first()
    if not settlement:
        raise HTTPException(status_code=404, detail="Settlement not found")

    db.delete(settlement)
    group.updated_at = datetime.utcnow()
    db.commit()
    return None
