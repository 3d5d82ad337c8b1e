from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.balances import compute_balances
from app.categories import CATEGORIES, describe_category
from app.database import get_db
from app.deps import get_group, load_snapshot
from app.serializers import serialize_balance, serialize_category_totals

router = APIRouter()


@router.get("/groups/{group_id}/balances")
def get_balances(
    group_id: str,
    include_settled: bool = Query(True),
    db: Session = Depends(get_db),
):
    group = get_group(group_id, db)
    members, expenses, settlements = load_snapshot(db, group.id)
    balances = compute_balances(members, expenses, settlements if include_settled else ())
    names = {m.id: m.name for m in members}
    return [serialize_balance(b, names) for b in balances]


@router.get("/groups/{group_id}/analytics")
def get_analytics(group_id: str, db: Session = Depends(get_db)):
    group = get_group(group_id, db)
    _, expenses, _ = load_snapshot(db, group.id)
    return {"categories": serialize_category_totals(expenses)}


@router.get("/categories")
def list_categories():
    return [describe_category(value) for value in CATEGORIES]
