from datetime import datetime

from pydantic import BaseModel, Field


# --- Group ---

class CreateGroupIn(BaseModel):
    name: str
    icon: str = "🏠"
    members: list[str] = []  # list of member names


class UpdateGroupIn(BaseModel):
    name: str | None = None
    icon: str | None = None


# --- Members ---

class AddMemberIn(BaseModel):
    name: str
    email: str | None = None
    avatar: str | None = None


# --- Expenses ---

class ExpenseIn(BaseModel):
    description: str
    amount: str | float  # kept as text where possible so decimals stay exact
    category: str = "other"
    paid_by: str
    split_method: str = "equal"
    # equal: optional subset of member ids (defaults to every group member)
    involved_members: list[str] | None = None
    # custom: {member_id: amount}; percentage: {member_id: percent}
    split_details: dict[str, str | float] = {}
    date: datetime | None = None


# --- Settlements ---

class SettlementIn(BaseModel):
    from_member: str = Field(alias="from")
    to: str
    amount: str | float
    is_settled: bool = False

    model_config = {"populate_by_name": True}
