from decimal import Decimal

from pydantic import BaseModel, field_validator

from app.money import to_amount


class Member(BaseModel):
    id: str
    name: str
    email: str | None = None  # optional contact reference

    model_config = {"frozen": True}


class Split(BaseModel):
    member_id: str
    amount: Decimal

    model_config = {"frozen": True}

    @field_validator("amount", mode="before")
    @classmethod
    def _check_amount(cls, v):
        return to_amount(v)


class Expense(BaseModel):
    id: str | None = None
    description: str = ""
    amount: Decimal
    category: str = "other"
    paid_by: str
    split_method: str = "equal"
    splits: list[Split] = []

    @field_validator("amount", mode="before")
    @classmethod
    def _check_amount(cls, v):
        return to_amount(v)


class RecordedSettlement(BaseModel):
    """A transfer someone recorded; only applied to balances once settled."""

    from_member: str
    to_member: str
    amount: Decimal
    is_settled: bool = False

    @field_validator("amount", mode="before")
    @classmethod
    def _check_amount(cls, v):
        return to_amount(v)


class Balance(BaseModel):
    member_id: str
    amount: Decimal  # > 0 is owed money, < 0 owes money


class Transfer(BaseModel):
    from_member: str
    to_member: str
    amount: Decimal

    model_config = {"frozen": True}
