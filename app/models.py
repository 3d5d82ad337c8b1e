import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean, Column, String, Numeric, DateTime, ForeignKey, UniqueConstraint,
)
from sqlalchemy.orm import relationship

from app.database import Base


def new_uuid():
    return str(uuid.uuid4())


class Group(Base):
    __tablename__ = "groups"

    id = Column(String, primary_key=True, default=new_uuid)
    name = Column(String(255), nullable=False)
    icon = Column(String(16), nullable=False, default="🏠")
    created_by = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    members = relationship("Member", back_populates="group", cascade="all, delete-orphan", order_by="Member.joined_at")
    expenses = relationship("Expense", back_populates="group", cascade="all, delete-orphan", order_by="desc(Expense.date)")
    settlements = relationship("Settlement", back_populates="group", cascade="all, delete-orphan")


class Member(Base):
    __tablename__ = "members"

    id = Column(String, primary_key=True, default=new_uuid)
    group_id = Column(String, ForeignKey("groups.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    avatar = Column(String(500), nullable=True)
    joined_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    group = relationship("Group", back_populates="members")


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(String, primary_key=True, default=new_uuid)
    group_id = Column(String, ForeignKey("groups.id", ondelete="CASCADE"), nullable=False)
    description = Column(String(500), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    category = Column(String(32), nullable=False, default="other")
    paid_by_id = Column(String, ForeignKey("members.id", ondelete="RESTRICT"), nullable=False)
    split_method = Column(String(20), nullable=False, default="equal")
    date = Column(DateTime, default=datetime.utcnow, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    group = relationship("Group", back_populates="expenses")
    splits = relationship("ExpenseSplit", back_populates="expense", cascade="all, delete-orphan")


class ExpenseSplit(Base):
    __tablename__ = "expense_splits"

    id = Column(String, primary_key=True, default=new_uuid)
    expense_id = Column(String, ForeignKey("expenses.id", ondelete="CASCADE"), nullable=False)
    member_id = Column(String, ForeignKey("members.id", ondelete="RESTRICT"), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    # percentage or custom amount as entered; NULL for equal splits
    split_value = Column(Numeric(10, 2), nullable=True)

    __table_args__ = (UniqueConstraint("expense_id", "member_id"),)

    expense = relationship("Expense", back_populates="splits")


class Settlement(Base):
    __tablename__ = "settlements"

    id = Column(String, primary_key=True, default=new_uuid)
    group_id = Column(String, ForeignKey("groups.id", ondelete="CASCADE"), nullable=False)
    from_member_id = Column(String, ForeignKey("members.id", ondelete="RESTRICT"), nullable=False)
    to_member_id = Column(String, ForeignKey("members.id", ondelete="RESTRICT"), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    is_settled = Column(Boolean, nullable=False, default=False)
    settled_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    group = relationship("Group", back_populates="settlements")
