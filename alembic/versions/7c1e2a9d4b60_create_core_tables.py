"""create groups, members, expenses, expense_splits and settlements

Revision ID: 7c1e2a9d4b60
Revises:
Create Date: 2026-10-17 09:12:41.118204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '7c1e2a9d4b60'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'groups',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('icon', sa.String(16), nullable=False),
        sa.Column('created_by', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_table(
        'members',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('group_id', sa.String(), sa.ForeignKey('groups.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('avatar', sa.String(500), nullable=True),
        sa.Column('joined_at', sa.DateTime(), nullable=False),
    )
    op.create_table(
        'expenses',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('group_id', sa.String(), sa.ForeignKey('groups.id', ondelete='CASCADE'), nullable=False),
        sa.Column('description', sa.String(500), nullable=False),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('category', sa.String(32), nullable=False),
        sa.Column('paid_by_id', sa.String(), sa.ForeignKey('members.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('split_method', sa.String(20), nullable=False),
        sa.Column('date', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_table(
        'expense_splits',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('expense_id', sa.String(), sa.ForeignKey('expenses.id', ondelete='CASCADE'), nullable=False),
        sa.Column('member_id', sa.String(), sa.ForeignKey('members.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('split_value', sa.Numeric(10, 2), nullable=True),
        sa.UniqueConstraint('expense_id', 'member_id'),
    )
    op.create_table(
        'settlements',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('group_id', sa.String(), sa.ForeignKey('groups.id', ondelete='CASCADE'), nullable=False),
        sa.Column('from_member_id', sa.String(), sa.ForeignKey('members.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('to_member_id', sa.String(), sa.ForeignKey('members.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('is_settled', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('settled_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table('settlements')
    op.drop_table('expense_splits')
    op.drop_table('expenses')
    op.drop_table('members')
    op.drop_table('groups')
