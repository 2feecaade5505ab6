"""add subscription plans and broadcasts

Revision ID: 8d2e4b6a9c31
Revises: 3f9a1c2e7b10
Create Date: 2026-09-09 16:27:51.604112

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8d2e4b6a9c31'
down_revision: Union[str, Sequence[str], None] = '3f9a1c2e7b10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'subscription_plans',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('standard', sa.Numeric(precision=20, scale=2), nullable=False),
        sa.Column('large_family', sa.Numeric(precision=20, scale=2), nullable=False),
        sa.Column('large_family_threshold', sa.Integer(), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_table(
        'broadcasts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    # Default monthly tiers
    op.execute(
        "INSERT INTO subscription_plans (standard, large_family, large_family_threshold) "
        "VALUES (63, 75, 5)"
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('broadcasts')
    op.drop_table('subscription_plans')
