"""add otp challenges

Revision ID: c47e2a9f1d58
Revises: 8d2e4b6a9c31
Create Date: 2026-10-19 10:12:03.447921

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'c47e2a9f1d58'
down_revision: Union[str, Sequence[str], None] = '8d2e4b6a9c31'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'otp_challenges',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('challenge_id', sa.String(length=64), nullable=False),
        sa.Column('identifier', sa.String(length=255), nullable=False),
        sa.Column('portal', sa.String(length=16), nullable=False),
        sa.Column('code_hash', sa.String(length=255), nullable=False),
        sa.Column('attempts', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('expires_at', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_otp_challenges_challenge_id', 'otp_challenges', ['challenge_id'], unique=True)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_otp_challenges_challenge_id', table_name='otp_challenges')
    op.drop_table('otp_challenges')
