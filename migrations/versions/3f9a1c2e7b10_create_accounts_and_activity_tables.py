"""create accounts and activity tables

Revision ID: 3f9a1c2e7b10
Revises:
Create Date: 2026-09-02 11:04:37.218390

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3f9a1c2e7b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # 1. accounts
    op.create_table(
        'accounts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('household_id', sa.String(length=32), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('identifier', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('password_hash', sa.String(length=255), nullable=True),
        sa.Column('role', sa.String(length=16), nullable=False, server_default='household'),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='active'),
        sa.Column('warning_message', sa.Text(), nullable=True),
        sa.Column('has_green_badge', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('booking_reminders', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('push_notifications', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('email_notifications', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('sms_notifications', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('profile_picture', sa.Text(), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('outstanding_balance', sa.Numeric(precision=20, scale=2), nullable=False, server_default='0'),
        sa.Column('family_size', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('address_area', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('address_landmark', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('address_pincode', sa.String(length=16), nullable=False, server_default=''),
        sa.Column('login_streak', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_streak_increment', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('consecutive_mixed_waste_logs', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_waste_log_date', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('attendance_status', sa.String(length=16), nullable=True),
        sa.Column('last_login_time', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('last_ip_address', sa.String(length=64), nullable=True),
        sa.Column('last_location_lat', sa.Float(), nullable=True),
        sa.Column('last_location_lng', sa.Float(), nullable=True),
        sa.Column('last_location_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('identifier'),
    )
    op.create_index('ix_accounts_household_id', 'accounts', ['household_id'], unique=True)

    # 2. event_log
    op.create_table(
        'event_log',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('household_id', sa.String(length=32), nullable=False),
        sa.Column('actor_id', sa.String(length=32), nullable=True),
        sa.Column('event_type', sa.String(length=128), nullable=False),
        sa.Column('payload_json', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column('occurred_at', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_event_log_household_id', 'event_log', ['household_id'])
    op.create_index('ix_event_log_event_type', 'event_log', ['event_type'])
    op.create_index('ix_event_log_occurred_at', 'event_log', ['occurred_at'])

    # 3. payments
    op.create_table(
        'payments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('txn_ref', sa.String(length=32), nullable=False),
        sa.Column('household_id', sa.String(length=32), nullable=False),
        sa.Column('amount', sa.Numeric(precision=20, scale=2), nullable=False),
        sa.Column('status', sa.String(length=32), nullable=False, server_default='Pending Verification'),
        sa.Column('screenshot', sa.Text(), nullable=True),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('resolved_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('txn_ref'),
    )
    op.create_index('ix_payments_household_id', 'payments', ['household_id'])

    # 4. complaints
    op.create_table(
        'complaints',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('complaint_ref', sa.String(length=32), nullable=False),
        sa.Column('household_id', sa.String(length=32), nullable=False),
        sa.Column('issue', sa.String(length=255), nullable=False),
        sa.Column('details', sa.Text(), nullable=False, server_default=''),
        sa.Column('photo', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='Pending'),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('complaint_ref'),
    )
    op.create_index('ix_complaints_household_id', 'complaints', ['household_id'])

    # 5. bookings
    op.create_table(
        'bookings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('booking_ref', sa.String(length=32), nullable=False),
        sa.Column('household_id', sa.String(length=32), nullable=False),
        sa.Column('pickup_date', sa.Date(), nullable=False),
        sa.Column('time_slot', sa.String(length=16), nullable=False),
        sa.Column('waste_type', sa.String(length=32), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='Scheduled'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('attendee_count', sa.Integer(), nullable=True),
        sa.Column('booking_fee', sa.Numeric(precision=20, scale=2), nullable=True),
        sa.Column('needs_fee_adjustment', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('booking_ref'),
    )
    op.create_index('ix_bookings_household_id', 'bookings', ['household_id'])

    # 6. messages
    op.create_table(
        'messages',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('recipient_id', sa.String(length=32), nullable=False),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_messages_recipient_id', 'messages', ['recipient_id'])

    # 7. feedback
    op.create_table(
        'feedback',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('household_id', sa.String(length=32), nullable=False),
        sa.Column('feedback_text', sa.Text(), nullable=False),
        sa.Column('rating', sa.SmallInteger(), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_feedback_household_id', 'feedback', ['household_id'])

    # 8. waste_logs
    op.create_table(
        'waste_logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('log_ref', sa.String(length=32), nullable=False),
        sa.Column('household_id', sa.String(length=32), nullable=False),
        sa.Column('waste_type', sa.String(length=16), nullable=False),
        sa.Column('logged_at', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('log_ref'),
    )
    op.create_index('ix_waste_logs_household_id', 'waste_logs', ['household_id'])
    op.create_index('ix_waste_logs_logged_at', 'waste_logs', ['logged_at'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('waste_logs')
    op.drop_table('feedback')
    op.drop_table('messages')
    op.drop_table('bookings')
    op.drop_table('complaints')
    op.drop_table('payments')
    op.drop_table('event_log')
    op.drop_table('accounts')
