"""create clients and appointments with reminder state

Revision ID: 20260310_120000
Revises:
Create Date: 2026-03-10 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20260310_120000'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'clients',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=32), nullable=True),
        sa.Column('consent_whatsapp', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_clients_name', 'clients', ['name'])

    op.create_table(
        'appointments',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('client_id', sa.BigInteger(), nullable=False),
        sa.Column('start_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('reminder_status', sa.String(length=20), server_default='pending', nullable=False),
        sa.Column('reminder_channel', sa.String(length=20), server_default='none', nullable=False),
        sa.Column('reminder_sent_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('reminder_error', sa.String(length=500), nullable=True),
        sa.Column('reminder_provider', sa.String(length=32), nullable=True),
        sa.Column('reminder_message_id', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('end_time > start_time', name='ck_appointments_end_after_start')
    )

    op.create_foreign_key(
        'fk_appointments_client_id',
        'appointments', 'clients',
        ['client_id'], ['id'],
        ondelete='CASCADE'
    )
    op.create_index('ix_appointments_client_id', 'appointments', ['client_id'])
    op.create_index('ix_appointments_start_time', 'appointments', ['start_time'])
    op.create_index('ix_appointments_reminder_status', 'appointments', ['reminder_status'])

    # Candidate query: pending rows in a start_time range
    op.create_index(
        'ix_appointments_reminder_due',
        'appointments',
        ['reminder_status', 'start_time']
    )


def downgrade() -> None:
    op.drop_index('ix_appointments_reminder_due', table_name='appointments')
    op.drop_table('appointments')
    op.drop_index('ix_clients_name', table_name='clients')
    op.drop_table('clients')
