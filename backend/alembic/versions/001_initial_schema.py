"""Initial schema

Revision ID: 001_initial
Revises: 
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create sessions table
    op.create_table(
        'sessions',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('email', sa.String(length=320), nullable=False),
        sa.Column('start_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint('end_time IS NULL OR end_time >= start_time', name='ck_sessions_end_after_start'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_sessions_email'), 'sessions', ['email'], unique=False)
    op.create_index(op.f('ix_sessions_start_time'), 'sessions', ['start_time'], unique=False)

    # Create data_points table
    op.create_table(
        'data_points',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('session_id', sa.String(length=36), nullable=False),
        sa.Column('value', sa.Integer(), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('value >= -100 AND value <= 100', name='ck_data_points_value_range'),
        sa.ForeignKeyConstraint(['session_id'], ['sessions.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_data_points_session_id'), 'data_points', ['session_id'], unique=False)
    op.create_index(op.f('ix_data_points_timestamp'), 'data_points', ['timestamp'], unique=False)
    op.create_index('idx_data_points_session_timestamp', 'data_points', ['session_id', 'timestamp'], unique=False)


def downgrade() -> None:
    op.drop_index('idx_data_points_session_timestamp', table_name='data_points')
    op.drop_index(op.f('ix_data_points_timestamp'), table_name='data_points')
    op.drop_index(op.f('ix_data_points_session_id'), table_name='data_points')
    op.drop_table('data_points')
    op.drop_index(op.f('ix_sessions_start_time'), table_name='sessions')
    op.drop_index(op.f('ix_sessions_email'), table_name='sessions')
    op.drop_table('sessions')
