"""Create users, residents, sessions and logs tables

Revision ID: 3f2a9c1d7e40
Revises:
Create Date: 2025-11-20 10:12:31.402118

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# Revision identifiers used by Alembic
revision: str = '3f2a9c1d7e40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('first_name', sa.String(), nullable=True),
        sa.Column('last_name', sa.String(), nullable=True),
        sa.Column('profile_image_url', sa.String(), nullable=True),
        sa.Column('role', sa.String(), server_default='user', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table(
        'residents',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(), nullable=True),
        sa.Column('full_name', sa.String(), nullable=False),
        sa.Column('age', sa.Integer(), nullable=False),
        sa.Column('gender', sa.Enum('male', 'female', 'other', name='gender'), nullable=False),
        sa.Column('phone_number', sa.String(), nullable=False),
        sa.Column('house_number', sa.String(), nullable=False),
        sa.Column('current_location', sa.Enum('village', 'city', 'abroad', name='location'), nullable=False),
        sa.Column('current_city', sa.String(), nullable=True),
        sa.Column('current_country', sa.String(), nullable=True),
        sa.Column('departure_date', sa.Date(), nullable=True),
        sa.Column('expected_return_date', sa.Date(), nullable=True),
        sa.Column('occupation', sa.Enum('student', 'job', 'business', 'farming', 'unemployed', name='occupation'), nullable=False),
        sa.Column('company', sa.String(), nullable=True),
        sa.Column('work_sector', sa.String(), nullable=True),
        sa.Column('work_details', sa.Text(), nullable=True),
        sa.Column('is_visible', sa.Boolean(), nullable=False),
        sa.Column('show_phone', sa.Boolean(), nullable=False),
        sa.Column('show_location', sa.Boolean(), nullable=False),
        sa.Column('show_return_date', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.CheckConstraint('age > 0'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_residents_id'), 'residents', ['id'], unique=False)
    op.create_index(op.f('ix_residents_user_id'), 'residents', ['user_id'], unique=True)
    op.create_index(op.f('ix_residents_full_name'), 'residents', ['full_name'], unique=False)
    op.create_index(op.f('ix_residents_current_location'), 'residents', ['current_location'], unique=False)
    op.create_index(op.f('ix_residents_occupation'), 'residents', ['occupation'], unique=False)
    op.create_index(op.f('ix_residents_is_visible'), 'residents', ['is_visible'], unique=False)
    op.create_index(op.f('ix_residents_created_at'), 'residents', ['created_at'], unique=False)

    op.create_table(
        'sessions',
        sa.Column('sid', sa.String(), nullable=False),
        sa.Column('sess', sa.JSON(), nullable=False),
        sa.Column('expire', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('sid'),
    )
    op.create_index('IDX_session_expire', 'sessions', ['expire'], unique=False)

    op.create_table(
        'logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('ts', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.Column('user_id', sa.String(), nullable=True),
        sa.Column('action', sa.String(length=50), nullable=True),
        sa.Column('resource', sa.String(length=50), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=True),
        sa.Column('ip', sa.String(length=64), nullable=True),
        sa.Column('meta', sa.JSON(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_logs_id'), 'logs', ['id'], unique=False)
    op.create_index(op.f('ix_logs_ts'), 'logs', ['ts'], unique=False)
    op.create_index(op.f('ix_logs_user_id'), 'logs', ['user_id'], unique=False)
    op.create_index(op.f('ix_logs_action'), 'logs', ['action'], unique=False)
    op.create_index(op.f('ix_logs_resource'), 'logs', ['resource'], unique=False)
    op.create_index(op.f('ix_logs_status'), 'logs', ['status'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('logs')
    op.drop_index('IDX_session_expire', table_name='sessions')
    op.drop_table('sessions')
    op.drop_table('residents')
    op.drop_table('users')
    sa.Enum(name='occupation').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='location').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='gender').drop(op.get_bind(), checkfirst=True)
