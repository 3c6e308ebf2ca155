"""baseline schema - users and commissions

Revision ID: 001_baseline
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

revision = '001_baseline'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # Users table (artist accounts)
    op.create_table('users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('display_name', sa.String(255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_display_name', 'users', ['display_name'], unique=True)

    # Commissions table
    op.create_table('commissions',
        sa.Column('id', sa.String(64), nullable=False),
        sa.Column('artist_id', sa.String(255), nullable=False),
        sa.Column('user_id', sa.String(64), nullable=True),
        sa.Column('client_name', sa.String(255), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('type', sa.String(100), nullable=False),
        sa.Column('price', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('contact', sa.String(255), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('thumbnail_url', sa.String(1024), nullable=True),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('date_added', sa.String(10), nullable=False),
        sa.Column('last_updated', sa.String(10), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_commissions_artist_id', 'commissions', ['artist_id'])
    op.create_index('ix_commissions_user_id', 'commissions', ['user_id'])
    op.create_index('ix_commissions_status', 'commissions', ['status'])
    op.create_index('ix_commissions_date_added', 'commissions', ['date_added'])


def downgrade():
    op.drop_index('ix_commissions_date_added', table_name='commissions')
    op.drop_index('ix_commissions_status', table_name='commissions')
    op.drop_index('ix_commissions_user_id', table_name='commissions')
    op.drop_index('ix_commissions_artist_id', table_name='commissions')
    op.drop_table('commissions')
    op.drop_index('ix_users_display_name', table_name='users')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
