"""Create users and otp_codes tables.

Revision ID: 0001
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision = '0001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.String(32), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('username', sa.String(24), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('role', sa.String(16), nullable=False, server_default='USER'),
        sa.Column('token_version', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    # Email uniqueness is enforced here, not only by the signup check
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_user_id', 'users', ['user_id'], unique=True)

    op.create_table(
        'otp_codes',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('code_hash', sa.String(64), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('used', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_otp_codes_id', 'otp_codes', ['id'])
    # At most one code row per email
    op.create_index('ix_otp_codes_email', 'otp_codes', ['email'], unique=True)


def downgrade():
    op.drop_index('ix_otp_codes_email')
    op.drop_index('ix_otp_codes_id')
    op.drop_table('otp_codes')
    op.drop_index('ix_users_user_id')
    op.drop_index('ix_users_email')
    op.drop_index('ix_users_id')
    op.drop_table('users')
