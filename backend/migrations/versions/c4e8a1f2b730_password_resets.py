"""password resets

Revision ID: c4e8a1f2b730
Revises: 7b1d3c9e4a20
Create Date: 2026-10-20 00:00:00.000000
"""
import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = 'c4e8a1f2b730'
down_revision = '7b1d3c9e4a20'
branch_labels = None
depends_on = None

password_reset_status = sa.Enum(
    'REQUESTED',
    'PWD_CHANGED',
    name='enum_password_reset_status',
    create_constraint=True,
)


def upgrade():
    op.create_table(
        'password_resets',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('token', sa.String(length=128), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('created_on', sa.DateTime(timezone=True), nullable=False),
        sa.Column('expires_on', sa.DateTime(timezone=True), nullable=False),
        sa.Column('status', password_reset_status, nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name=op.f('fk_password_resets_user_id_users'), ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_password_resets')),
    )
    op.create_index(op.f('ix_password_resets_token'), 'password_resets', ['token'], unique=False)
    op.create_index(op.f('ix_password_resets_user_id'), 'password_resets', ['user_id'], unique=False)


def downgrade():
    op.drop_index(op.f('ix_password_resets_user_id'), table_name='password_resets')
    op.drop_index(op.f('ix_password_resets_token'), table_name='password_resets')
    op.drop_table('password_resets')
    password_reset_status.drop(op.get_bind(), checkfirst=True)
