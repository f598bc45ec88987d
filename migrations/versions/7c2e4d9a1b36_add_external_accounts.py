"""add external_accounts table linking provider identities to users

Revision ID: 7c2e4d9a1b36
Revises: 3f1c9a2b7d10
Create Date: 2026-10-20 10:03:17.482911

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '7c2e4d9a1b36'
down_revision = '3f1c9a2b7d10'
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('external_accounts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('provider', sa.String(length=50), nullable=False),
        sa.Column('subject', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('provider', 'subject', name='uq_external_accounts_provider_subject')
    )
    op.create_index('ix_external_accounts_user_id', 'external_accounts', ['user_id'], unique=False)


def downgrade():
    op.drop_index('ix_external_accounts_user_id', table_name='external_accounts')
    op.drop_table('external_accounts')
