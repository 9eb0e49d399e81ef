"""create favorites table

Revision ID: 20261019_1010_create_favorites
Revises: 20261019_1000_create_activities
Create Date: 2026-10-19 10:10:00
"""
from alembic import op
import sqlalchemy as sa

revision = '20261019_1010_create_favorites'
down_revision = '20261019_1000_create_activities'
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table(
        'favorites',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.String(128), nullable=False, index=True),
        sa.Column(
            'activity_id',
            sa.Integer(),
            sa.ForeignKey('activities.id', ondelete='CASCADE'),
            nullable=False,
            index=True,
        ),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('user_id', 'activity_id', name='uq_favorites_user_activity'),
    )

def downgrade() -> None:
    op.drop_table('favorites')
