"""recommendation log structured fields

Revision ID: 3b8d5e2a9c41
Revises: 001
Create Date: 2026-10-18 12:00:00.000000+00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3b8d5e2a9c41'
down_revision = '001'
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.add_column('recommendation_log', sa.Column('target_percent', sa.Numeric(precision=5, scale=2), nullable=True))
    op.add_column('recommendation_log', sa.Column('cash_contribution', sa.Numeric(precision=14, scale=2), nullable=True))
    op.add_column('recommendation_log', sa.Column('stocks_contribution', sa.Numeric(precision=14, scale=2), nullable=True))
    op.add_column(
        'recommendation_log',
        sa.Column('currency', sa.String(length=3), nullable=False, server_default='USD'),
    )


def downgrade() -> None:
    op.drop_column('recommendation_log', 'currency')
    op.drop_column('recommendation_log', 'stocks_contribution')
    op.drop_column('recommendation_log', 'cash_contribution')
    op.drop_column('recommendation_log', 'target_percent')
