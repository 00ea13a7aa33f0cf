# alembic/versions/001_initial.py

"""Initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-18
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # Create strategy_settings table
    op.create_table('strategy_settings',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('stocks_target_percent', sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column('cash_target_percent', sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column('tranche_1_trigger', sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column('tranche_2_trigger', sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column('tranche_3_trigger', sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column('rebuild_threshold', sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column('cash_min_pct', sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column('cash_max_pct', sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column('contribution_split_cash_percent', sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column('contribution_split_stocks_percent', sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column('monthly_contribution_total', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('currency', sa.String(length=3), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_strategy_settings_user_id'), 'strategy_settings', ['user_id'], unique=True)

    # Create ammo_state table
    op.create_table('ammo_state',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('tranche_1_used', sa.Boolean(), nullable=False),
        sa.Column('tranche_2_used', sa.Boolean(), nullable=False),
        sa.Column('tranche_3_used', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_ammo_state_user_id'), 'ammo_state', ['user_id'], unique=True)

    # Create portfolio_snapshot table
    op.create_table('portfolio_snapshot',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('snapshot_month', sa.Date(), nullable=False),
        sa.Column('value_sp', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('value_ta', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('value_cash', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('total_value', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('percent_sp', sa.Numeric(precision=7, scale=4), nullable=False),
        sa.Column('percent_ta', sa.Numeric(precision=7, scale=4), nullable=False),
        sa.Column('percent_cash', sa.Numeric(precision=7, scale=4), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'snapshot_month', name='uq_portfolio_snapshot_user_month')
    )
    op.create_index(op.f('ix_portfolio_snapshot_user_id'), 'portfolio_snapshot', ['user_id'], unique=False)

    # Create contribution table
    op.create_table('contribution',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('snapshot_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('amount_sp', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('amount_ta', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('amount_cash', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('currency', sa.String(length=3), nullable=False),
        sa.Column('contribution_type', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['snapshot_id'], ['portfolio_snapshot.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('snapshot_id')
    )
    op.create_index(op.f('ix_contribution_user_id'), 'contribution', ['user_id'], unique=False)

    # Create market_state_log table
    op.create_table('market_state_log',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('ticker', sa.String(length=20), nullable=False),
        sa.Column('last_price', sa.Numeric(precision=12, scale=4), nullable=False),
        sa.Column('high_52w', sa.Numeric(precision=12, scale=4), nullable=False),
        sa.Column('drawdown_percent', sa.Numeric(precision=9, scale=4), nullable=True),
        sa.Column('as_of_date', sa.Date(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_market_state_log_user_id'), 'market_state_log', ['user_id'], unique=False)
    op.create_index('ix_market_state_log_user_date', 'market_state_log', ['user_id', 'as_of_date'], unique=False)

    # Create recommendation_log table
    op.create_table('recommendation_log',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('snapshot_id', sa.Integer(), nullable=True),
        sa.Column('recommendation_type', sa.String(length=32), nullable=False),
        sa.Column('recommendation_text', sa.Text(), nullable=False),
        sa.Column('transfer_amount', sa.Numeric(precision=14, scale=2), nullable=True),
        sa.Column('drawdown_percent', sa.Numeric(precision=9, scale=4), nullable=True),
        sa.Column('market_status', sa.String(length=20), nullable=True),
        sa.Column('priority', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['snapshot_id'], ['portfolio_snapshot.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_recommendation_log_user_id'), 'recommendation_log', ['user_id'], unique=False)

    # Create notification table
    op.create_table('notification',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('notification_type', sa.String(length=50), nullable=False),
        sa.Column('metadata', sa.JSON(), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_notification_user_id'), 'notification', ['user_id'], unique=False)


def downgrade():
    op.drop_index(op.f('ix_notification_user_id'), table_name='notification')
    op.drop_table('notification')
    op.drop_index(op.f('ix_recommendation_log_user_id'), table_name='recommendation_log')
    op.drop_table('recommendation_log')
    op.drop_index('ix_market_state_log_user_date', table_name='market_state_log')
    op.drop_index(op.f('ix_market_state_log_user_id'), table_name='market_state_log')
    op.drop_table('market_state_log')
    op.drop_index(op.f('ix_contribution_user_id'), table_name='contribution')
    op.drop_table('contribution')
    op.drop_index(op.f('ix_portfolio_snapshot_user_id'), table_name='portfolio_snapshot')
    op.drop_table('portfolio_snapshot')
    op.drop_index(op.f('ix_ammo_state_user_id'), table_name='ammo_state')
    op.drop_table('ammo_state')
    op.drop_index(op.f('ix_strategy_settings_user_id'), table_name='strategy_settings')
    op.drop_table('strategy_settings')
