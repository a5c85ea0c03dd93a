"""initial schema

Revision ID: 20261018_initial
Revises:
Create Date: 2026-10-18 00:00:00.000000

Creates the complete LottoDesk schema:
- users / session_tokens: back-office identity and bearer sessions
- boxes / activated_books: scratch ticket catalogue and book activations
- daily_box_entries / daily_entry_submissions / ticket_continuity_logs:
  the per-(date, box) ledger, its submission lock and mismatch log
- lottery_reports / pos_reports / daily_cash_register: terminal and POS totals
- players / player_transactions: player credit ledger

open_number, close_number and new_box_start_number are nullable: a blank
reading means "no ticket in the box" and is different from 0.
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '20261018_initial'
down_revision = None
branch_labels = None
depends_on = None


def _timestamp(name):
    return sa.Column(name, sa.DateTime(timezone=True), nullable=False,
                     server_default=sa.text('CURRENT_TIMESTAMP'))


def upgrade():
    # ============================================================================
    # users / session_tokens
    # ============================================================================
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(length=64), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=16), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        _timestamp('created_at'),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)

    op.create_table(
        'session_tokens',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('token_hash', sa.String(length=255), nullable=False),
        _timestamp('created_at'),
        _timestamp('last_used_at'),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('is_revoked', sa.Boolean(), nullable=False),
        sa.Column('revoked_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_session_tokens_user_id', 'session_tokens', ['user_id'])
    op.create_index('ix_session_tokens_token_hash', 'session_tokens', ['token_hash'], unique=True)
    op.create_index('ix_session_tokens_expires_at', 'session_tokens', ['expires_at'])
    op.create_index('ix_session_tokens_is_revoked', 'session_tokens', ['is_revoked'])
    op.create_index('ix_session_tokens_user_active', 'session_tokens', ['user_id', 'is_revoked'])

    # ============================================================================
    # boxes / activated_books
    # ============================================================================
    op.create_table(
        'boxes',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('box_number', sa.Integer(), nullable=True),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('ticket_value_cents', sa.Integer(), nullable=False),
        sa.Column('category', sa.String(length=16), nullable=False),
        _timestamp('created_at'),
        _timestamp('updated_at'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('box_number'),
        sqlite_autoincrement=True
    )

    op.create_table(
        'activated_books',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('box_id', sa.Integer(), nullable=False),
        sa.Column('activated_date', sa.Date(), nullable=False),
        sa.Column('start_ticket_number', sa.Integer(), nullable=False),
        sa.Column('ticket_count', sa.Integer(), nullable=False),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('created_by_user_id', sa.Integer(), nullable=True),
        _timestamp('created_at'),
        sa.ForeignKeyConstraint(['box_id'], ['boxes.id'], ),
        sa.ForeignKeyConstraint(['created_by_user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_activated_books_box_id', 'activated_books', ['box_id'])
    op.create_index('ix_activated_books_activated_date', 'activated_books', ['activated_date'])
    op.create_index('ix_activated_books_box_date', 'activated_books', ['box_id', 'activated_date'])

    # ============================================================================
    # daily ledger
    # ============================================================================
    op.create_table(
        'daily_box_entries',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('box_id', sa.Integer(), nullable=False),
        sa.Column('open_number', sa.Integer(), nullable=True),
        sa.Column('close_number', sa.Integer(), nullable=True),
        sa.Column('new_box_start_number', sa.Integer(), nullable=True),
        sa.Column('activated_book_id', sa.Integer(), nullable=True),
        sa.Column('sold_count', sa.Integer(), nullable=False),
        sa.Column('sold_amount_cents', sa.Integer(), nullable=False),
        sa.Column('created_by_user_id', sa.Integer(), nullable=False),
        _timestamp('created_at'),
        _timestamp('updated_at'),
        sa.ForeignKeyConstraint(['box_id'], ['boxes.id'], ),
        sa.ForeignKeyConstraint(['activated_book_id'], ['activated_books.id'], ),
        sa.ForeignKeyConstraint(['created_by_user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('date', 'box_id', name='uq_daily_box_entries_date_box'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_daily_box_entries_date', 'daily_box_entries', ['date'])
    op.create_index('ix_daily_box_entries_box_id', 'daily_box_entries', ['box_id'])

    op.create_table(
        'daily_entry_submissions',
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('submitted_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('submitted_by_user_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['submitted_by_user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('date')
    )

    op.create_table(
        'ticket_continuity_logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('box_id', sa.Integer(), nullable=False),
        sa.Column('prev_close', sa.Integer(), nullable=False),
        sa.Column('today_open', sa.Integer(), nullable=False),
        sa.Column('difference', sa.Integer(), nullable=False),
        sa.Column('severity', sa.String(length=16), nullable=False),
        _timestamp('created_at'),
        sa.ForeignKeyConstraint(['box_id'], ['boxes.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_ticket_continuity_logs_date', 'ticket_continuity_logs', ['date'])
    op.create_index('ix_ticket_continuity_logs_severity', 'ticket_continuity_logs', ['severity'])
    op.create_index('ix_continuity_logs_date_box', 'ticket_continuity_logs', ['date', 'box_id'])

    # ============================================================================
    # lottery_reports: one table for both report kinds (report_kind discriminator)
    # ============================================================================
    op.create_table(
        'lottery_reports',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('report_kind', sa.String(length=32), nullable=False),
        sa.Column('commission_cents', sa.Integer(), nullable=True),
        sa.Column('net_sales_cents', sa.Integer(), nullable=True),
        sa.Column('net_due_cents', sa.Integer(), nullable=True),
        sa.Column('raw_image_url', sa.String(length=512), nullable=True),
        sa.Column('instant_ticket_count', sa.Integer(), nullable=True),
        sa.Column('instant_total_cents', sa.Integer(), nullable=True),
        sa.Column('event_count', sa.Integer(), nullable=True),
        sa.Column('event_value_cents', sa.Integer(), nullable=True),
        sa.Column('total_sales_cents', sa.Integer(), nullable=True),
        sa.Column('season_tkts_cents', sa.Integer(), nullable=True),
        sa.Column('discount_cents', sa.Integer(), nullable=True),
        sa.Column('cancels_cents', sa.Integer(), nullable=True),
        sa.Column('free_bets_cents', sa.Integer(), nullable=True),
        sa.Column('cash_count', sa.Integer(), nullable=True),
        sa.Column('cash_value_cents', sa.Integer(), nullable=True),
        sa.Column('cash_bonus_cents', sa.Integer(), nullable=True),
        sa.Column('claims_bonus_cents', sa.Integer(), nullable=True),
        sa.Column('adjustments_cents', sa.Integer(), nullable=True),
        sa.Column('service_fee_cents', sa.Integer(), nullable=True),
        sa.Column('created_by_user_id', sa.Integer(), nullable=False),
        _timestamp('created_at'),
        _timestamp('updated_at'),
        sa.ForeignKeyConstraint(['created_by_user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('date', 'report_kind', name='uq_lottery_reports_date_kind'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_lottery_reports_date', 'lottery_reports', ['date'])

    op.create_table(
        'pos_reports',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('grocery_total_cents', sa.Integer(), nullable=False),
        sa.Column('cash_cents', sa.Integer(), nullable=False),
        sa.Column('card_cents', sa.Integer(), nullable=False),
        sa.Column('raw_image_url', sa.String(length=512), nullable=True),
        sa.Column('created_by_user_id', sa.Integer(), nullable=False),
        _timestamp('created_at'),
        _timestamp('updated_at'),
        sa.ForeignKeyConstraint(['created_by_user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('date'),
        sqlite_autoincrement=True
    )

    op.create_table(
        'daily_cash_register',
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('lottery_cash_at_register_cents', sa.Integer(), nullable=True),
        sa.Column('grocery_cash_at_register_cents', sa.Integer(), nullable=True),
        sa.Column('created_by_user_id', sa.Integer(), nullable=False),
        _timestamp('updated_at'),
        sa.ForeignKeyConstraint(['created_by_user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('date')
    )

    # ============================================================================
    # player credit ledger
    # ============================================================================
    op.create_table(
        'players',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=128), nullable=False),
        _timestamp('created_at'),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )

    op.create_table(
        'player_transactions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('player_id', sa.Integer(), nullable=False),
        sa.Column('transaction_type', sa.String(length=16), nullable=True),
        sa.Column('amount_cents', sa.Integer(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('game_details', sa.Text(), nullable=True),
        sa.Column('created_by_user_id', sa.Integer(), nullable=False),
        _timestamp('created_at'),
        sa.ForeignKeyConstraint(['player_id'], ['players.id'], ),
        sa.ForeignKeyConstraint(['created_by_user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_player_transactions_player_id', 'player_transactions', ['player_id'])
    op.create_index('ix_player_transactions_date', 'player_transactions', ['date'])
    op.create_index('ix_player_transactions_player_date', 'player_transactions', ['player_id', 'date'])


def downgrade():
    op.drop_table('player_transactions')
    op.drop_table('players')
    op.drop_table('daily_cash_register')
    op.drop_table('pos_reports')
    op.drop_table('lottery_reports')
    op.drop_table('ticket_continuity_logs')
    op.drop_table('daily_entry_submissions')
    op.drop_table('daily_box_entries')
    op.drop_table('activated_books')
    op.drop_table('boxes')
    op.drop_table('session_tokens')
    op.drop_table('users')
