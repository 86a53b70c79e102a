"""initial_ledger_schema

Revision ID: 3f1c2a9b7d10
Revises:
Create Date: 2026-10-16 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9b7d10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

LIVE_ROWS = sa.text("deleted_at IS NULL")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def _soft_delete_timestamps() -> list[sa.Column]:
    return _timestamps() + [sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True)]


def _live_unique_index(name: str, table: str, columns: list[str]) -> None:
    """Unique index restricted to rows that are not soft-deleted"""
    op.create_index(
        name,
        table,
        columns,
        unique=True,
        sqlite_where=LIVE_ROWS,
        postgresql_where=LIVE_ROWS,
    )


def upgrade() -> None:
    """
    Create the ledger schema.

    Creates:
    - users
    - financial_accounts, payees, categories, tags (soft-deletable, unique names among live rows)
    - transactions, transaction_splits, line_items, line_item_tags
    """
    # 1. Users mirrored from the identity provider
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('auth_user_id', sa.String(length=255), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_auth_user_id', 'users', ['auth_user_id'], unique=True)

    # 2. Reference data
    op.create_table(
        'financial_accounts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column(
            'currency_type',
            sa.Enum('USD', 'CAD', 'INR', name='currencytype', native_enum=False),
            nullable=False,
        ),
        *_soft_delete_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('length(name) >= 1', name='ck_financial_accounts_name_length'),
    )
    op.create_index('ix_financial_accounts_user_id', 'financial_accounts', ['user_id'])
    _live_unique_index('uq_financial_accounts_user_name', 'financial_accounts', ['user_id', 'name'])

    op.create_table(
        'payees',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        *_soft_delete_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('length(name) >= 1', name='ck_payees_name_length'),
    )
    op.create_index('ix_payees_user_id', 'payees', ['user_id'])
    _live_unique_index('uq_payees_user_name', 'payees', ['user_id', 'name'])

    op.create_table(
        'categories',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('parent_id', sa.Integer(), nullable=True),
        sa.Column('full_name', sa.String(length=511), nullable=False),
        *_soft_delete_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['parent_id'], ['categories.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('length(name) >= 1', name='ck_categories_name_length'),
    )
    op.create_index('ix_categories_user_id', 'categories', ['user_id'])
    op.create_index('ix_categories_parent_id', 'categories', ['parent_id'])
    op.create_index('ix_categories_user_parent', 'categories', ['user_id', 'parent_id'])
    _live_unique_index('uq_categories_user_full_name', 'categories', ['user_id', 'full_name'])

    op.create_table(
        'tags',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('usage_count', sa.Integer(), nullable=False, server_default='0'),
        *_soft_delete_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('length(name) >= 1 AND length(name) <= 50', name='ck_tags_name_length'),
        sa.CheckConstraint('usage_count >= 0', name='ck_tags_usage_count'),
    )
    op.create_index('ix_tags_user_id', 'tags', ['user_id'])
    _live_unique_index('uq_tags_user_name', 'tags', ['user_id', 'name'])

    # 3. Transactions with their splits and line items
    op.create_table(
        'transactions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('financial_account_id', sa.Integer(), nullable=False),
        sa.Column('payee_id', sa.Integer(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column(
            'type',
            sa.Enum('EXPENSE', 'INCOME', name='transactiontype', native_enum=False),
            nullable=False,
        ),
        sa.Column('memo', sa.Text(), nullable=True),
        sa.Column('total_amount', sa.BigInteger(), nullable=False, server_default='0'),
        sa.Column('split_count', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('account_name', sa.String(length=255), nullable=False),
        sa.Column('currency_code', sa.String(length=3), nullable=False),
        sa.Column('payee_name', sa.String(length=255), nullable=False),
        sa.Column('category_name', sa.Text(), nullable=True),
        *_soft_delete_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(
            ['financial_account_id'], ['financial_accounts.id'], ondelete='RESTRICT'
        ),
        sa.ForeignKeyConstraint(['payee_id'], ['payees.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('total_amount >= 0', name='ck_transactions_total_amount'),
        sa.CheckConstraint('split_count >= 1', name='ck_transactions_split_count'),
    )
    op.create_index('ix_transactions_user_id', 'transactions', ['user_id'])
    op.create_index(
        'ix_transactions_user_account_date',
        'transactions',
        ['user_id', 'financial_account_id', 'date'],
    )
    op.create_index('ix_transactions_user_payee_date', 'transactions', ['user_id', 'payee_id', 'date'])
    op.create_index('ix_transactions_user_type_date', 'transactions', ['user_id', 'type', 'date'])

    op.create_table(
        'transaction_splits',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('transaction_id', sa.Integer(), nullable=False),
        sa.Column('category_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.BigInteger(), nullable=False),
        sa.Column('memo', sa.Text(), nullable=True),
        sa.Column('category_full_name', sa.String(length=511), nullable=False),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        sa.ForeignKeyConstraint(['transaction_id'], ['transactions.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['category_id'], ['categories.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('amount > 0', name='ck_transaction_splits_amount'),
    )
    op.create_index('ix_transaction_splits_transaction_id', 'transaction_splits', ['transaction_id'])
    op.create_index('ix_transaction_splits_category_id', 'transaction_splits', ['category_id'])

    op.create_table(
        'line_items',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('split_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('amount', sa.BigInteger(), nullable=False),
        sa.Column('memo', sa.Text(), nullable=True),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        sa.ForeignKeyConstraint(['split_id'], ['transaction_splits.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('amount > 0', name='ck_line_items_amount'),
    )
    op.create_index('ix_line_items_split_id', 'line_items', ['split_id'])

    op.create_table(
        'line_item_tags',
        sa.Column('line_item_id', sa.Integer(), nullable=False),
        sa.Column('tag_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['line_item_id'], ['line_items.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['tag_id'], ['tags.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('line_item_id', 'tag_id'),
    )


def downgrade() -> None:
    """Drop the ledger schema in reverse dependency order"""
    op.drop_table('line_item_tags')
    op.drop_index('ix_line_items_split_id', table_name='line_items')
    op.drop_table('line_items')
    op.drop_index('ix_transaction_splits_category_id', table_name='transaction_splits')
    op.drop_index('ix_transaction_splits_transaction_id', table_name='transaction_splits')
    op.drop_table('transaction_splits')
    op.drop_index('ix_transactions_user_type_date', table_name='transactions')
    op.drop_index('ix_transactions_user_payee_date', table_name='transactions')
    op.drop_index('ix_transactions_user_account_date', table_name='transactions')
    op.drop_index('ix_transactions_user_id', table_name='transactions')
    op.drop_table('transactions')

    for table, indexes in (
        ('tags', ['uq_tags_user_name', 'ix_tags_user_id']),
        (
            'categories',
            [
                'uq_categories_user_full_name',
                'ix_categories_user_parent',
                'ix_categories_parent_id',
                'ix_categories_user_id',
            ],
        ),
        ('payees', ['uq_payees_user_name', 'ix_payees_user_id']),
        ('financial_accounts', ['uq_financial_accounts_user_name', 'ix_financial_accounts_user_id']),
    ):
        for index in indexes:
            op.drop_index(index, table_name=table)
        op.drop_table(table)

    op.drop_index('ix_users_auth_user_id', table_name='users')
    op.drop_table('users')
