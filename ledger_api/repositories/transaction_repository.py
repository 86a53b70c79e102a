from datetime import date
from typing import Iterable, Optional
from sqlalchemy import update
from sqlalchemy.orm import Session, selectinload

from ledger_api.models.transaction import (
    Transaction,
    TransactionSplit,
    LineItem,
    TransactionType,
)


def _with_details():
    """Eager-load splits, their line items, and the line items' tags"""
    return selectinload(Transaction.splits).selectinload(TransactionSplit.line_items).selectinload(
        LineItem.tags
    )


class TransactionRepository:
    """Repository for Transaction data access"""

    def __init__(self, db: Session):
        self.db = db

    def create_no_commit(self, transaction: Transaction) -> Transaction:
        """
        Add a transaction with its splits and line items without committing.
        Caller responsible for commit. Enables atomic multi-table writes.
        """
        self.db.add(transaction)
        self.db.flush()  # Assign IDs without committing
        return transaction

    def get_by_id_and_user(
        self, transaction_id: int, user_id: int
    ) -> Optional[Transaction]:
        """
        Get live transaction by ID with its full aggregate, ensuring it belongs to the user.

        Returns:
            Transaction object or None if not found, soft-deleted, or owned by another user
        """
        return (
            self.db.query(Transaction)
            .options(_with_details())
            .filter(
                Transaction.id == transaction_id,
                Transaction.user_id == user_id,
                Transaction.deleted_at.is_(None),
            )
            .populate_existing()
            .first()
        )

    def find_transactions(
        self,
        user_id: int,
        account_id: int,
        start_date: date,
        end_date: date,
        transaction_type: Optional[TransactionType] = None,
        include_splits: bool = False,
    ) -> list[Transaction]:
        """
        Get live transactions for an account in an inclusive date range.

        Args:
            user_id: Owner for isolation
            account_id: Account filter
            start_date: Start date (inclusive)
            end_date: End date (inclusive)
            transaction_type: Optional EXPENSE / INCOME filter
            include_splits: Eager-load splits, line items and tags

        Returns:
            Transactions sorted newest first
        """
        query = self.db.query(Transaction).filter(
            Transaction.user_id == user_id,
            Transaction.financial_account_id == account_id,
            Transaction.date >= start_date,
            Transaction.date <= end_date,
            Transaction.deleted_at.is_(None),
        )

        if transaction_type is not None:
            query = query.filter(Transaction.type == transaction_type)

        if include_splits:
            query = query.options(_with_details())

        return query.order_by(Transaction.date.desc(), Transaction.id.desc()).all()

    def get_latest_by_payee(
        self, user_id: int, account_id: int, payee_id: int
    ) -> Optional[Transaction]:
        """Most recent live transaction for a payee on an account"""
        return (
            self.db.query(Transaction)
            .options(_with_details())
            .filter(
                Transaction.user_id == user_id,
                Transaction.financial_account_id == account_id,
                Transaction.payee_id == payee_id,
                Transaction.deleted_at.is_(None),
            )
            .order_by(Transaction.date.desc(), Transaction.id.desc())
            .first()
        )

    def get_by_category_ids(self, category_ids: Iterable[int]) -> list[Transaction]:
        """All transactions (deleted included) with a split in any of the categories"""
        category_ids = list(category_ids)
        if not category_ids:
            return []
        return (
            self.db.query(Transaction)
            .options(selectinload(Transaction.splits))
            .join(TransactionSplit, TransactionSplit.transaction_id == Transaction.id)
            .filter(TransactionSplit.category_id.in_(category_ids))
            .distinct()
            .all()
        )

    def update_payee_name(self, payee_id: int, payee_name: str) -> int:
        """Rewrite the payee name snapshot on every transaction of a payee. No commit."""
        result = self.db.execute(
            update(Transaction)
            .where(Transaction.payee_id == payee_id)
            .values(payee_name=payee_name)
        )
        return result.rowcount

    def update_account_name(self, account_id: int, account_name: str) -> int:
        """Rewrite the account name snapshot on every transaction of an account. No commit."""
        result = self.db.execute(
            update(Transaction)
            .where(Transaction.financial_account_id == account_id)
            .values(account_name=account_name)
        )
        return result.rowcount

    def update_split_category_full_name(self, category_id: int, full_name: str) -> int:
        """Rewrite the category snapshot on every split of a category. No commit."""
        result = self.db.execute(
            update(TransactionSplit)
            .where(TransactionSplit.category_id == category_id)
            .values(category_full_name=full_name)
        )
        return result.rowcount

    def soft_delete(self, transaction: Transaction) -> None:
        """Mark transaction deleted; splits stay in place"""
        transaction.soft_delete()
        self.db.commit()
