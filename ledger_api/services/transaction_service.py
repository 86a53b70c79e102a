import logging
from datetime import date
from typing import Iterable, Optional
from sqlalchemy.orm import Session

from ledger_api.config import settings
from ledger_api.core.currency import format_amount
from ledger_api.core.exceptions import NotFoundException, InvalidOperationException
from ledger_api.models.account import FinancialAccount
from ledger_api.models.category import FULL_NAME_SEPARATOR
from ledger_api.models.payee import Payee
from ledger_api.models.transaction import Transaction, TransactionSplit, LineItem
from ledger_api.models.user import User
from ledger_api.repositories.account_repository import AccountRepository
from ledger_api.repositories.category_repository import CategoryRepository
from ledger_api.repositories.payee_repository import PayeeRepository
from ledger_api.repositories.transaction_repository import TransactionRepository
from ledger_api.schemas.transaction_schemas import (
    SplitCreate,
    TransactionCreate,
    TransactionUpdate,
    TransactionResponse,
    SplitResponse,
    LineItemResponse,
    TransactionsGroup,
    TransactionsGroupedResponse,
)
from ledger_api.services.tag_service import TagService

logger = logging.getLogger(__name__)


def validate_split_amounts(splits: list[SplitCreate]) -> None:
    """
    Ensure line items add up to their split.

    Splits without line items are not checked.

    Raises:
        InvalidOperationException: On the first split whose line items don't sum to its amount
    """
    for split in splits:
        if split.line_items:
            line_items_total = sum(item.amount for item in split.line_items)
            if line_items_total != split.amount:
                raise InvalidOperationException(
                    f"Split amount ({split.amount}) does not match sum of line items ({line_items_total})"
                )


def summarize_category_names(full_names: Iterable[str]) -> Optional[str]:
    """
    Build the transaction-level category label from split category paths.

    Uses the top-level segment of each path; several distinct parents are
    sorted and joined with ", ".
    """
    parents = sorted({name.split(FULL_NAME_SEPARATOR, 1)[0] for name in full_names})
    if not parents:
        return None
    return ", ".join(parents)


def refresh_split_totals(transaction: Transaction) -> None:
    """Recompute total_amount, split_count and category_name from the current splits"""
    transaction.total_amount = sum(split.amount for split in transaction.splits)
    transaction.split_count = max(len(transaction.splits), 1)
    transaction.category_name = summarize_category_names(
        split.category_full_name for split in transaction.splits
    )


class TransactionService:
    """Service layer for transaction business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.transaction_repo = TransactionRepository(db)
        self.account_repo = AccountRepository(db)
        self.payee_repo = PayeeRepository(db)
        self.category_repo = CategoryRepository(db)
        self.tag_service = TagService(db)

    def create_transaction(
        self, transaction_data: TransactionCreate, user: User
    ) -> TransactionResponse:
        """
        Create a transaction with its splits, line items and tags atomically.

        Args:
            transaction_data: Transaction creation data
            user: Current user (for ownership verification)

        Returns:
            The reloaded transaction

        Raises:
            InvalidOperationException: If line items don't sum to their split
            NotFoundException: If payee, account or a category doesn't exist for the user
        """
        validate_split_amounts(transaction_data.splits)

        payee = self._get_payee(transaction_data.payee_id, user)
        account = self._get_account(transaction_data.account_id, user)

        transaction = Transaction(
            user_id=user.id,
            date=transaction_data.date,
            type=transaction_data.type,
            memo=transaction_data.memo,
        )
        self._assign_payee(transaction, payee)
        self._assign_account(transaction, account)

        try:
            self._write_splits(transaction, transaction_data.splits, user)
            self.transaction_repo.create_no_commit(transaction)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            "Created transaction %s for user %s (%s splits, total %s)",
            transaction.id,
            user.id,
            transaction.split_count,
            transaction.total_amount,
        )
        return self.get_transaction(transaction.id, user)

    def get_transaction(self, transaction_id: int, user: User) -> TransactionResponse:
        """
        Get transaction by ID with ownership verification.

        Raises:
            NotFoundException: If transaction doesn't exist, is deleted, or doesn't belong to user
        """
        return self.to_response(self._get_transaction(transaction_id, user))

    def get_transactions_filter(
        self, user: User, account_id: int, start_date: date, end_date: date
    ) -> TransactionsGroupedResponse:
        """
        Transactions for an account in a date range, grouped by ISO date.

        Groups follow the newest-first order of the underlying query.
        """
        transactions = self.transaction_repo.find_transactions(
            user_id=user.id,
            account_id=account_id,
            start_date=start_date,
            end_date=end_date,
            include_splits=True,
        )

        grouped: dict[str, list[TransactionResponse]] = {}
        for transaction in transactions:
            grouped.setdefault(transaction.date.isoformat(), []).append(
                self.to_response(transaction)
            )

        return TransactionsGroupedResponse(
            transactions_group=[
                TransactionsGroup(date=day, transactions=items) for day, items in grouped.items()
            ]
        )

    def get_latest_transaction_by_payee(
        self, user: User, account_id: int, payee_id: int
    ) -> Optional[TransactionResponse]:
        """Most recent transaction for a payee on an account, used to prefill new entries"""
        transaction = self.transaction_repo.get_latest_by_payee(user.id, account_id, payee_id)
        if transaction is None:
            return None
        return self.to_response(transaction)

    def update_transaction(
        self, transaction_id: int, transaction_data: TransactionUpdate, user: User
    ) -> TransactionResponse:
        """
        Update a transaction in a single database transaction.

        Provided scalar fields overwrite in place. If splits are provided, the
        existing splits (with their line items and tag links) are deleted and
        replaced by the new set; totals are recomputed.

        Raises:
            NotFoundException: If transaction, payee, account or a category is not found
            InvalidOperationException: If line items don't sum to their split
        """
        transaction = self._get_transaction(transaction_id, user)

        if transaction_data.splits is not None:
            validate_split_amounts(transaction_data.splits)

        try:
            if transaction_data.date is not None:
                transaction.date = transaction_data.date

            if transaction_data.payee_id is not None:
                self._assign_payee(transaction, self._get_payee(transaction_data.payee_id, user))

            if transaction_data.account_id is not None:
                self._assign_account(
                    transaction, self._get_account(transaction_data.account_id, user)
                )

            if transaction_data.type is not None:
                transaction.type = transaction_data.type

            if "memo" in transaction_data.model_fields_set:
                transaction.memo = transaction_data.memo

            if transaction_data.splits is not None:
                self._remove_splits(transaction)
                self._write_splits(transaction, transaction_data.splits, user)

            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info("Updated transaction %s for user %s", transaction.id, user.id)
        return self.get_transaction(transaction.id, user)

    def delete_transaction(self, transaction_id: int, user: User) -> None:
        """
        Soft delete a transaction.

        Splits and line items stay in place; they are hidden with their parent.
        """
        transaction = self._get_transaction(transaction_id, user)
        self.transaction_repo.soft_delete(transaction)
        logger.info("Deleted transaction %s for user %s", transaction_id, user.id)

    def to_response(self, transaction: Transaction) -> TransactionResponse:
        """Serialize a loaded aggregate, formatting amounts in its currency"""
        currency_code = transaction.currency_code

        def fmt(amount: int) -> str:
            return format_amount(amount, currency_code, settings.TRANSACTION_FALLBACK_CURRENCY)

        splits = [
            SplitResponse(
                category_id=split.category_id,
                category_full_name=split.category_full_name,
                amount=split.amount,
                formatted_amount=fmt(split.amount),
                memo=split.memo,
                line_items=[
                    LineItemResponse(
                        name=item.name,
                        amount=item.amount,
                        formatted_amount=fmt(item.amount),
                        tags=[tag.name for tag in item.tags if not tag.is_deleted],
                        memo=item.memo,
                    )
                    for item in sorted(split.line_items, key=lambda i: i.sort_order)
                ],
            )
            for split in sorted(transaction.splits, key=lambda s: s.sort_order)
        ]

        return TransactionResponse(
            id=transaction.id,
            date=transaction.date,
            payee_id=transaction.payee_id,
            payee_name=transaction.payee_name,
            account_id=transaction.financial_account_id,
            account_name=transaction.account_name,
            currency_code=currency_code,
            total_amount=transaction.total_amount,
            formatted_total_amount=fmt(transaction.total_amount),
            split_count=transaction.split_count,
            type=transaction.type,
            memo=transaction.memo,
            category_name=transaction.category_name,
            splits=splits,
            created_at=transaction.created_at,
            updated_at=transaction.updated_at,
        )

    def _get_transaction(self, transaction_id: int, user: User) -> Transaction:
        transaction = self.transaction_repo.get_by_id_and_user(transaction_id, user.id)
        if not transaction:
            raise NotFoundException("Transaction", transaction_id)
        return transaction

    def _get_payee(self, payee_id: int, user: User) -> Payee:
        payee = self.payee_repo.get_by_id_and_user(payee_id, user.id)
        if not payee:
            raise NotFoundException("Payee", payee_id)
        return payee

    def _get_account(self, account_id: int, user: User) -> FinancialAccount:
        account = self.account_repo.get_by_id_and_user(account_id, user.id)
        if not account:
            raise NotFoundException("FinancialAccount", account_id)
        return account

    @staticmethod
    def _assign_payee(transaction: Transaction, payee: Payee) -> None:
        transaction.payee_id = payee.id
        transaction.payee_name = payee.name

    @staticmethod
    def _assign_account(transaction: Transaction, account: FinancialAccount) -> None:
        transaction.financial_account_id = account.id
        transaction.account_name = account.name
        transaction.currency_code = account.currency_type.value

    def _write_splits(
        self, transaction: Transaction, splits: list[SplitCreate], user: User
    ) -> None:
        """
        Attach new splits in client order and recompute the derived totals.

        Categories must exist for the user. Tags are resolved or created and
        their usage counts bumped once per line item association.
        """
        for split_index, split_data in enumerate(splits):
            category = self.category_repo.get_by_id_and_user(split_data.category_id, user.id)
            if not category:
                raise NotFoundException("Category", split_data.category_id)

            split = TransactionSplit(
                category_id=category.id,
                category_full_name=category.full_name,
                amount=split_data.amount,
                memo=split_data.memo,
                sort_order=split_index,
            )

            for item_index, item_data in enumerate(split_data.line_items):
                tags = self.tag_service.find_or_create_many(user.id, item_data.tags)
                for tag in tags:
                    tag.usage_count += 1

                split.line_items.append(
                    LineItem(
                        name=item_data.name,
                        amount=item_data.amount,
                        memo=item_data.memo,
                        sort_order=item_index,
                        tags=tags,
                    )
                )

            transaction.splits.append(split)

        refresh_split_totals(transaction)

    def _remove_splits(self, transaction: Transaction) -> None:
        """Delete every split (cascading to line items and tag links) and release tag usage"""
        for split in transaction.splits:
            for item in split.line_items:
                for tag in item.tags:
                    tag.usage_count = max(tag.usage_count - 1, 0)

        transaction.splits.clear()
        self.db.flush()
