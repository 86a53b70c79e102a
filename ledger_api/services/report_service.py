import logging
from dataclasses import dataclass, field
from sqlalchemy.orm import Session

from ledger_api.config import settings
from ledger_api.core.currency import format_amount, to_major_units
from ledger_api.models.category import FULL_NAME_SEPARATOR
from ledger_api.models.transaction import Transaction
from ledger_api.models.user import User
from ledger_api.repositories.transaction_repository import TransactionRepository
from ledger_api.schemas.report_schemas import (
    ReportQuery,
    PieChartDataItem,
    SpendingsByPayeesResponse,
    CategoryTreeChildNode,
    CategoryTreeNode,
    SpendingsByCategoriesResponse,
)

logger = logging.getLogger(__name__)


@dataclass
class _Bucket:
    id: int
    label: str
    total: int = 0
    children: dict[str, "_Bucket"] = field(default_factory=dict)


class ReportService:
    """Monthly spending aggregations over one account"""

    def __init__(self, db: Session):
        self.db = db
        self.transaction_repo = TransactionRepository(db)

    def get_spendings_by_payees(self, query: ReportQuery, user: User) -> SpendingsByPayeesResponse:
        """
        Total spending per payee, largest first.

        Pie chart ids are positions in the sorted list.
        """
        transactions = self._find(query, user, include_splits=False)
        currency_code = self._report_currency(transactions)

        payees: dict[int, _Bucket] = {}
        total_amount = 0
        for transaction in transactions:
            total_amount += transaction.total_amount
            bucket = payees.setdefault(
                transaction.payee_id,
                _Bucket(id=transaction.payee_id, label=transaction.payee_name),
            )
            bucket.total += transaction.total_amount

        ranked = sorted(payees.values(), key=lambda b: b.total, reverse=True)
        pie_chart_data = [
            PieChartDataItem(
                id=index,
                value=to_major_units(bucket.total, currency_code, settings.REPORT_FALLBACK_CURRENCY),
                label=bucket.label,
                formatted_value=self._format(bucket.total, currency_code),
            )
            for index, bucket in enumerate(ranked)
        ]

        return SpendingsByPayeesResponse(
            total_amount=total_amount,
            formatted_total_amount=self._format(total_amount, currency_code),
            pie_chart_data=pie_chart_data,
        )

    def get_spendings_by_categories(
        self, query: ReportQuery, user: User
    ) -> SpendingsByCategoriesResponse:
        """
        Split amounts rolled up into a two-level category tree.

        The tree is keyed on the split category path snapshots, so renamed
        categories report under their current name. A parent node takes the
        category id of the first split seen for it.
        """
        transactions = self._find(query, user, include_splits=True)
        currency_code = self._report_currency(transactions)

        parents: dict[str, _Bucket] = {}
        grand_total = 0
        for transaction in transactions:
            for split in transaction.splits:
                parent_label, _, child_label = split.category_full_name.partition(
                    FULL_NAME_SEPARATOR
                )
                grand_total += split.amount

                parent = parents.setdefault(
                    parent_label, _Bucket(id=split.category_id, label=parent_label)
                )
                parent.total += split.amount

                if child_label:
                    child = parent.children.setdefault(
                        child_label, _Bucket(id=split.category_id, label=child_label)
                    )
                    child.total += split.amount

        category_tree = [
            CategoryTreeNode(
                category_id=parent.id,
                category_name=parent.label,
                total_amount=parent.total,
                formatted_total_amount=self._format(parent.total, currency_code),
                children=[
                    CategoryTreeChildNode(
                        category_id=child.id,
                        category_name=child.label,
                        total_amount=child.total,
                        formatted_total_amount=self._format(child.total, currency_code),
                    )
                    for child in sorted(
                        parent.children.values(), key=lambda b: b.total, reverse=True
                    )
                ],
            )
            for parent in sorted(parents.values(), key=lambda b: b.total, reverse=True)
        ]

        pie_chart_data = [
            PieChartDataItem(
                id=index,
                value=to_major_units(
                    node.total_amount, currency_code, settings.REPORT_FALLBACK_CURRENCY
                ),
                label=node.category_name,
                formatted_value=node.formatted_total_amount,
            )
            for index, node in enumerate(category_tree)
        ]

        return SpendingsByCategoriesResponse(
            category_tree=category_tree,
            total_amount=grand_total,
            formatted_total_amount=self._format(grand_total, currency_code),
            pie_chart_data=pie_chart_data,
        )

    def _find(self, query: ReportQuery, user: User, include_splits: bool) -> list[Transaction]:
        transactions = self.transaction_repo.find_transactions(
            user_id=user.id,
            account_id=query.account_id,
            start_date=query.start_of_month,
            end_date=query.end_of_month,
            transaction_type=query.transaction_type,
            include_splits=include_splits,
        )
        logger.debug(
            "Report for user %s account %s: %s transactions",
            user.id,
            query.account_id,
            len(transactions),
        )
        return transactions

    @staticmethod
    def _report_currency(transactions: list[Transaction]) -> str:
        # Reports are single-account, so the first row's currency speaks for all
        if transactions:
            return transactions[0].currency_code
        return settings.REPORT_FALLBACK_CURRENCY

    @staticmethod
    def _format(amount: int, currency_code: str) -> str:
        return format_amount(amount, currency_code, settings.REPORT_FALLBACK_CURRENCY)
