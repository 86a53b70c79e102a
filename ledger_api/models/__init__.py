"""ORM models. Importing this package registers every table on Base.metadata."""

from ledger_api.models.base import Base
from ledger_api.models.user import User
from ledger_api.models.account import FinancialAccount, CurrencyType
from ledger_api.models.payee import Payee
from ledger_api.models.category import Category
from ledger_api.models.tag import Tag
from ledger_api.models.transaction import (
    Transaction,
    TransactionSplit,
    LineItem,
    TransactionType,
    line_item_tags,
)

__all__ = [
    "Base",
    "User",
    "FinancialAccount",
    "CurrencyType",
    "Payee",
    "Category",
    "Tag",
    "Transaction",
    "TransactionSplit",
    "LineItem",
    "TransactionType",
    "line_item_tags",
]
