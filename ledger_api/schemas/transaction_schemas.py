import datetime
from typing import Annotated, Optional
from pydantic import Field, StringConstraints
from ledger_api.models.transaction import TransactionType
from ledger_api.schemas.common_schemas import CamelModel

# Integer minor units (cents), strictly positive
PositiveAmount = Annotated[int, Field(gt=0, description="Amount in minor units (cents)")]
TagName = Annotated[str, StringConstraints(strip_whitespace=True, max_length=50)]


class LineItemCreate(CamelModel):
    """Line item of a split; tags are resolved or created by name"""

    name: str = Field(..., min_length=1)
    amount: PositiveAmount
    tags: list[TagName] = Field(default_factory=list)
    memo: Optional[str] = None


class SplitCreate(CamelModel):
    """Portion of the transaction attributed to one category"""

    category_id: int = Field(..., gt=0)
    amount: PositiveAmount
    memo: Optional[str] = None
    line_items: list[LineItemCreate] = Field(default_factory=list)


class TransactionCreate(CamelModel):
    """Schema for creating a new transaction. Totals are derived from the splits."""

    date: datetime.date
    payee_id: int = Field(..., gt=0)
    account_id: int = Field(..., gt=0)
    type: TransactionType
    memo: Optional[str] = None
    splits: list[SplitCreate] = Field(..., min_length=1)


class TransactionUpdate(CamelModel):
    """
    Schema for updating a transaction.

    Scalar fields overwrite in place. When splits are provided they replace
    the existing split set entirely.
    """

    date: Optional[datetime.date] = None
    payee_id: Optional[int] = Field(None, gt=0)
    account_id: Optional[int] = Field(None, gt=0)
    type: Optional[TransactionType] = None
    memo: Optional[str] = None
    splits: Optional[list[SplitCreate]] = Field(None, min_length=1)


class LineItemResponse(CamelModel):
    name: str
    amount: int
    formatted_amount: str
    tags: list[str]
    memo: Optional[str]


class SplitResponse(CamelModel):
    category_id: int
    category_full_name: str
    amount: int
    formatted_amount: str
    memo: Optional[str]
    line_items: list[LineItemResponse]


class TransactionResponse(CamelModel):
    """Schema for transaction response"""

    id: int
    date: datetime.date
    payee_id: int
    payee_name: str
    account_id: int
    account_name: str
    currency_code: str
    total_amount: int
    formatted_total_amount: str
    split_count: int
    type: TransactionType
    memo: Optional[str]
    category_name: Optional[str]
    splits: list[SplitResponse]
    created_at: datetime.datetime
    updated_at: datetime.datetime


class TransactionsGroup(CamelModel):
    """Transactions sharing one ISO date"""

    date: str
    transactions: list[TransactionResponse]


class TransactionsGroupedResponse(CamelModel):
    transactions_group: list[TransactionsGroup]
