from datetime import date
from pydantic import Field
from ledger_api.models.transaction import TransactionType
from ledger_api.schemas.common_schemas import CamelModel


class ReportQuery(CamelModel):
    """Date range, account and direction a spending report covers"""

    start_of_month: date
    end_of_month: date
    account_id: int = Field(..., gt=0)
    transaction_type: TransactionType


class PieChartDataItem(CamelModel):
    id: int
    value: float  # Major units, e.g. dollars
    label: str
    formatted_value: str


class SpendingsByPayeesResponse(CamelModel):
    total_amount: int
    formatted_total_amount: str
    pie_chart_data: list[PieChartDataItem]


class CategoryTreeChildNode(CamelModel):
    category_id: int
    category_name: str
    total_amount: int
    formatted_total_amount: str


class CategoryTreeNode(CategoryTreeChildNode):
    children: list[CategoryTreeChildNode]


class SpendingsByCategoriesResponse(CamelModel):
    category_tree: list[CategoryTreeNode]
    total_amount: int
    formatted_total_amount: str
    pie_chart_data: list[PieChartDataItem]
