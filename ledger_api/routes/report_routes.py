from datetime import date
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ledger_api.database import get_db
from ledger_api.dependencies import get_current_user
from ledger_api.models.transaction import TransactionType
from ledger_api.models.user import User
from ledger_api.services.report_service import ReportService
from ledger_api.schemas.report_schemas import (
    ReportQuery,
    SpendingsByPayeesResponse,
    SpendingsByCategoriesResponse,
)

router = APIRouter()


def report_query(
    start_of_month: date = Query(..., alias="startOfMonth"),
    end_of_month: date = Query(..., alias="endOfMonth"),
    account_id: int = Query(..., alias="accountId", gt=0),
    transaction_type: TransactionType = Query(..., alias="transactionType"),
) -> ReportQuery:
    return ReportQuery(
        start_of_month=start_of_month,
        end_of_month=end_of_month,
        account_id=account_id,
        transaction_type=transaction_type,
    )


@router.get("/spendings/payees", response_model=SpendingsByPayeesResponse)
def spendings_by_payees(
    query: ReportQuery = Depends(report_query),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Spending per payee for the period, largest first"""
    return ReportService(db).get_spendings_by_payees(query, user)


@router.get("/spendings/categories", response_model=SpendingsByCategoriesResponse)
def spendings_by_categories(
    query: ReportQuery = Depends(report_query),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Spending per category for the period, as a tree plus a top-level pie chart"""
    return ReportService(db).get_spendings_by_categories(query, user)
