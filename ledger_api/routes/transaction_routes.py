from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session

from ledger_api.database import get_db
from ledger_api.dependencies import get_current_user
from ledger_api.models.user import User
from ledger_api.services.transaction_service import TransactionService
from ledger_api.schemas.transaction_schemas import (
    TransactionCreate,
    TransactionUpdate,
    TransactionResponse,
    TransactionsGroupedResponse,
)

router = APIRouter()


@router.post("", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
def create_transaction(
    data: TransactionCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Create a transaction with splits, line items and tags.

    Line items of each split must add up to the split amount.
    """
    service = TransactionService(db)
    return service.create_transaction(data, user)


@router.get("/filter", response_model=TransactionsGroupedResponse)
def filter_transactions(
    account_id: int = Query(..., alias="accountId", gt=0, description="Account ID"),
    start_of_month: date = Query(..., alias="startOfMonth", description="Start date (inclusive)"),
    end_of_month: date = Query(..., alias="endOfMonth", description="End date (inclusive)"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get an account's transactions in a date range, grouped by day, newest first"""
    service = TransactionService(db)
    return service.get_transactions_filter(user, account_id, start_of_month, end_of_month)


@router.get("/latest", response_model=Optional[TransactionResponse])
def latest_transaction(
    account_id: int = Query(..., alias="accountId", gt=0, description="Account ID"),
    payee_id: int = Query(..., alias="payeeId", gt=0, description="Payee ID"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Most recent transaction for a payee on an account, or null"""
    service = TransactionService(db)
    return service.get_latest_transaction_by_payee(user, account_id, payee_id)


@router.get("/{transaction_id}", response_model=TransactionResponse)
def get_transaction(
    transaction_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    service = TransactionService(db)
    return service.get_transaction(transaction_id, user)


@router.patch("/{transaction_id}", response_model=TransactionResponse)
def update_transaction(
    transaction_id: int,
    data: TransactionUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update a transaction; provided splits replace the existing ones"""
    service = TransactionService(db)
    return service.update_transaction(transaction_id, data, user)


@router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_transaction(
    transaction_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    service = TransactionService(db)
    service.delete_transaction(transaction_id, user)
    return None
