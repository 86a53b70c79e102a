from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ledger_api.database import get_db
from ledger_api.dependencies import get_current_user
from ledger_api.models.user import User
from ledger_api.services.payee_service import PayeeService
from ledger_api.schemas.payee_schemas import PayeeCreate, PayeeUpdate, PayeeResponse

router = APIRouter()


@router.post("", response_model=PayeeResponse, status_code=status.HTTP_201_CREATED)
def create_payee(
    data: PayeeCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    return PayeeService(db).create_payee(data, user)


@router.get("", response_model=list[PayeeResponse])
def list_payees(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Get all payees ordered by name"""
    return PayeeService(db).get_payees(user)


@router.get("/{payee_id}", response_model=PayeeResponse)
def get_payee(payee_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return PayeeService(db).get_payee(payee_id, user)


@router.patch("/{payee_id}", response_model=PayeeResponse)
def update_payee(
    payee_id: int,
    data: PayeeUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Rename a payee everywhere it appears"""
    return PayeeService(db).update_payee(payee_id, data, user)


@router.delete("/{payee_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_payee(
    payee_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    PayeeService(db).delete_payee(payee_id, user)
    return None
