from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ledger_api.database import get_db
from ledger_api.dependencies import get_current_user
from ledger_api.models.user import User
from ledger_api.services.account_service import AccountService
from ledger_api.schemas.account_schemas import AccountCreate, AccountUpdate, AccountResponse

router = APIRouter()


@router.post("", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
def create_account(
    data: AccountCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    """Create a new account for the authenticated user"""
    service = AccountService(db)
    return service.create_account(data, user)


@router.get("", response_model=list[AccountResponse])
def list_accounts(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Get all accounts for the authenticated user"""
    service = AccountService(db)
    return service.get_user_accounts(user)


@router.get("/{account_id}", response_model=AccountResponse)
def get_account(
    account_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    service = AccountService(db)
    return service.get_account(account_id, user)


@router.patch("/{account_id}", response_model=AccountResponse)
def update_account(
    account_id: int,
    data: AccountUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Rename an account or change its currency"""
    service = AccountService(db)
    return service.update_account(account_id, data, user)


@router.delete("/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_account(
    account_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    """Soft delete an account; its transactions keep their snapshots"""
    service = AccountService(db)
    service.delete_account(account_id, user)
    return None
