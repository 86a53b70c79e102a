import logging
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from ledger_api.models.account import FinancialAccount
from ledger_api.models.user import User
from ledger_api.repositories.account_repository import AccountRepository
from ledger_api.repositories.transaction_repository import TransactionRepository
from ledger_api.schemas.account_schemas import AccountCreate, AccountUpdate
from ledger_api.core.exceptions import AlreadyExistsException, NotFoundException

logger = logging.getLogger(__name__)

ENTITY = "FinancialAccount"


class AccountService:
    """Service for account business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AccountRepository(db)
        self.transaction_repo = TransactionRepository(db)

    def create_account(self, data: AccountCreate, user: User) -> FinancialAccount:
        """Create new account for user"""
        account = FinancialAccount(
            user_id=user.id,
            name=data.name,
            currency_type=data.currency_type,
        )
        try:
            return self.repo.create(account)
        except IntegrityError:
            self.db.rollback()
            raise AlreadyExistsException(ENTITY, data.name)

    def get_user_accounts(self, user: User) -> list[FinancialAccount]:
        """Get all accounts for user"""
        return self.repo.get_by_user(user.id)

    def get_account(self, account_id: int, user: User) -> FinancialAccount:
        """
        Get specific account ensuring user ownership.

        Raises:
            NotFoundException: If account not found, deleted, or belongs to another user
        """
        account = self.repo.get_by_id_and_user(account_id, user.id)
        if not account:
            raise NotFoundException(ENTITY, account_id)
        return account

    def update_account(self, account_id: int, data: AccountUpdate, user: User) -> FinancialAccount:
        """
        Update account details.

        A rename is copied onto every transaction of the account in the same commit.
        """
        account = self.get_account(account_id, user)

        if data.name != account.name:
            renamed = self.transaction_repo.update_account_name(account.id, data.name)
            logger.info("Account %s renamed, %s transactions updated", account.id, renamed)
            account.name = data.name
        account.currency_type = data.currency_type

        try:
            return self.repo.update(account)
        except IntegrityError:
            self.db.rollback()
            raise AlreadyExistsException(ENTITY, data.name)

    def delete_account(self, account_id: int, user: User) -> None:
        """Soft delete account; its transactions are left untouched"""
        account = self.get_account(account_id, user)
        self.repo.soft_delete(account)
