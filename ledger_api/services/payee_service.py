import logging
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from ledger_api.models.payee import Payee
from ledger_api.models.user import User
from ledger_api.repositories.payee_repository import PayeeRepository
from ledger_api.repositories.transaction_repository import TransactionRepository
from ledger_api.schemas.payee_schemas import PayeeCreate, PayeeUpdate
from ledger_api.core.exceptions import AlreadyExistsException, NotFoundException

logger = logging.getLogger(__name__)

ENTITY = "Payee"


class PayeeService:
    """Service for payee business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = PayeeRepository(db)
        self.transaction_repo = TransactionRepository(db)

    def create_payee(self, data: PayeeCreate, user: User) -> Payee:
        payee = Payee(user_id=user.id, name=data.name)
        try:
            return self.repo.create(payee)
        except IntegrityError:
            self.db.rollback()
            raise AlreadyExistsException(ENTITY, data.name)

    def get_payees(self, user: User) -> list[Payee]:
        return self.repo.get_by_user(user.id)

    def get_payee(self, payee_id: int, user: User) -> Payee:
        payee = self.repo.get_by_id_and_user(payee_id, user.id)
        if not payee:
            raise NotFoundException(ENTITY, payee_id)
        return payee

    def update_payee(self, payee_id: int, data: PayeeUpdate, user: User) -> Payee:
        """Rename payee and the payee name copied onto its transactions"""
        payee = self.get_payee(payee_id, user)

        if data.name == payee.name:
            return payee

        renamed = self.transaction_repo.update_payee_name(payee.id, data.name)
        logger.info("Payee %s renamed, %s transactions updated", payee.id, renamed)
        payee.name = data.name

        try:
            return self.repo.update(payee)
        except IntegrityError:
            self.db.rollback()
            raise AlreadyExistsException(ENTITY, data.name)

    def delete_payee(self, payee_id: int, user: User) -> None:
        payee = self.get_payee(payee_id, user)
        self.repo.soft_delete(payee)
