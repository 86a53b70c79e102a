from sqlalchemy.orm import Session
from ledger_api.models.payee import Payee


class PayeeRepository:
    """Repository for Payee operations scoped to a user"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_user(self, user_id: int) -> list[Payee]:
        return (
            self.db.query(Payee)
            .filter(Payee.user_id == user_id, Payee.deleted_at.is_(None))
            .order_by(Payee.name.asc())
            .all()
        )

    def get_by_id_and_user(self, payee_id: int, user_id: int) -> Payee | None:
        return (
            self.db.query(Payee)
            .filter(
                Payee.id == payee_id,
                Payee.user_id == user_id,
                Payee.deleted_at.is_(None),
            )
            .first()
        )

    def create(self, payee: Payee) -> Payee:
        self.db.add(payee)
        self.db.commit()
        self.db.refresh(payee)
        return payee

    def update(self, payee: Payee) -> Payee:
        self.db.commit()
        self.db.refresh(payee)
        return payee

    def soft_delete(self, payee: Payee) -> None:
        payee.soft_delete()
        self.db.commit()
