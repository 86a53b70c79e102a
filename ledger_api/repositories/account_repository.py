from sqlalchemy.orm import Session
from ledger_api.models.account import FinancialAccount


class AccountRepository:
    """Repository for FinancialAccount operations scoped to a user"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_user(self, user_id: int) -> list[FinancialAccount]:
        """Get all live accounts for a user, ordered by name"""
        return (
            self.db.query(FinancialAccount)
            .filter(FinancialAccount.user_id == user_id, FinancialAccount.deleted_at.is_(None))
            .order_by(FinancialAccount.name.asc())
            .all()
        )

    def get_by_id_and_user(self, account_id: int, user_id: int) -> FinancialAccount | None:
        """
        Get live account ensuring it belongs to user.

        Returns None if account doesn't exist, is soft-deleted, or belongs to another user.
        """
        return (
            self.db.query(FinancialAccount)
            .filter(
                FinancialAccount.id == account_id,
                FinancialAccount.user_id == user_id,
                FinancialAccount.deleted_at.is_(None),
            )
            .first()
        )

    def create(self, account: FinancialAccount) -> FinancialAccount:
        """Create new account"""
        self.db.add(account)
        self.db.commit()
        self.db.refresh(account)
        return account

    def update(self, account: FinancialAccount) -> FinancialAccount:
        """Commit pending changes to the account (and anything flushed with it)"""
        self.db.commit()
        self.db.refresh(account)
        return account

    def soft_delete(self, account: FinancialAccount) -> None:
        """Mark account deleted; transactions keep referencing it"""
        account.soft_delete()
        self.db.commit()
