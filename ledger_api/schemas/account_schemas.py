from ledger_api.models.account import CurrencyType
from ledger_api.schemas.common_schemas import CamelModel, NameStr


class AccountCreate(CamelModel):
    """Schema for creating a new account"""

    name: NameStr
    currency_type: CurrencyType


class AccountUpdate(CamelModel):
    """Schema for updating an account (full replacement of name and currency)"""

    name: NameStr
    currency_type: CurrencyType


class AccountResponse(CamelModel):
    """Schema for account response"""

    id: int
    name: str
    currency_type: CurrencyType
