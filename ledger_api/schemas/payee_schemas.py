from ledger_api.schemas.common_schemas import CamelModel, NameStr


class PayeeCreate(CamelModel):
    name: NameStr


class PayeeUpdate(PayeeCreate):
    pass


class PayeeResponse(CamelModel):
    id: int
    name: str
