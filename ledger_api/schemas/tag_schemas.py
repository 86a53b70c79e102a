from typing import Annotated
from pydantic import StringConstraints
from ledger_api.schemas.common_schemas import CamelModel

TagNameStr = Annotated[
    str, StringConstraints(strip_whitespace=True, to_lower=True, min_length=1, max_length=50)
]


class TagCreate(CamelModel):
    name: TagNameStr


class TagUpdate(TagCreate):
    pass


class TagResponse(CamelModel):
    id: int
    name: str
    usage_count: int
