from datetime import datetime
from typing import Annotated
from pydantic import BaseModel, ConfigDict, StringConstraints
from pydantic.alias_generators import to_camel

# Trimmed, non-empty display name
NameStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]


class CamelModel(BaseModel):
    """Base schema exchanged as camelCase JSON; also accepts snake_case input"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ErrorResponse(CamelModel):
    """Uniform error envelope returned by every exception handler"""

    status_code: int
    message: str
    error: str
    timestamp: datetime
    path: str
    errors: dict[str, list[str]] | None = None


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    version: str


class UserProfileResponse(CamelModel):
    id: int
    auth_user_id: str
    created_at: datetime
