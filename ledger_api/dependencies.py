from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from ledger_api.core.security import extract_user_id
from ledger_api.core.exceptions import UnauthorizedException
from ledger_api.database import get_db
from ledger_api.repositories.user_repository import UserRepository
from ledger_api.models.user import User

# Missing credentials are reported through UnauthorizedException, not FastAPI's default
security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """
    FastAPI dependency to validate JWT and get/create user.

    Flow:
    1. Extract token from Authorization: Bearer <token>
    2. Validate JWT using shared SECRET_KEY
    3. Extract auth_user_id from 'sub' claim
    4. Get or auto-create User record
    5. Return User object for use in endpoints

    Raises:
        UnauthorizedException: If the header is missing or the token is invalid or expired
    """
    if credentials is None:
        raise UnauthorizedException("Not authenticated")

    auth_user_id = extract_user_id(credentials.credentials)

    user_repo = UserRepository(db)
    return user_repo.get_or_create_by_auth_id(auth_user_id)
