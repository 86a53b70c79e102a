from jose import JWTError, jwt
from ledger_api.config import settings
from ledger_api.core.exceptions import UnauthorizedException


def decode_jwt(token: str) -> dict:
    """
    Decode and validate JWT token using shared SECRET_KEY.

    Args:
        token: JWT access token from Authorization header

    Returns:
        Decoded token payload with 'sub' (user_id), 'exp', etc.

    Raises:
        UnauthorizedException: If token invalid, expired, or malformed
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=["HS256"])
    except JWTError as e:
        raise UnauthorizedException(f"Invalid token: {str(e)}")

    # jose validates exp when present but does not require it
    if payload.get("exp") is None:
        raise UnauthorizedException("Token missing expiration")

    if payload.get("sub") is None:
        raise UnauthorizedException("Token missing user identifier")

    return payload


def extract_user_id(token: str) -> str:
    """Extract auth_user_id from JWT token"""
    payload = decode_jwt(token)
    return str(payload["sub"])
