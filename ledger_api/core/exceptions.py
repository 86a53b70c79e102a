from fastapi import status


class LedgerException(Exception):
    """Base exception for the ledger API"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnauthorizedException(LedgerException):
    """Raised when JWT validation fails"""

    status_code = status.HTTP_401_UNAUTHORIZED


class NotFoundException(LedgerException):
    """Raised when a resource is absent, soft-deleted, or owned by another user"""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, entity: str, entity_id: int | str):
        super().__init__(f"{entity} with id {entity_id} not found")


class AlreadyExistsException(LedgerException):
    """Raised when a unique constraint rejects a create or rename"""

    status_code = status.HTTP_409_CONFLICT

    def __init__(self, entity: str, identifier: str):
        super().__init__(f"{entity} with identifier {identifier} already exists")


class ForbiddenException(LedgerException):
    """Raised when user tries to access another user's data"""

    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = "You do not have permission to perform this action"):
        super().__init__(message)


class InvalidOperationException(LedgerException):
    """Raised for business rule violations"""

    status_code = status.HTTP_400_BAD_REQUEST
