# storefront/domain/errors.py
from enum import Enum


class ErrorKind(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    INVALID_REQUEST = "INVALID_REQUEST"
    INTERNAL = "INTERNAL"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    CONFLICT = "CONFLICT"


_STATUS_CODES = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INVALID_REQUEST: 400,
    ErrorKind.INTERNAL: 500,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.CONFLICT: 409,
}


class ApiError(Exception):
    """
    Domain error tagged with a kind and a stable message.
    The HTTP layer maps kind to a status code and returns message verbatim.
    """

    kind: ErrorKind = ErrorKind.INTERNAL
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self.kind]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.kind.value}, {self.message!r})"


class NotFoundError(ApiError):
    kind = ErrorKind.NOT_FOUND
    default_message = "Not found"


class InvalidRequestError(ApiError):
    kind = ErrorKind.INVALID_REQUEST
    default_message = "Bad request"


class InternalError(ApiError):
    kind = ErrorKind.INTERNAL


class UnauthorizedError(ApiError):
    kind = ErrorKind.UNAUTHORIZED
    default_message = "Please authenticate"


class ForbiddenError(ApiError):
    kind = ErrorKind.FORBIDDEN
    default_message = "User not authorized to access this resource"


class ConflictError(ApiError):
    kind = ErrorKind.CONFLICT
    default_message = "Cart is being modified by another request"
