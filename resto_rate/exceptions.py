"""Domain errors carrying their HTTP status.

Services raise these; the handlers registered in ``resto_rate.main`` turn
them into ``{"error": message, "kind": kind}`` responses by class, never by
inspecting the message text.
"""

from fastapi import status


class AppError(Exception):
    """Base class for errors that map to a client-visible response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    kind: str = "internal"
    headers: dict[str, str] | None = None

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    kind = "invalid_input"


class UnauthenticatedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    kind = "unauthenticated"
    headers = {"WWW-Authenticate": "Bearer"}


class InvalidCredentialsError(UnauthenticatedError):
    kind = "invalid_credentials"

    def __init__(self, message: str = "Invalid username or password"):
        super().__init__(message)


class SessionNotFoundOrExpiredError(UnauthenticatedError):
    kind = "session_not_found"

    def __init__(self, message: str = "Session not found or expired"):
        super().__init__(message)


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    kind = "forbidden"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    kind = "not_found"


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    kind = "conflict"


class UsernameTakenError(ConflictError):
    kind = "username_taken"

    def __init__(self, message: str = "Username already exists"):
        super().__init__(message)


class UpstreamAuthError(AppError):
    """The identity provider rejected a request or could not be reached."""

    status_code = status.HTTP_502_BAD_GATEWAY
    kind = "upstream_auth"

    def __init__(self, message: str, upstream_status: int | None = None, upstream_body: str = ""):
        super().__init__(message)
        self.upstream_status = upstream_status
        self.upstream_body = upstream_body
