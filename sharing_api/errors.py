from fastapi import HTTPException, status


class SharingError(HTTPException):
    """Base class for the typed errors raised by the sharing layer.

    Each subclass pins an HTTP status so FastAPI renders it as
    ``{"detail": ...}`` without any extra exception handler.
    """

    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str | None = None, headers: dict[str, str] | None = None) -> None:
        super().__init__(status_code=self.http_status, detail=detail, headers=headers)


class Unauthorized(SharingError):
    http_status = status.HTTP_401_UNAUTHORIZED

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class Forbidden(SharingError):
    http_status = status.HTTP_403_FORBIDDEN


class BadRequest(SharingError):
    http_status = status.HTTP_400_BAD_REQUEST


class NotFound(SharingError):
    http_status = status.HTTP_404_NOT_FOUND


class Conflict(SharingError):
    http_status = status.HTTP_409_CONFLICT
