from fastapi import HTTPException, status

from ..domain.errors import (
    BookingError,
    CapacityExceededError,
    ConflictError,
    DateUnavailableError,
    NotFoundError,
    PersistenceUnavailableError,
    ShapeInvalidError,
    UnauthorizedError,
)

_STATUS_BY_ERROR: dict[type[BookingError], int] = {
    ShapeInvalidError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    CapacityExceededError: status.HTTP_409_CONFLICT,
    DateUnavailableError: status.HTTP_409_CONFLICT,
    ConflictError: status.HTTP_409_CONFLICT,
    UnauthorizedError: status.HTTP_403_FORBIDDEN,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    PersistenceUnavailableError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def to_http_error(exc: BookingError) -> HTTPException:
    status_code = _STATUS_BY_ERROR.get(type(exc), status.HTTP_400_BAD_REQUEST)
    detail: dict[str, object] = {"error": exc.code, "message": exc.message}
    if isinstance(exc, ShapeInvalidError):
        detail["fields"] = exc.fields
    return HTTPException(status_code=status_code, detail=detail)
