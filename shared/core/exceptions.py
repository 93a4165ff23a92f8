from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base for errors that are safe to show to the client as-is."""

    status_code_default = status.HTTP_400_BAD_REQUEST
    message_default = "Bad request"

    def __init__(self, message: str = None, headers: dict = None):
        super().__init__(
            status_code=self.status_code_default,
            detail=message or self.message_default,
            headers=headers,
        )

    @property
    def message(self) -> str:
        return str(self.detail)


class BadRequestError(AppException):
    status_code_default = status.HTTP_400_BAD_REQUEST
    message_default = "Bad request"


class UnauthenticatedError(AppException):
    status_code_default = status.HTTP_401_UNAUTHORIZED
    message_default = "Unauthorized"

    def __init__(self, message: str = None):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class ForbiddenError(AppException):
    status_code_default = status.HTTP_403_FORBIDDEN
    message_default = "Forbidden"


class NotFoundError(AppException):
    status_code_default = status.HTTP_404_NOT_FOUND
    message_default = "Not found"


class ConflictError(AppException):
    status_code_default = status.HTTP_409_CONFLICT
    message_default = "Conflict"


class InternalServerError(AppException):
    status_code_default = status.HTTP_500_INTERNAL_SERVER_ERROR
    message_default = "Internal server error"
