# doctor_directory/errors.py
"""Error taxonomy shared by the service layer.

Every failure is terminal for the request: the exception handlers in
``main.py`` turn it into ``{"message": ...}`` with the matching status.
"""


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """Missing or malformed input."""
    status_code = 400


class AuthError(AppError):
    """Bad or missing credentials."""
    status_code = 401


class AuthorizationError(AppError):
    """The acting doctor does not own the resource."""
    status_code = 403


class NotFoundError(AppError):
    status_code = 404


class UnexpectedError(AppError):
    status_code = 500
