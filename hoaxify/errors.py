import typing


class HoaxifyError(Exception):
    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: typing.Dict[str, typing.Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class Unauthenticated(HoaxifyError):
    status_code = 401
    code = "UNAUTHENTICATED"


class Forbidden(HoaxifyError):
    status_code = 403
    code = "FORBIDDEN"


class NotFound(HoaxifyError):
    status_code = 404
    code = "NOT_FOUND"


class ValidationFailed(HoaxifyError):
    status_code = 400
    code = "VALIDATION_FAILURE"

    def __init__(self, validation_errors: typing.Dict[str, str], message: str = "validation_failure"):
        super().__init__(message, {"validation_errors": validation_errors})
        self.validation_errors = validation_errors


class InvalidToken(HoaxifyError):
    status_code = 400
    code = "INVALID_TOKEN"


class StorageFailure(HoaxifyError):
    status_code = 500
    code = "STORAGE_FAILURE"


class EmailFailure(HoaxifyError):
    status_code = 502
    code = "EMAIL_FAILURE"
