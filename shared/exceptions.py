"""Domain errors shared by the API and the generator."""


class AppError(Exception):
    """Base error carrying the HTTP status it maps to."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """Missing or malformed input."""

    status_code = 400


class NotFoundError(AppError):
    """Referenced job, article or keyword does not exist."""

    status_code = 404


class ConflictError(AppError):
    """Illegal job state transition, e.g. cancelling a processing job."""

    status_code = 400


class VersionConflictError(ConflictError):
    """Article changed between read and conditional write."""

    status_code = 409


class NoOpError(AppError):
    """Undo would not change anything."""

    status_code = 400


class ProviderError(AppError):
    """Opaque failure from the generative text provider."""

    status_code = 502


class PersistenceError(AppError):
    """Store write failure."""

    status_code = 500
