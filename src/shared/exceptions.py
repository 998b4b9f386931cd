"""Custom exceptions for the ledger analytics application."""


class LedgerException(Exception):
    """Base exception for all ledger analytics errors."""

    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class ValidationError(LedgerException):
    """Raised when input validation fails (including malformed dates)."""

    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class AuthenticationError(LedgerException):
    """Raised when the request carries no authenticated user."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, status_code=401)


class NotFoundError(LedgerException):
    """Raised when a resource is not found."""

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, status_code=404)


class DatabaseError(LedgerException):
    """Raised when the record store fails."""

    def __init__(self, message: str = "Database operation failed"):
        super().__init__(message, status_code=500)
