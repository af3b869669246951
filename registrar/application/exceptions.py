"""Application-layer exceptions. Do not reuse domain exceptions."""


class ApplicationError(Exception):
    """Base for all application-layer errors."""

    kind = "ApplicationError"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class TransactionConflictError(ApplicationError):
    """Raised when the store aborts a transaction under concurrency (serialization failure, lock conflict). Retryable."""

    kind = "TransactionConflict"


class TransactionTimeoutError(ApplicationError):
    """Raised when a transaction does not finish within the configured timeout. Retryable, nothing committed."""

    kind = "TransactionTimeout"
