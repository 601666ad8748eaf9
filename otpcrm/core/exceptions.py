"""Custom exceptions for the OTP CRM data layer.

Missing rows are not errors here: lookups return ``None`` and deletes
report a "nothing deleted" outcome.
"""


class OTPCRMException(Exception):
    """Base exception for the OTP CRM data layer."""

    pass


class ValidationError(OTPCRMException):
    """Raised when a filter or input payload cannot be corrected by defaulting."""

    def __init__(self, message: str, errors: list[dict] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class ConflictError(OTPCRMException):
    """Raised on a uniqueness violation that is not retried."""

    pass


class TransientError(OTPCRMException):
    """Raised when an operation may succeed if the caller retries it."""

    pass


class DependencyError(OTPCRMException):
    """Raised when a secondary lookup a query depends on fails."""

    pass


class TransactionError(OTPCRMException):
    """Raised when a multi-step write was aborted and rolled back."""

    pass


class ConfigurationError(OTPCRMException):
    """Raised when configuration is invalid."""

    pass
