from __future__ import annotations


class CertStoreError(Exception):
    """Base error for certstore."""


class KeyNotFoundError(CertStoreError, LookupError):
    """Raised when no object exists at the requested key."""

    def __init__(self, key: str, message: str | None = None) -> None:
        self.key = key
        super().__init__(message or f"key not found: {key}")


class BackendError(CertStoreError):
    """Raised when the object store or its transport fails.

    The original botocore exception is chained as ``__cause__``.
    """

    def __init__(self, operation: str, key: str, message: str) -> None:
        self.operation = operation
        self.key = key
        super().__init__(f"{operation} {key!r}: {message}")


class OperationCancelledError(CertStoreError):
    """Raised when the caller cancelled an operation or its deadline passed."""

    def __init__(self, operation: str, key: str, reason: str = "cancelled") -> None:
        self.operation = operation
        self.key = key
        self.reason = reason
        super().__init__(f"{operation} {key!r}: {reason}")


class ConfigurationError(CertStoreError, ValueError):
    """Raised when storage configuration is missing or invalid."""


class InvalidKeyError(CertStoreError, ValueError):
    """Raised when a logical key cannot be mapped inside the configured prefix."""

    def __init__(self, key: str, message: str) -> None:
        self.key = key
        super().__init__(f"invalid key {key!r}: {message}")
