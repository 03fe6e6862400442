"""
Exception hierarchy for the binder scan service.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging, and carry
the HTTP status code the API layer maps them to.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class CardScanException(Exception):
    """Base exception for all binder scan errors."""

    status_code: int = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class InvalidImageError(CardScanException):
    """Raised when the submitted image payload is missing or malformed."""

    status_code = 400

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize invalid image error.

        Args:
            message: Error message
            field: Request field that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class ImageTooLargeError(InvalidImageError):
    """Raised when the decoded image exceeds the configured size limit."""

    status_code = 413

    def __init__(self, size_bytes: int, max_bytes: int) -> None:
        super().__init__(
            f"Image too large: {size_bytes} bytes (limit {max_bytes})",
            details={"size_bytes": size_bytes, "max_bytes": max_bytes},
        )


class UnsupportedPromptVariantError(CardScanException):
    """Raised when a scan requests a prompt variant that does not exist."""

    status_code = 400

    def __init__(self, variant: str, available: list[str]) -> None:
        super().__init__(
            f"Unknown prompt variant: {variant}",
            details={"variant": variant, "available": available},
        )


class ConfigurationError(CardScanException):
    """Raised when required configuration (such as an API key) is missing."""

    status_code = 500

    def __init__(
        self,
        message: str,
        setting: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if setting:
            details["setting"] = setting
        super().__init__(message, details)


class VisionModelError(CardScanException):
    """Raised when the vision model call fails or its reply cannot be parsed."""

    status_code = 502

    def __init__(
        self,
        message: str,
        model: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if model:
            details["model"] = model
        super().__init__(message, details)


class CatalogLookupError(CardScanException):
    """Raised when a card database request fails."""

    status_code = 502

    def __init__(
        self,
        message: str,
        source: str | None = None,
        status: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize catalog lookup error.

        Args:
            message: Error message
            source: Catalog that failed (pokemontcg, tcgdex)
            status: HTTP status returned by the catalog, if any
            details: Additional context
        """
        details = details or {}
        if source:
            details["source"] = source
        if status is not None:
            details["status"] = status
        super().__init__(message, details)
