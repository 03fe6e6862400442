"""
Core business logic module.

Contains the exception hierarchy, the card vision agent and the card
matching heuristics.
"""

from binder_scan.core.exceptions import (
    CardScanException,
    CatalogLookupError,
    ConfigurationError,
    ImageTooLargeError,
    InvalidImageError,
    UnsupportedPromptVariantError,
    VisionModelError,
)

__all__ = [
    "CardScanException",
    "CatalogLookupError",
    "ConfigurationError",
    "ImageTooLargeError",
    "InvalidImageError",
    "UnsupportedPromptVariantError",
    "VisionModelError",
]
