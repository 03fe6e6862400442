"""Service orchestrators."""

from .scan_service import ScanService

__all__ = ["ScanService"]
