"""Shared helpers for API routers."""

from .error_handling import handle_scan_errors

__all__ = ["handle_scan_errors"]
