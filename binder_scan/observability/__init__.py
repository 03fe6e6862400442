"""
Observability module.

Provides logging configuration, correlation ID tracking, request middleware
and Langfuse tracing of scans.
"""

from binder_scan.observability.correlation import get_correlation_id, set_correlation_id
from binder_scan.observability.langfuse_tracer import LangfuseTracer
from binder_scan.observability.logger import configure_logging

__all__ = [
    "LangfuseTracer",
    "configure_logging",
    "get_correlation_id",
    "set_correlation_id",
]
