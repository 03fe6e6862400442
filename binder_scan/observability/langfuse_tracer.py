"""
Langfuse tracing integration.

Records one span per scan with the model, prompt variant, card counts and
latency. Tracing is optional: without keys the tracer is inactive, and a
tracing failure is logged but never propagated to the request.

Dependencies: langfuse, binder_scan.configs, binder_scan.observability.correlation
System role: Tracing for vision scans
"""

import logging
from typing import Any

from langfuse import Langfuse

from binder_scan.configs.observability import ObservabilitySettings
from binder_scan.observability.correlation import get_correlation_id

logger = logging.getLogger(__name__)


class LangfuseTracer:
    """Thin wrapper around the Langfuse client for scan traces."""

    def __init__(self, settings: ObservabilitySettings) -> None:
        """
        Initialize Langfuse client when tracing is enabled and configured.

        Args:
            settings: Langfuse keys, host and enable flag
        """
        self._client: Langfuse | None = None

        if not settings.enable_tracing:
            logger.info("Langfuse tracing disabled")
            return

        if not settings.langfuse_public_key or not settings.langfuse_secret_key:
            logger.info("Langfuse keys not configured, tracing inactive")
            return

        self._client = Langfuse(
            public_key=settings.langfuse_public_key,
            secret_key=settings.langfuse_secret_key,
            host=settings.langfuse_host,
        )
        logger.info("Langfuse tracing initialized: host=%s", settings.langfuse_host)

    @property
    def is_enabled(self) -> bool:
        """Check if tracing is active."""
        return self._client is not None

    def trace_scan(
        self,
        model: str,
        prompt_variant: str,
        detected: int,
        matched: int,
        latency_ms: float,
        strategies: dict[str, int] | None = None,
    ) -> None:
        """
        Record a completed scan.

        Args:
            model: Vision model identifier
            prompt_variant: Prompt variant used for the scan
            detected: Number of cards the model reported
            matched: Number of cards resolved against a catalog
            latency_ms: End-to-end scan latency in milliseconds
            strategies: Count of cards per match strategy
        """
        if self._client is None:
            return

        metadata: dict[str, Any] = {
            "correlation_id": get_correlation_id(),
            "model": model,
            "prompt_variant": prompt_variant,
            "latency_ms": round(latency_ms, 2),
        }
        try:
            with self._client.start_as_current_span(
                name="binder-scan",
                input={"prompt_variant": prompt_variant},
                metadata=metadata,
            ) as span:
                span.update(
                    output={
                        "detected": detected,
                        "matched": matched,
                        "strategies": strategies or {},
                    }
                )
        except Exception as e:
            logger.warning(
                "Failed to record scan trace",
                extra={"error_type": type(e).__name__, "error_msg": str(e)},
            )

    def flush(self) -> None:
        """Flush buffered events to Langfuse."""
        if self._client is None:
            return
        try:
            self._client.flush()
        except Exception as e:
            logger.warning("Failed to flush Langfuse events: %s", e)
