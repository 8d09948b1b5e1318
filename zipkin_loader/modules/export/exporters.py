"""Span exporters for delivering batches to a Zipkin collector."""

import asyncio
import json
import sys
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import async_timeout
import httpx

from zipkin_loader.exceptions import DeliveryError
from zipkin_loader.logger import logger
from zipkin_loader.modules.translation.schemas import WireSpan


class SpanExporter(ABC):
    """Abstract base class for span exporters."""

    def __init__(self):
        self.batches_exported = 0
        self.spans_exported = 0
        self.failures = 0

    @abstractmethod
    async def export_batch(self, spans: List[WireSpan]) -> bool:
        """Export a batch of spans.

        Args:
            spans: Wire spans drained from the export queue

        Returns:
            True if the batch was delivered. Delivery failures are logged and
            reported as False, never raised.
        """
        pass

    async def shutdown(self) -> None:
        """Cleanup resources on shutdown."""
        pass

    def _record(self, spans: List[WireSpan], delivered: bool) -> None:
        if delivered:
            self.batches_exported += 1
            self.spans_exported += len(spans)
        else:
            self.failures += 1

    def get_stats(self) -> Dict[str, Any]:
        return {
            "batches_exported": self.batches_exported,
            "spans_exported": self.spans_exported,
            "failures": self.failures,
        }


class ConsoleExporter(SpanExporter):
    """Prints batches instead of sending them (dry-run mode)."""

    def __init__(self, pretty_print: bool = True, stream=None):
        """Initialize console exporter.

        Args:
            pretty_print: Whether to indent the JSON output
            stream: Output stream (default: sys.stdout)
        """
        super().__init__()
        self.pretty_print = pretty_print
        self.stream = stream

    async def export_batch(self, spans: List[WireSpan]) -> bool:
        payload = [span.to_wire() for span in spans]
        stream = self.stream or sys.stdout
        if self.pretty_print:
            stream.write(json.dumps(payload, indent=2) + "\n")
        else:
            stream.write(json.dumps(payload) + "\n")
        stream.flush()
        self._record(spans, True)
        return True


class ZipkinExporter(SpanExporter):
    """POSTs batches to the Zipkin v1 spans endpoint."""

    def __init__(
        self,
        base_url: str,
        spans_path: str = "/api/v1/spans",
        timeout_sec: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize Zipkin exporter.

        Args:
            base_url: Collector URL, e.g. http://zipkin:9411
            spans_path: Path of the spans endpoint
            timeout_sec: Upper bound for one delivery attempt
            client: Optional preconfigured HTTP client
        """
        super().__init__()
        self.base_url = base_url.rstrip("/")
        self.spans_path = spans_path
        self.timeout_sec = timeout_sec
        self.client = client or httpx.AsyncClient(timeout=timeout_sec)

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}{self.spans_path}"

    def trace_urls(self, spans: List[WireSpan]) -> List[str]:
        """Collector UI URLs of the traces touched by a batch, in first-seen order."""
        urls: Dict[str, None] = {}
        for span in spans:
            urls[f"{self.base_url}/traces/{span.trace_id}"] = None
        return list(urls)

    async def _post(self, payload: List[Dict[str, Any]]) -> httpx.Response:
        # some collector versions reject a JSON Accept header on this endpoint
        async with async_timeout.timeout(self.timeout_sec):
            response = await self.client.post(
                self.endpoint,
                json=payload,
                headers={"Accept": "*/*"},
            )

        if not response.is_success:
            raise DeliveryError(
                f"collector answered {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )
        return response

    async def export_batch(self, spans: List[WireSpan]) -> bool:
        payload = [span.to_wire() for span in spans]

        try:
            response = await self._post(payload)
        except (DeliveryError, httpx.HTTPError, asyncio.TimeoutError) as e:
            logger.error(f"Failed to export {len(spans)} spans to {self.endpoint}: {e}")
            self._record(spans, False)
            return False

        logger.info(f"{response.status_code} -> {dict(response.headers)}")
        logger.info("== UPDATED TRACES: ==\n" + "\n".join(self.trace_urls(spans)))
        self._record(spans, True)
        return True

    async def shutdown(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()
