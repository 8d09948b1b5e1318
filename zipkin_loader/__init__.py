"""Zipkin loader: streams tracer log records to a Zipkin collector."""

__version__ = "0.1.0"
