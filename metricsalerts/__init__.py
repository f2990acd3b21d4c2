"""Metrics server with in-memory storage, and agent-side metric sampling and sending."""

__version__ = "0.1.0"