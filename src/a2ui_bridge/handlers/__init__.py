"""Handlers that feed transport chunks into the processor."""

from .messages import StreamHandler

__all__ = ["StreamHandler"]
