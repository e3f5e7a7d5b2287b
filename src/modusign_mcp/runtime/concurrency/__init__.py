"""Concurrency helpers for fan-out/fan-in over independent async operations."""

from .wait import gather_all

__all__ = ["gather_all"]
