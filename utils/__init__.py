"""Shared helpers for the PostureGuard service."""

from utils.debug import debug_log

__all__ = ["debug_log"]
