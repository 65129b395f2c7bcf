"""Exceptions raised by the SkyTally core."""

from __future__ import annotations


class SkyTallyError(Exception):
    """Base class for SkyTally errors."""


class ReferenceTableError(SkyTallyError):
    """Raised when a static reference table cannot be loaded."""

    def __init__(self, table: str, message: str):
        super().__init__(f"{table}: {message}")
        self.table = table


__all__ = ["SkyTallyError", "ReferenceTableError"]
