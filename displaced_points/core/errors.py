"""Coded errors for the I/O edges (points file, catalog file, output sink).

The expansion engine never raises these; the CLI sorts and prints them.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class DisplaceError(Exception):
    code: str
    message: str
    file: Optional[str] = None
    path: Optional[str] = None

    def __str__(self) -> str:
        loc = ":".join(p for p in (self.file, self.path) if p) or "<points>"
        return f"{loc}: {self.code}: {self.message}"


class PointLoadError(DisplaceError):
    pass


class CatalogFileError(DisplaceError):
    pass


class SinkError(DisplaceError):
    pass
