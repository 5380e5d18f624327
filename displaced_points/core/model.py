from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


RowKind = Literal["original", "generated"]


@dataclass(frozen=True)
class Point:
    label: str
    x: float
    y: float
    z: float


@dataclass(frozen=True)
class Range:
    lo: int
    hi: int  # inclusive


@dataclass(frozen=True)
class DisplacementEntry:
    suffix: str
    dx: float
    dy: float
    dz: float = 0.0


@dataclass(frozen=True)
class Category:
    name: str
    ranges: tuple[Range, ...]
    displacements: tuple[DisplacementEntry, ...]


@dataclass(frozen=True)
class ExpansionConfig:
    """Categories in priority order plus the category used when none matches."""

    categories: tuple[Category, ...]
    fallback: str

    def __post_init__(self) -> None:
        names = [c.name for c in self.categories]
        if len(set(names)) != len(names):
            raise ValueError(f"duplicate category names: {names}")
        if self.fallback not in names:
            raise ValueError(f"fallback '{self.fallback}' is not one of the categories {names}")

    def category(self, name: str) -> Category:
        for c in self.categories:
            if c.name == name:
                return c
        raise KeyError(name)

    def catalog_for(self, name: str) -> tuple[DisplacementEntry, ...]:
        return self.category(name).displacements


@dataclass(frozen=True)
class GeneratedPoint:
    label: str
    x: float
    y: float
    z: float
    category: str
    suffix: str


@dataclass(frozen=True)
class OutputRow:
    label: str
    x: float
    y: float
    z: float
    kind: RowKind
    category: str


@dataclass(frozen=True)
class ExpansionSummary:
    original_count: int
    generated_count: int
    rows_by_category: dict[str, int]
