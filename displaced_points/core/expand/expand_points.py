from __future__ import annotations

from collections import Counter
from typing import Iterable

from displaced_points.core.expand.classify import classify_number
from displaced_points.core.expand.label_number import extract_label_number
from displaced_points.core.model import (
    ExpansionConfig,
    ExpansionSummary,
    GeneratedPoint,
    OutputRow,
    Point,
)


def classify_point(point: Point, config: ExpansionConfig) -> str:
    return classify_number(extract_label_number(point.label), config)


def _generate(point: Point, category: str, config: ExpansionConfig) -> list[GeneratedPoint]:
    return [
        GeneratedPoint(
            label=point.label + e.suffix,
            x=point.x + e.dx,
            y=point.y + e.dy,
            z=point.z + e.dz,
            category=category,
            suffix=e.suffix,
        )
        for e in config.catalog_for(category)
    ]


def expand_point(point: Point, config: ExpansionConfig) -> list[GeneratedPoint]:
    """Return the displaced points for one input point, in catalog order.

    Labels are ``point.label + entry.suffix`` with no separator. A label with
    no digits goes through the fallback category like any other miss.
    """
    return _generate(point, classify_point(point, config), config)


def run_pipeline(
    points: Iterable[Point],
    config: ExpansionConfig,
    *,
    include_original: bool = True,
) -> list[OutputRow]:
    """Expand every point in input order.

    Per point: the original row (when ``include_original``) followed by its
    generated rows. No sorting or dedup across points.
    """
    rows: list[OutputRow] = []
    for p in points:
        category = classify_point(p, config)
        if include_original:
            rows.append(
                OutputRow(label=p.label, x=p.x, y=p.y, z=p.z, kind="original", category=category)
            )
        rows.extend(
            OutputRow(label=g.label, x=g.x, y=g.y, z=g.z, kind="generated", category=category)
            for g in _generate(p, category, config)
        )
    return rows


def summarize_rows(rows: Iterable[OutputRow]) -> ExpansionSummary:
    kinds: Counter[str] = Counter()
    by_category: Counter[str] = Counter()
    for r in rows:
        kinds[r.kind] += 1
        by_category[r.category] += 1
    return ExpansionSummary(
        original_count=kinds["original"],
        generated_count=kinds["generated"],
        rows_by_category=dict(by_category),
    )
