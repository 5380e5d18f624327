from __future__ import annotations

from typing import Iterable

from displaced_points.core.model import ExpansionConfig, Range


def in_any_range(number: int, ranges: Iterable[Range]) -> bool:
    if number < 0:
        return False
    return any(r.lo <= number <= r.hi for r in ranges)


def classify_number(number: int, config: ExpansionConfig) -> str:
    """Return the name of the first category whose ranges contain ``number``.

    Overlapping ranges are allowed; declaration order decides. Numbers that
    match nothing (including ``NO_NUMBER``) resolve to ``config.fallback``.
    """
    for category in config.categories:
        if in_any_range(number, category.ranges):
            return category.name
    return config.fallback
