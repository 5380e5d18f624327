from __future__ import annotations

import re
from dataclasses import replace
from pathlib import Path

from displaced_points.core.errors import PointLoadError
from displaced_points.core.model import Point


_SPLIT = re.compile(r"[,\s]+")


def parse_point_line(line: str) -> Point:
    """Parse one ``label X Y Z`` / ``label,X,Y,Z`` record."""
    fields = [f for f in _SPLIT.split(line.strip()) if f]
    if len(fields) != 4:
        raise PointLoadError(
            code="E_POINT_FIELD_COUNT",
            message=f"expected 4 fields (label, X, Y, Z), got {len(fields)}",
        )
    label, xs, ys, zs = fields
    try:
        return Point(label=label, x=float(xs), y=float(ys), z=float(zs))
    except ValueError as e:
        raise PointLoadError(
            code="E_POINT_COORDINATE",
            message=f"non-numeric coordinate in {xs!r}, {ys!r}, {zs!r}",
        ) from e


def load_points(path: str) -> tuple[list[Point], list[PointLoadError]]:
    """Load points from a text/CSV file.

    Returns (points, issues). Blank lines and ``#`` comments are ignored;
    malformed lines are skipped and reported in ``issues`` so the caller can
    warn about them. A missing or unreadable file raises PointLoadError.
    """

    p = Path(path)
    if not p.exists():
        raise PointLoadError(
            code="E_FILE_NOT_FOUND",
            message="file does not exist",
            file=str(p),
        )

    try:
        raw_text = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise PointLoadError(code="E_FILE_READ", message=str(e), file=str(p)) from e

    points: list[Point] = []
    issues: list[PointLoadError] = []
    for lineno, line in enumerate(raw_text.splitlines(), start=1):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        try:
            points.append(parse_point_line(stripped))
        except PointLoadError as e:
            issues.append(replace(e, file=str(p), path=f"line {lineno}"))
    return points, issues
