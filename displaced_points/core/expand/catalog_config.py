from __future__ import annotations

import math
from pathlib import Path
from typing import Any

import yaml

from displaced_points.core.model import Category, DisplacementEntry, ExpansionConfig, Range


class CatalogConfigError(ValueError):
    pass


def polar_entry(suffix: str, r: float, angle_deg: float, dz: float = 0.0) -> DisplacementEntry:
    """Offset of length ``r`` in the XY plane at ``angle_deg`` from +X."""
    a = math.radians(angle_deg)
    return DisplacementEntry(suffix=suffix, dx=r * math.cos(a), dy=r * math.sin(a), dz=dz)


def mirror_y(entry: DisplacementEntry) -> DisplacementEntry:
    return DisplacementEntry(suffix=entry.suffix, dx=entry.dx, dy=-entry.dy, dz=entry.dz)


def _default_config() -> ExpansionConfig:
    r = 2.0  # small diagonal offset (mm)
    d = r * math.sqrt(2.0)
    big_r = 6.0  # radial offset (mm)

    diagonal = (
        DisplacementEntry("_1", +d, +d),
        DisplacementEntry("_2", -d, +d),
        DisplacementEntry("_3", -d, -d),
        DisplacementEntry("_4", +d, -d),
    )
    radial = (
        polar_entry("_5", big_r, -30.0),
        polar_entry("_6", big_r, +90.0),
        polar_entry("_7", big_r, -150.0),
    )

    blue = Category(name="blue", ranges=(Range(1, 50),), displacements=diagonal + radial)
    # Red points get the radial set flipped in Y.
    red = Category(
        name="red",
        ranges=(Range(51, 100),),
        displacements=diagonal + tuple(mirror_y(e) for e in radial),
    )
    return ExpansionConfig(categories=(blue, red), fallback="red")


DEFAULT_CONFIG: ExpansionConfig = _default_config()


def _number(v: Any, where: str) -> float:
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        raise CatalogConfigError(f"{where} must be a number")
    return float(v)


def _parse_range(raw: Any, where: str) -> Range:
    if (
        not isinstance(raw, list)
        or len(raw) != 2
        or not all(isinstance(x, int) and not isinstance(x, bool) for x in raw)
    ):
        raise CatalogConfigError(f"{where} must be a [lo, hi] pair of integers")
    lo, hi = raw
    if lo > hi:
        raise CatalogConfigError(f"{where} has lo > hi ({lo} > {hi})")
    return Range(lo, hi)


def _parse_entry(raw: Any, where: str) -> DisplacementEntry:
    if not isinstance(raw, dict):
        raise CatalogConfigError(f"{where} must be a mapping")

    suffix = raw.get("suffix")
    if not isinstance(suffix, str):
        raise CatalogConfigError(f"{where}.suffix must be a string")

    dz = _number(raw.get("dz", 0.0), f"{where}.dz")

    has_polar = "r" in raw or "angle_deg" in raw
    has_cartesian = "dx" in raw or "dy" in raw
    if has_polar and has_cartesian:
        raise CatalogConfigError(f"{where} must use either dx/dy or r/angle_deg, not both")
    if has_polar:
        if "r" not in raw or "angle_deg" not in raw:
            raise CatalogConfigError(f"{where} polar form needs both r and angle_deg")
        return polar_entry(
            suffix,
            _number(raw["r"], f"{where}.r"),
            _number(raw["angle_deg"], f"{where}.angle_deg"),
            dz,
        )

    return DisplacementEntry(
        suffix=suffix,
        dx=_number(raw.get("dx", 0.0), f"{where}.dx"),
        dy=_number(raw.get("dy", 0.0), f"{where}.dy"),
        dz=dz,
    )


def parse_catalog(raw: Any) -> ExpansionConfig:
    """Build an ExpansionConfig from a decoded YAML document.

    Format:
      fallback: <category name>
      categories:
        - name: <str>
          ranges: [[lo, hi], ...]
          displacements:
            - {suffix: "_1", dx: 1.0, dy: 0.0, dz: 0.0}
            - {suffix: "_2", r: 6.0, angle_deg: 90}

    Categories keep file order, which is the classification priority.
    """
    if not isinstance(raw, dict):
        raise CatalogConfigError("catalog file must be a mapping with 'categories' and 'fallback'")

    cats_raw = raw.get("categories")
    if not isinstance(cats_raw, list) or not cats_raw:
        raise CatalogConfigError("categories must be a non-empty list")

    categories: list[Category] = []
    seen: set[str] = set()
    for i, c in enumerate(cats_raw):
        where = f"categories[{i}]"
        if not isinstance(c, dict):
            raise CatalogConfigError(f"{where} must be a mapping")

        name = c.get("name")
        if not isinstance(name, str) or not name.strip():
            raise CatalogConfigError(f"{where}.name must be a non-empty string")
        name = name.strip()
        if name in seen:
            raise CatalogConfigError(f"{where}.name duplicates category '{name}'")
        seen.add(name)

        ranges_raw = c.get("ranges", [])
        if not isinstance(ranges_raw, list):
            raise CatalogConfigError(f"{where}.ranges must be a list")
        ranges = tuple(_parse_range(r, f"{where}.ranges[{j}]") for j, r in enumerate(ranges_raw))

        entries_raw = c.get("displacements", [])
        if not isinstance(entries_raw, list):
            raise CatalogConfigError(f"{where}.displacements must be a list")
        entries = tuple(
            _parse_entry(e, f"{where}.displacements[{j}]") for j, e in enumerate(entries_raw)
        )

        categories.append(Category(name=name, ranges=ranges, displacements=entries))

    fallback = raw.get("fallback")
    if not isinstance(fallback, str) or not fallback.strip():
        raise CatalogConfigError("fallback is required and must name a category")
    fallback = fallback.strip()
    if fallback not in seen:
        raise CatalogConfigError(
            f"fallback '{fallback}' is not a declared category (choose one of: {', '.join(sorted(seen))})"
        )

    return ExpansionConfig(categories=tuple(categories), fallback=fallback)


def load_catalog_file(path: str | Path) -> ExpansionConfig:
    """Load a catalog file. A missing file raises FileNotFoundError; any other
    read or decode problem is reported as CatalogConfigError."""
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise
    except (OSError, UnicodeDecodeError) as e:
        raise CatalogConfigError(f"cannot read catalog file: {e}") from e
    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise CatalogConfigError(f"invalid YAML: {e}") from e
    return parse_catalog(raw)


def load_or_default(catalog_file: str | None) -> ExpansionConfig:
    if not catalog_file:
        return DEFAULT_CONFIG
    return load_catalog_file(catalog_file)
