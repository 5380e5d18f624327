import math
import os
from pathlib import Path

import pytest

from displaced_points.core.expand.catalog_config import (
    DEFAULT_CONFIG,
    CatalogConfigError,
    load_catalog_file,
    load_or_default,
    parse_catalog,
)
from displaced_points.core.model import Range

EXAMPLES = Path(__file__).resolve().parents[1] / "examples"


def _minimal(**overrides) -> dict:
    doc = {
        "fallback": "a",
        "categories": [
            {"name": "a", "ranges": [[1, 5]], "displacements": [{"suffix": "_1", "dx": 1}]},
        ],
    }
    doc.update(overrides)
    return doc


def test_default_config_has_blue_and_red():
    assert [c.name for c in DEFAULT_CONFIG.categories] == ["blue", "red"]
    assert DEFAULT_CONFIG.fallback == "red"
    assert len(DEFAULT_CONFIG.catalog_for("blue")) == 7
    assert len(DEFAULT_CONFIG.catalog_for("red")) == 7


def test_default_red_radial_entries_mirror_blue():
    blue = DEFAULT_CONFIG.catalog_for("blue")
    red = DEFAULT_CONFIG.catalog_for("red")
    assert blue[:4] == red[:4]
    for b, r in zip(blue[4:], red[4:]):
        assert b.suffix == r.suffix
        assert b.dx == pytest.approx(r.dx)
        assert b.dy == pytest.approx(-r.dy)


def test_default_diagonal_offset_length():
    first = DEFAULT_CONFIG.catalog_for("blue")[0]
    assert first.suffix == "_1"
    assert first.dx == pytest.approx(2.0 * math.sqrt(2.0))
    assert first.dy == pytest.approx(2.0 * math.sqrt(2.0))
    assert first.dz == 0.0


def test_load_or_default_without_file():
    assert load_or_default(None) is DEFAULT_CONFIG


def test_load_three_category_file():
    cfg = load_catalog_file(EXAMPLES / "catalog-three.yaml")
    assert [c.name for c in cfg.categories] == ["inner", "middle", "outer"]
    assert cfg.fallback == "outer"
    assert cfg.category("middle").ranges == (Range(10, 19), Range(30, 39))

    north = cfg.catalog_for("outer")[0]
    assert north.dx == pytest.approx(0.0, abs=1e-12)
    assert north.dy == pytest.approx(6.0)

    up = cfg.catalog_for("middle")[0]
    assert (up.dx, up.dy, up.dz) == (0.0, 0.0, 2.5)


def test_missing_file_raises_file_not_found(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_catalog_file(tmp_path / "nope.yaml")


def test_fallback_is_required():
    doc = _minimal()
    del doc["fallback"]
    with pytest.raises(CatalogConfigError, match="fallback"):
        parse_catalog(doc)


def test_fallback_must_name_a_category():
    with pytest.raises(CatalogConfigError, match="not a declared category"):
        parse_catalog(_minimal(fallback="zzz"))


def test_duplicate_names_rejected():
    cat = {"name": "a", "ranges": [], "displacements": []}
    with pytest.raises(CatalogConfigError, match="duplicates"):
        parse_catalog(_minimal(categories=[cat, cat]))


def test_inverted_range_rejected():
    cat = {"name": "a", "ranges": [[9, 1]], "displacements": []}
    with pytest.raises(CatalogConfigError, match=r"categories\[0\]\.ranges\[0\]"):
        parse_catalog(_minimal(categories=[cat]))


def test_mixed_polar_and_cartesian_rejected():
    cat = {"name": "a", "displacements": [{"suffix": "_1", "dx": 1, "r": 2, "angle_deg": 0}]}
    with pytest.raises(CatalogConfigError, match="either"):
        parse_catalog(_minimal(categories=[cat]))


def test_non_mapping_document_rejected(tmp_path: Path):
    p = tmp_path / "cat.yaml"
    p.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(CatalogConfigError):
        load_catalog_file(p)


def test_overlapping_ranges_are_allowed():
    cats = [
        {"name": "a", "ranges": [[1, 10]], "displacements": []},
        {"name": "b", "ranges": [[5, 15]], "displacements": []},
    ]
    cfg = parse_catalog(_minimal(categories=cats))
    assert [c.name for c in cfg.categories] == ["a", "b"]


def test_directory_is_reported_as_config_error(tmp_path: Path):
    with pytest.raises(CatalogConfigError, match="cannot read"):
        load_catalog_file(tmp_path)


def test_non_utf8_is_reported_as_config_error(tmp_path: Path):
    p = tmp_path / "cat.yaml"
    p.write_bytes(b"\xff\xfe\x00\x01")
    with pytest.raises(CatalogConfigError, match="cannot read"):
        load_catalog_file(p)


@pytest.mark.skipif(not hasattr(os, "geteuid") or os.geteuid() == 0, reason="root ignores file modes")
def test_unreadable_file_is_reported_as_config_error(tmp_path: Path):
    p = tmp_path / "cat.yaml"
    p.write_text("fallback: a\n", encoding="utf-8")
    p.chmod(0)
    try:
        with pytest.raises(CatalogConfigError, match="cannot read"):
            load_catalog_file(p)
    finally:
        p.chmod(0o600)
