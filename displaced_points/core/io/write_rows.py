from __future__ import annotations

from pathlib import Path
from typing import Iterable

from displaced_points.core.errors import SinkError
from displaced_points.core.model import OutputRow


def format_row(row: OutputRow) -> str:
    return f"{row.label},{row.x:.3f},{row.y:.3f},{row.z:.3f}"


def render_rows(rows: Iterable[OutputRow]) -> str:
    return "".join(format_row(r) + "\n" for r in rows)


def write_rows(rows: Iterable[OutputRow], path: str) -> int:
    """Write rows as strict CSV (no header, no spaces). Returns the row count.

    The text is rendered before the file is opened; the parent directory is
    not created.
    """
    rows = list(rows)
    text = render_rows(rows)
    p = Path(path)
    try:
        with p.open("w", encoding="utf-8", newline="\n") as fh:
            fh.write(text)
    except OSError as e:
        raise SinkError(
            code="E_OUTPUT_OPEN",
            message=f"cannot open output file for writing: {e.strerror or e}",
            file=str(p),
        ) from e
    return len(rows)
