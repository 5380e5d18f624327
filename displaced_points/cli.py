from __future__ import annotations

import json

import typer

from displaced_points.core.errors import CatalogFileError, DisplaceError, PointLoadError, SinkError
from displaced_points.core.expand.catalog_config import CatalogConfigError, load_or_default
from displaced_points.core.expand.expand_points import classify_point, run_pipeline, summarize_rows
from displaced_points.core.expand.label_number import extract_label_number
from displaced_points.core.io.load_points import load_points
from displaced_points.core.io.write_rows import write_rows
from displaced_points.core.model import ExpansionConfig, Point

app = typer.Typer(add_completion=False, no_args_is_help=True)


@app.callback()
def _callback() -> None:
    """Displaced points CLI."""
    return


@app.command("expand")
def expand(
    input_path: str = typer.Argument(..., help="Points file: 'label X Y Z' or 'label,X,Y,Z' per line"),
    output_path: str = typer.Argument(..., help="Path to write the expanded CSV"),
    include_original: bool = typer.Option(
        True,
        "--original/--no-original",
        help="Copy each input point to the output before its displaced points",
    ),
    catalog_file: str | None = typer.Option(
        None,
        "--catalog-file",
        help="Optional YAML file with categories, ranges and displacements",
    ),
) -> None:
    """Expand every point into its category's displaced points."""
    config = _load_config(catalog_file)
    points = _load_points_or_exit(input_path)

    rows = run_pipeline(points, config, include_original=include_original)
    try:
        write_rows(rows, output_path)
    except SinkError as e:
        _print_errors([e])
        raise typer.Exit(code=1)

    summary = summarize_rows(rows)
    msg = f"Wrote {output_path} with "
    if include_original:
        msg += f"{summary.original_count} original points and "
    msg += f"{summary.generated_count} displaced points."
    typer.echo(msg)


@app.command("catalogs")
def catalogs(
    catalog_file: str | None = typer.Option(
        None,
        "--catalog-file",
        help="Optional YAML file with categories, ranges and displacements",
    ),
) -> None:
    """List categories in priority order with their ranges and displacements."""
    config = _load_config(catalog_file)

    typer.echo("Categories:")
    for c in config.categories:
        ranges = ", ".join(f"{r.lo}-{r.hi}" for r in c.ranges) or "(none)"
        marker = " (fallback)" if c.name == config.fallback else ""
        typer.echo(f"- {c.name}{marker}: ranges {ranges}; {len(c.displacements)} displacements")
        for e in c.displacements:
            typer.echo(f"    {e.suffix}: {e.dx:+.3f} {e.dy:+.3f} {e.dz:+.3f}")


@app.command("classify")
def classify(
    input_path: str = typer.Argument(..., help="Points file: 'label X Y Z' or 'label,X,Y,Z' per line"),
    catalog_file: str | None = typer.Option(
        None,
        "--catalog-file",
        help="Optional YAML file with categories, ranges and displacements",
    ),
    format: str = typer.Option("text", "--format", help="Output format: text|json"),
) -> None:
    """Show the label number and category chosen for each point."""
    if format not in ("text", "json"):
        _print_errors(
            [
                DisplaceError(
                    code="E_CLASSIFY_UNKNOWN_FORMAT",
                    message=f"unknown format: {format} (choose one of: text, json)",
                    path="format",
                )
            ]
        )
        raise typer.Exit(code=2)

    config = _load_config(catalog_file)
    points = _load_points_or_exit(input_path)

    items = [
        {
            "label": p.label,
            "number": extract_label_number(p.label),
            "category": classify_point(p, config),
        }
        for p in points
    ]

    if format == "json":
        payload = {
            "tool": "displaced-points",
            "command": "classify",
            "ok": True,
            "count": len(items),
            "fallback": config.fallback,
            "points": items,
        }
        typer.echo(json.dumps(payload, indent=2, sort_keys=True))
        return

    for item in items:
        typer.echo(f"{item['label']}\t{item['number']}\t{item['category']}")


def _load_config(catalog_file: str | None) -> ExpansionConfig:
    try:
        return load_or_default(catalog_file)
    except FileNotFoundError:
        _print_errors(
            [
                CatalogFileError(
                    code="E_CATALOG_FILE_NOT_FOUND",
                    message=f"catalog file not found: {catalog_file}",
                    file=None,
                    path="catalog_file",
                )
            ]
        )
        raise typer.Exit(code=1)
    except CatalogConfigError as e:
        _print_errors(
            [
                CatalogFileError(
                    code="E_CATALOG_FILE_INVALID",
                    message=str(e),
                    file=catalog_file,
                    path="catalog_file",
                )
            ]
        )
        raise typer.Exit(code=2)


def _load_points_or_exit(input_path: str) -> list[Point]:
    try:
        points, issues = load_points(input_path)
    except PointLoadError as e:
        _print_errors([e])
        raise typer.Exit(code=1)

    for issue in issues:
        typer.echo(f"WARN: skipped {issue}", err=True)
    if not points:
        typer.echo(f"WARN: no points read from {input_path}", err=True)
    return points


def _print_errors(errors: list[DisplaceError]) -> None:
    errors_sorted = sorted(errors, key=lambda e: (e.file or "", e.path or "", e.code))
    for e in errors_sorted:
        typer.echo(str(e), err=True)


def main() -> None:
    app(prog_name="displaced-points")


# `add-displaced-points <input> <output> [--no-original]`: expand with no subcommand.
expand_app = typer.Typer(add_completion=False, no_args_is_help=True)
expand_app.command()(expand)


def expand_main() -> None:
    expand_app(prog_name="add-displaced-points")


cli = typer.main.get_command(app)

if __name__ == "__main__":
    main()
