from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

from dealdesk.adapters.catalog_loader import dump_catalog, get_active_catalog, load_catalog
from dealdesk.services.batch import score_csv
from dealdesk.services.deal_analyzer import analyze_deal
from dealdesk.services.report import render_text_report

app = typer.Typer(help="Dealdesk deal feasibility tools (batch scoring, catalog, reports).")


@app.command("score-csv")
def score_csv_cmd(
    input_csv: Path = typer.Argument(..., help="CSV of deal submissions"),
    output: Optional[Path] = typer.Option(
        None,
        help="Where to write the scored CSV (default: <input stem>_scored.csv)",
    ),
    catalog_path: Optional[Path] = typer.Option(
        None, "--catalog", help="Lender catalog JSON (default: active catalog)"
    ),
) -> None:
    """
    Score every deal in a CSV and write scores, best lender and a summary JSON.
    """
    output = output or input_csv.with_name(f"{input_csv.stem}_scored.csv")
    catalog = load_catalog(catalog_path) if catalog_path else None
    summary = score_csv(input_csv, output, catalog=catalog)
    typer.echo(json.dumps(summary, indent=2))


@app.command()
def catalog(
    output: Optional[Path] = typer.Option(
        None, help="Write the active catalog to this JSON file instead of stdout"
    ),
) -> None:
    """
    Print (or export) the active lender catalog.
    """
    active = get_active_catalog()
    if output is not None:
        dump_catalog(active, output)
        typer.echo(f"Wrote {len(active.lenders)} lenders (version {active.version}) to {output}")
        return
    typer.echo(active.model_dump_json(indent=2))


@app.command()
def report(
    deal_json: Path = typer.Argument(..., help="JSON file with a single deal submission"),
    as_json: bool = typer.Option(False, "--json", help="Emit the raw analysis as JSON"),
) -> None:
    """
    Analyze one deal and print a plain-text feasibility report.
    """
    if not deal_json.exists():
        raise typer.BadParameter(f"Deal file not found: {deal_json}")

    payload = json.loads(deal_json.read_text())
    try:
        analysis = analyze_deal(payload)
    except ValueError as e:
        typer.echo(f"Invalid deal: {e}", err=True)
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(json.dumps(analysis, indent=2, default=str))
    else:
        typer.echo(render_text_report(analysis), nl=False)


if __name__ == "__main__":
    app()
