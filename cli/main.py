"""CLI entry point — Typer app for releval commands.

Usage:
    releval evaluate run.txt qrels.txt
    releval evaluate run.txt qrels.txt -m P.5,10 -m ndcg_p.1=3.5,2=9.0 -q
    releval evaluate run.txt qrels.txt --judged-only --relevance-level 2
    releval measures
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="releval",
    help="Relevance evaluation — align ranked runs with judgments and score them.",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)

_RESULTS_PATH = typer.Argument(..., help="Results file (TREC run format)")
_QRELS_PATH = typer.Argument(..., help="Judgments file (qrels_jg format)")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )


def _format_value(value: float | None) -> str:
    if value is None:
        return "-"
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.4f}"


@app.command()
def evaluate(
    results_path: Annotated[Path, _RESULTS_PATH],
    qrels_path: Annotated[Path, _QRELS_PATH],
    measure: list[str] | None = typer.Option(
        None, "--measure", "-m",
        help="Measure spec, repeatable (e.g. P.5,10 or ndcg_p.1=3.5,2=9.0)",
    ),
    relevance_level: int | None = typer.Option(
        None, "--relevance-level", "-l", help="Minimum level counted as relevant",
    ),
    max_docs: int | None = typer.Option(
        None, "--max-docs", "-M", help="Only evaluate the top N documents per query",
    ),
    judged_only: bool = typer.Option(
        False, "--judged-only", "-J", help="Drop unjudged documents before scoring",
    ),
    per_query: bool = typer.Option(
        False, "--per-query", "-q", help="Also print per-query values",
    ),
    settings_file: Path | None = typer.Option(
        None, "--settings", "-s", help="Settings YAML (default: nearest settings.yaml)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Evaluate a results file against a judgments file."""
    from releval.alignment.engine import EvaluationSession
    from releval.config import AlignmentSettings, load_settings
    from releval.errors import EvaluationError
    from releval.evaluation.runner import EvalRunner
    from releval.runs.loader import RunLoader

    _setup_logging(verbose)

    overrides = {
        "relevance_threshold": relevance_level,
        "max_items_per_query": max_docs,
        "judged_docs_only": judged_only or None,
    }

    try:
        settings = load_settings(settings_file)
        measure_specs = measure or settings.evaluation.measures
        show_queries = per_query or settings.evaluation.per_query
        alignment = AlignmentSettings(**{
            **settings.alignment.model_dump(),
            **{key: value for key, value in overrides.items() if value is not None},
        })
        loader = RunLoader()
        run = loader.load_results_file(results_path)
        judgments = loader.load_qrels_file(qrels_path)
        runner = EvalRunner(session=EvaluationSession(alignment), measures=measure_specs)
        report = runner.run(run, judgments)
    except (EvaluationError, ValueError, FileNotFoundError) as exc:
        err_console.print(f"[bold red]Error:[/] {exc}")
        raise typer.Exit(code=1) from exc

    table = Table(title=f"Run: {report.run_id or results_path.name}")
    table.add_column("Measure", style="cyan")
    table.add_column("Group")
    table.add_column("Query")
    table.add_column("Value", justify="right")

    if show_queries:
        for row in report.queries:
            for name, value in row.values.items():
                table.add_row(name, row.group, row.qid, _format_value(value))

    for group, values in report.summary.items():
        for name, value in values.items():
            table.add_row(name, group, "all", _format_value(value))

    console.print(table)
    console.print(
        f"[dim]Queries evaluated: {report.num_queries} "
        f"| Skipped (no judgments): {report.num_skipped}[/]",
    )


@app.command()
def measures() -> None:
    """List the available measures."""
    from releval import __version__
    from releval.evaluation.factory import describe_measures

    console.print(f"\n[bold green]releval[/] v{__version__}\n")

    table = Table(title="Available Measures")
    table.add_column("Measure", style="cyan")
    table.add_column("Description")

    for name, description in describe_measures():
        table.add_row(name, description)

    console.print(table)


if __name__ == "__main__":
    app()
