import json
import logging
import sys
from pathlib import Path

import click

from .config import settings
from .exceptions import ParseError, RuleError
from .models import Report
from .pipeline import analyze


def _render_text(report: Report) -> str:
    """Plain-text report: verdict, findings, grade breakdown, feedback."""
    title = report.song.title or "Untitled"
    lines = [f"{title}: {'valid' if report.valid else 'INVALID'}"]

    if report.findings:
        lines.append("")
        lines.append("Findings:")
        for finding in report.findings:
            where = f" [{finding.location}]" if finding.location else ""
            lines.append(f"  {finding.severity.value:<8}{finding.rule}{where}: {finding.message}")

    grade = report.grade
    lines.append("")
    lines.append(f"Grade: {grade.overall}/100")
    for name, score in grade.breakdown.items():
        lines.append(f"  {name:<14}{score:>3}")

    if grade.feedback:
        lines.append("")
        lines.append("Feedback:")
        lines.extend(f"  - {sentence}" for sentence in grade.feedback)

    return "\n".join(lines) + "\n"


@click.command()
@click.argument("source", type=click.File("r", encoding="utf-8"))
@click.option("-o", "--output", "output_path", default=None, metavar="PATH",
              help="Write the report to PATH instead of stdout.")
@click.option("--json", "as_json", is_flag=True, default=False,
              help="Emit the report as JSON.")
@click.option("-j", "--workers", default=None, type=click.IntRange(min=1), metavar="N",
              help="Evaluate lint rules on N threads.")
@click.option("-v", "--verbose", is_flag=True, default=False,
              help="Log pipeline progress to stderr.")
def main(source, output_path: str | None, as_json: bool, workers: int | None, verbose: bool) -> None:
    """Lint and grade a song written in the lyrics DSL.

    \b
    SOURCE is a lyrics file, or - to read stdin.
    Exits with status 1 if the file does not parse or the song has errors.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level.upper(),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    # --- Analyze ---
    try:
        report = analyze(source.read(), max_workers=workers)
    except ParseError as exc:
        click.echo(f"Error: {source.name}: {exc}", err=True)
        sys.exit(1)
    except RuleError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    # --- Render ---
    if as_json:
        rendered = json.dumps(report.to_dict(), indent=2) + "\n"
    else:
        rendered = _render_text(report)

    # --- Output ---
    if output_path:
        Path(output_path).write_text(rendered, encoding="utf-8")
        click.echo(f"Written to {output_path}")
    else:
        click.echo(rendered, nl=False)

    if not report.valid:
        sys.exit(1)
