"""jacocogen report command - convert Istanbul coverage to JaCoCo XML."""

import json
from pathlib import Path
from typing import Any

import click

from jacocogen.config.loader import load_config
from jacocogen.config.models import LoggingConfig
from jacocogen.core.errors import JacocoGenError
from jacocogen.core.logging import configure_logging
from jacocogen.coverage.istanbul import parse_istanbul
from jacocogen.report.jacoco import JacocoReport

_CONSOLE = ("stderr", "stdout")


def _cli_logging(config: LoggingConfig, verbose: bool) -> LoggingConfig:
    """Apply --verbose to the configured outputs.

    Without it, console outputs that set no level of their own log warnings
    only, so --json output stays parseable.
    """
    if verbose:
        outputs = [o.model_copy(update={"level": "DEBUG"}) for o in config.outputs]
        return config.model_copy(update={"level": "DEBUG", "outputs": outputs})
    outputs = [
        o.model_copy(update={"level": "WARNING"})
        if o.level is None and o.destination in _CONSOLE
        else o
        for o in config.outputs
    ]
    return config.model_copy(update={"outputs": outputs})


@click.command()
@click.argument("coverage", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--dir",
    "out_dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Output directory (default: project root)",
)
@click.option("--file", "out_file", help="Output file name (default: jacoco-coverage.xml)")
@click.option(
    "--project-root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Project root used as report name and for relative paths (default: cwd)",
)
@click.option("--async", "async_write", is_flag=True, help="Write on a worker thread")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def report_command(
    ctx: click.Context,
    coverage: Path,
    out_dir: Path | None,
    out_file: str | None,
    project_root: Path | None,
    async_write: bool,
    as_json: bool,
) -> None:
    """Write a JaCoCo XML report from Istanbul coverage.

    COVERAGE is coverage-final.json or the directory holding it.
    """
    overrides: dict[str, Any] = {}
    if out_dir is not None:
        overrides["dir"] = str(out_dir.resolve())
    if out_file is not None:
        overrides["file"] = out_file
    if async_write:
        overrides["sync"] = False

    try:
        config = load_config(project_root, report=overrides)
        verbose = bool((ctx.obj or {}).get("verbose"))
        configure_logging(config=_cli_logging(config.logging, verbose))

        base_path = Path(config.report.project_root)
        collector = parse_istanbul(coverage.resolve(), base_path=base_path)
        with JacocoReport(config.report) as report:
            output = report.write_report(collector).result()
    except JacocoGenError as e:
        raise click.ClickException(str(e)) from e

    if as_json:
        click.echo(
            json.dumps(
                {
                    "output": str(output),
                    "files": len(collector),
                    "functions": sum(len(r.functions) for r in collector),
                    "lines": sum(r.lines_found for r in collector),
                    "lines_hit": sum(r.lines_hit for r in collector),
                }
            )
        )
    else:
        click.echo(f"Wrote {output}")
