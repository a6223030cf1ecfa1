from __future__ import annotations

from pathlib import Path

import typer

app = typer.Typer(name="jsgrade", help="Grade a JavaScript class exercise")

EXAMPLE_CONFIG = """\
# Paths are relative to this file.
submission_path: ../index.js
auxiliary_path: ../custom.ih
output_dir: .
endpoint_url: ${JSGRADE_ENDPOINT:-https://compiler.techademy.com/v1/mfa-results/push}
expected_class: Person
expected_method: greet
xml_mode: fragments
submit: true
"""


def _load(
    config: str | None,
    submission: str | None = None,
    aux: str | None = None,
    output_dir: str | None = None,
    endpoint: str | None = None,
    xml_mode: str | None = None,
    no_submit: bool = False,
):
    import yaml
    from pydantic import ValidationError

    from jsgrade.config import GraderConfig, load_config

    try:
        if config is not None:
            config_path = Path(config)
            if not config_path.exists():
                typer.echo(f"Error: config file not found: {config}", err=True)
                raise typer.Exit(1)
            grader_config = load_config(config_path)
        else:
            grader_config = GraderConfig()

        overrides = {
            "submission_path": submission,
            "auxiliary_path": aux,
            "output_dir": output_dir,
            "endpoint_url": endpoint,
            "xml_mode": xml_mode,
        }
        data = grader_config.model_dump()
        data.update({k: v for k, v in overrides.items() if v is not None})
        if no_submit:
            data["submit"] = False
        return GraderConfig(**data)
    except (ValidationError, ValueError, yaml.YAMLError) as e:
        typer.echo(f"Error: invalid configuration: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def run(
    config: str | None = typer.Option(None, "--config", "-c", help="Path to grader YAML config"),
    submission: str | None = typer.Option(None, help="Submission source file"),
    aux: str | None = typer.Option(None, help="Auxiliary custom data file"),
    output_dir: str | None = typer.Option(None, help="Directory for output files"),
    endpoint: str | None = typer.Option(None, help="Scoring endpoint URL"),
    xml_mode: str | None = typer.Option(
        None, help="XML report layout: 'fragments' or 'document'"
    ),
    no_submit: bool = typer.Option(
        False, "--no-submit", help="Do not send results to the scoring endpoint"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output to terminal"
    ),
):
    """Delete previous outputs and grade the submission."""
    from jsgrade.config import DEBUG_LOG_FILENAME
    from jsgrade.errors import GradingError
    from jsgrade.runner import Runner
    from jsgrade.verbose import setup_logger

    grader_config = _load(config, submission, aux, output_dir, endpoint, xml_mode, no_submit)
    logger = setup_logger(
        grader_config.output_dir / DEBUG_LOG_FILENAME,
        verbose=verbose,
        logger_name="jsgrade_main",
    )

    runner = Runner(config=grader_config, logger=logger)
    try:
        report = runner.execute()
    except GradingError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    for result in report.result_set:
        if result.passed:
            typer.secho(f"{result.identifier}: Pass", fg=typer.colors.YELLOW)
        else:
            typer.secho(f"{result.identifier}: Fail", fg=typer.colors.RED)
            typer.echo(f"  {result.feedback}")

    if report.submissions:
        delivered = sum(1 for s in report.submissions if s.delivered)
        typer.echo(f"Submitted {delivered}/{len(report.submissions)} result(s)")

    rs = report.result_set
    typer.echo(f"Score: {rs.earned_score}/{rs.max_score}")


@app.command()
def clean(
    config: str | None = typer.Option(None, "--config", "-c", help="Path to grader YAML config"),
    output_dir: str | None = typer.Option(None, help="Directory for output files"),
):
    """Delete output files left by a previous run."""
    import logging

    from jsgrade.runner import delete_output_files

    grader_config = _load(config, output_dir=output_dir)
    logger = logging.getLogger("jsgrade_clean")
    deleted = delete_output_files(grader_config.output_files(), logger)
    for path in deleted:
        typer.echo(f"Deleted: {path}")
    if not deleted:
        typer.echo("Nothing to delete.")


@app.command()
def init(
    dir: str = typer.Option(
        "test", "--dir", help="Directory to write grader.yaml into"
    ),
):
    """Write an example grader.yaml."""
    project_dir = Path(dir)
    project_dir.mkdir(parents=True, exist_ok=True)

    example = project_dir / "grader.yaml"
    if example.exists():
        typer.echo(f"grader.yaml already exists in {dir}, skipping.")
        return

    example.write_text(EXAMPLE_CONFIG)
    typer.echo(f"Initialized grader config: {example}")
