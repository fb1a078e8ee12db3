"""CLI entry point for the workflow run reconciler."""

import asyncio
import json
import logging
import os
import sys
from pathlib import Path, PurePosixPath
from typing import Optional

import typer

from boostsec.workflow_reconciler.artifacts.fetcher import ArtifactFetcher
from boostsec.workflow_reconciler.config_loader import load_bot_config
from boostsec.workflow_reconciler.events import handle_workflow_run_event
from boostsec.workflow_reconciler.models.build_reports import BuildReports
from boostsec.workflow_reconciler.models.provider_config import (
    BotConfig,
    GitHubConfig,
)
from boostsec.workflow_reconciler.models.workflow_run import Artifact
from boostsec.workflow_reconciler.providers.github import GitHubRunCatalog
from boostsec.workflow_reconciler.reconciler import DuplicateRunReconciler

# Configure logging - force reconfiguration
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stderr,
    force=True,
)
logger = logging.getLogger(__name__)

app = typer.Typer()


@app.command("handle-event")
def handle_event(
    event_path: Path = typer.Option(..., help="Path to the workflow_run payload"),  # noqa: B008
    github_config: str = typer.Option(..., help="JSON configuration for GitHub"),
    config_file: Optional[Path] = typer.Option(None, help="YAML bot configuration"),  # noqa: B008
    dry_run: bool = typer.Option(False, help="Log commands instead of issuing them"),
) -> None:
    """Cancel duplicate runs or rerun cancelled ones for a workflow_run event."""
    bot_config, catalog = _load_configuration(github_config, config_file, dry_run)

    try:
        payload = json.loads(event_path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Failed to read event payload: {e}")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    if not isinstance(payload, dict):
        typer.echo("Error: event payload must be a JSON object", err=True)
        raise typer.Exit(code=1)

    if bot_config.dry_run:
        logger.info("Running in dry run mode, no command will be issued")

    reconciler = DuplicateRunReconciler(catalog, bot_config)
    action = asyncio.run(handle_workflow_run_event(payload, reconciler))
    typer.echo(json.dumps({"handled": action}))


@app.command("fetch-reports")
def fetch_reports(
    artifact_id: int = typer.Option(..., help="Identifier of the artifact"),
    artifact_name: str = typer.Option(..., help="Name of the artifact"),
    destination: Path = typer.Option(..., help="Directory to extract reports to"),  # noqa: B008
    github_config: str = typer.Option(..., help="JSON configuration for GitHub"),
    config_file: Optional[Path] = typer.Option(None, help="YAML bot configuration"),  # noqa: B008
) -> None:
    """Download a build reports artifact and list the reports it contains."""
    bot_config, catalog = _load_configuration(github_config, config_file, False)

    fetcher = ArtifactFetcher(
        catalog,
        bot_config.polling,
        PurePosixPath(bot_config.build_report_path),
    )
    artifact = Artifact(id=artifact_id, name=artifact_name)
    destination.mkdir(parents=True, exist_ok=True)

    reports = asyncio.run(fetcher.fetch_build_reports(artifact, destination))
    if reports is None:
        typer.echo(f"Error: artifact {artifact_name} is not available", err=True)
        raise typer.Exit(code=1)

    typer.echo(json.dumps(_reports_to_dict(reports, destination), indent=2))


def _load_configuration(
    github_config: str, config_file: Path | None, dry_run: bool
) -> tuple[BotConfig, GitHubRunCatalog]:
    """Build the bot configuration and GitHub catalog, exiting on errors."""
    try:
        bot_config = load_bot_config(config_file)
        catalog = _create_catalog(github_config)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Invalid configuration: {e}")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    if dry_run:
        bot_config.dry_run = True

    return bot_config, catalog


def _create_catalog(config_json: str) -> GitHubRunCatalog:
    """Create the GitHub run catalog from JSON configuration."""
    try:
        config_dict = json.loads(config_json)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in github-config: {e}")

    config = GitHubConfig(**config_dict)
    if "GITHUB_API_URL" in os.environ:
        config.base_url = os.environ["GITHUB_API_URL"]
    return GitHubRunCatalog(config)


def _reports_to_dict(reports: BuildReports, destination: Path) -> dict[str, object]:
    root = destination.resolve()
    return {
        "build_report_path": (
            str(reports.build_report_path) if reports.build_report_path else None
        ),
        "test_results": [
            {
                "kind": test_results.kind.label,
                "path": str(test_results.path),
                "module": test_results.module_name(root),
            }
            for test_results in reports.test_results_paths
        ],
    }


if __name__ == "__main__":  # pragma: no cover
    app()
