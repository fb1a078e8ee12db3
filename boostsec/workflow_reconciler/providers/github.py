"""GitHub Actions run catalog implementation."""

import logging
from collections.abc import Mapping

import aiohttp

from boostsec.workflow_reconciler.errors import (
    ArtifactUnavailableError,
    RunCatalogError,
    RunCommandError,
)
from boostsec.workflow_reconciler.models.provider_config import GitHubConfig
from boostsec.workflow_reconciler.models.workflow_run import (
    Artifact,
    RunStatus,
    WorkflowRun,
)
from boostsec.workflow_reconciler.providers.base import RunCatalog

logger = logging.getLogger(__name__)

PAGE_SIZE = 100


class GitHubRunCatalog(RunCatalog):
    """Run catalog backed by the GitHub REST API."""

    def __init__(self, config: GitHubConfig) -> None:
        """Initialize GitHub run catalog with configuration."""
        self.config = config
        self.base_url = config.base_url

    @property
    def _repo_url(self) -> str:
        return f"{self.base_url}/repos/{self.config.owner}/{self.config.repo}"

    @property
    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.token}",
            "Accept": "application/vnd.github+json",
        }

    async def list_workflow_runs(
        self,
        workflow_id: int,
        branch: str | None,
        status: RunStatus,
    ) -> list[WorkflowRun]:
        """List runs of a workflow, following pagination."""
        url = f"{self._repo_url}/actions/workflows/{workflow_id}/runs"
        runs: list[WorkflowRun] = []
        page = 1

        async with aiohttp.ClientSession() as session:
            while True:
                params = {
                    "status": status,
                    "per_page": str(PAGE_SIZE),
                    "page": str(page),
                }
                if branch is not None:
                    params["branch"] = branch

                async with session.get(
                    url, headers=self._headers, params=params
                ) as response:
                    if response.status != 200:
                        text = await response.text()
                        raise RunCatalogError(
                            f"Failed to list workflow runs: {response.status} {text}"
                        )

                    try:
                        data: Mapping[str, object] = await response.json()
                    except aiohttp.ContentTypeError as e:
                        raise RunCatalogError(
                            f"Unexpected workflow runs response: {e.message}"
                        ) from e

                page_runs = data.get("workflow_runs", [])
                if not isinstance(page_runs, list):
                    break

                runs.extend(
                    WorkflowRun.from_payload(run)
                    for run in page_runs
                    if isinstance(run, dict)
                )

                total_count = data.get("total_count")
                if len(page_runs) < PAGE_SIZE:
                    break
                if isinstance(total_count, int) and len(runs) >= total_count:
                    break
                page += 1

        logger.debug(
            f"Listed {len(runs)} {status} runs of workflow {workflow_id} "
            f"on branch '{branch}'"
        )
        return runs

    async def cancel_run(self, run_id: int) -> None:
        """Cancel a workflow run."""
        await self._post_command(run_id, "cancel", expected_status=202)

    async def rerun_run(self, run_id: int) -> None:
        """Re-run a workflow run."""
        await self._post_command(run_id, "rerun", expected_status=201)

    async def download_artifact(self, artifact: Artifact) -> bytes:
        """Download an artifact archive, following the storage redirect."""
        if artifact.expired:
            raise ArtifactUnavailableError(f"Artifact {artifact.name} has expired")

        url = (
            artifact.archive_download_url
            or f"{self._repo_url}/actions/artifacts/{artifact.id}/zip"
        )

        async with aiohttp.ClientSession() as session:
            async with session.get(url, headers=self._headers) as response:
                if response.status != 200:
                    text = await response.text()
                    raise ArtifactUnavailableError(
                        f"Failed to download artifact {artifact.name}: "
                        f"{response.status} {text}"
                    )

                return await response.read()

    async def _post_command(
        self, run_id: int, command: str, expected_status: int
    ) -> None:
        """Send a run command (cancel, rerun) to GitHub."""
        url = f"{self._repo_url}/actions/runs/{run_id}/{command}"

        async with aiohttp.ClientSession() as session:
            async with session.post(url, headers=self._headers) as response:
                if response.status != expected_status:
                    text = await response.text()
                    raise RunCommandError(
                        f"Failed to {command} workflow run {run_id}: "
                        f"{response.status} {text}"
                    )
