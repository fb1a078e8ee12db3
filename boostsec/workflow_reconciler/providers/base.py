"""Abstract base class for CI host run catalogs."""

from abc import ABC, abstractmethod

from boostsec.workflow_reconciler.models.workflow_run import (
    Artifact,
    RunStatus,
    WorkflowRun,
)


class RunCatalog(ABC):
    """Narrow view of the CI host's run and artifact API."""

    @abstractmethod
    async def list_workflow_runs(
        self,
        workflow_id: int,
        branch: str | None,
        status: RunStatus,
    ) -> list[WorkflowRun]:
        """List runs of a workflow on a branch in the given status.

        Args:
            workflow_id: Workflow identifier
            branch: Head branch name, ``None`` for every branch
            status: Run status to filter on

        Returns:
            Matching runs, in host order

        """

    @abstractmethod
    async def cancel_run(self, run_id: int) -> None:
        """Cancel a queued or in progress run.

        Raises:
            RunCommandError: If the host rejects the command

        """

    @abstractmethod
    async def rerun_run(self, run_id: int) -> None:
        """Re-run a completed run.

        Raises:
            RunCommandError: If the host rejects the command

        """

    @abstractmethod
    async def download_artifact(self, artifact: Artifact) -> bytes:
        """Download the zip archive of an artifact.

        Raises:
            ArtifactUnavailableError: If the archive cannot be retrieved yet

        """
