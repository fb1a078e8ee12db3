"""Queries for runs in the same lineage as a given workflow run."""

from boostsec.workflow_reconciler.models.workflow_run import RunStatus, WorkflowRun
from boostsec.workflow_reconciler.providers.base import RunCatalog


class RunQuery:
    """Read-only lookups of similar runs against a run catalog."""

    def __init__(self, catalog: RunCatalog) -> None:
        """Initialize query helper with the catalog to read from."""
        self.catalog = catalog

    async def find_similar_runs(
        self, run: WorkflowRun, status: RunStatus
    ) -> list[WorkflowRun]:
        """List runs similar to ``run`` in the given status, sorted by id."""
        runs = await self.catalog.list_workflow_runs(
            run.workflow_id, run.head_branch, status
        )
        return sorted(
            (candidate for candidate in runs if run.is_similar_to(candidate)),
            key=lambda candidate: candidate.id,
        )

    async def previous_incomplete_runs(self, run: WorkflowRun) -> list[WorkflowRun]:
        """List older similar runs that are still in progress or queued."""
        in_progress = await self.find_similar_runs(run, "in_progress")
        queued = await self.find_similar_runs(run, "queued")
        return sorted(
            (candidate for candidate in in_progress + queued if candidate.id < run.id),
            key=lambda candidate: candidate.id,
        )

    async def following_cancelled_runs(self, run: WorkflowRun) -> list[WorkflowRun]:
        """List newer similar runs that completed as cancelled."""
        completed = await self.find_similar_runs(run, "completed")
        return [
            candidate
            for candidate in completed
            if candidate.id > run.id and candidate.is_cancelled
        ]
