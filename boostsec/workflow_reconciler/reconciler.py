"""Cancel redundant workflow runs and rerun the ones cancelled too eagerly."""

import logging

from boostsec.workflow_reconciler.models.provider_config import BotConfig
from boostsec.workflow_reconciler.models.workflow_run import (
    PULL_REQUEST_EVENT,
    PUSH_EVENT,
    WorkflowRun,
)
from boostsec.workflow_reconciler.providers.base import RunCatalog
from boostsec.workflow_reconciler.run_query import RunQuery

logger = logging.getLogger(__name__)


class DuplicateRunReconciler:
    """Keeps at most the relevant runs of a workflow lineage active.

    Push runs only exist to check a branch periodically: while one is queued or
    in progress, newer ones are cancelled and the last cancelled one is rerun
    when the active run completes. Pull request runs only matter for the latest
    revision, so a new run cancels all the older ones.

    Nothing is stored between calls; every decision is taken from a fresh
    query of the run catalog.
    """

    def __init__(self, catalog: RunCatalog, config: BotConfig) -> None:
        """Initialize reconciler with a run catalog and bot configuration."""
        self.catalog = catalog
        self.config = config
        self.query = RunQuery(catalog)

    async def cancel_duplicate_workflow_runs(self, workflow_run: WorkflowRun) -> None:
        """Handle a newly requested run by cancelling redundant runs.

        Never raises: failures are logged.
        """
        try:
            runs_to_cancel = await self._select_runs_to_cancel(workflow_run)
        except Exception:
            logger.exception(
                f"Workflow run #{workflow_run.id} - Unable to look up similar "
                f"workflow runs for branch '{workflow_run.head_branch}'"
            )
            return

        for run_to_cancel in runs_to_cancel:
            await self._cancel(workflow_run, run_to_cancel)

    async def rerun_last_cancelled_workflow(self, workflow_run: WorkflowRun) -> None:
        """Handle a completed push run by rerunning the last run it superseded.

        Never raises: failures are logged.
        """
        if workflow_run.event != PUSH_EVENT or workflow_run.is_cancelled:
            return

        try:
            cancelled_runs = await self.query.following_cancelled_runs(workflow_run)
        except Exception:
            logger.exception(
                f"Workflow run #{workflow_run.id} - Unable to look up cancelled "
                f"workflow runs for branch '{workflow_run.head_branch}'"
            )
            return

        if not cancelled_runs:
            logger.debug(
                f"Workflow run #{workflow_run.id} - No following workflow run to "
                f"rerun on branch '{workflow_run.head_branch}'"
            )
            return

        run_to_rerun = cancelled_runs[-1]
        logger.debug(
            f"Workflow run #{workflow_run.id} - Will rerun workflow run "
            f"#{run_to_rerun.id} for branch '{workflow_run.head_branch}' because "
            "it was cancelled while this workflow run was running"
        )

        if self.config.dry_run:
            logger.info(
                f"Workflow run #{workflow_run.id} - Rerunning workflow run "
                f"#{run_to_rerun.id} for branch '{workflow_run.head_branch}' (dry run)"
            )
            return

        try:
            await self.catalog.rerun_run(run_to_rerun.id)
        except Exception:
            logger.exception(
                f"Workflow run #{workflow_run.id} - Unable to rerun workflow run "
                f"#{run_to_rerun.id} for branch '{workflow_run.head_branch}'"
            )

    async def _select_runs_to_cancel(
        self, workflow_run: WorkflowRun
    ) -> list[WorkflowRun]:
        """Pick the runs made redundant by ``workflow_run``."""
        if workflow_run.event == PUSH_EVENT:
            previous_runs = await self.query.previous_incomplete_runs(workflow_run)
            if not previous_runs:
                logger.debug(
                    f"Workflow run #{workflow_run.id} - Will let this new workflow "
                    f"run for branch '{workflow_run.head_branch}' proceed because "
                    "there are no existing workflow runs"
                )
                return []

            # The older run keeps going; it reruns us once it completes.
            logger.debug(
                f"Workflow run #{workflow_run.id} - Will cancel this new workflow "
                f"run for branch '{workflow_run.head_branch}' because of existing "
                f"workflow run #{previous_runs[0].id}"
            )
            return [workflow_run]

        if workflow_run.event == PULL_REQUEST_EVENT:
            previous_runs = await self.query.previous_incomplete_runs(workflow_run)
            logger.debug(
                f"Workflow run #{workflow_run.id} - Will cancel workflow runs "
                f"{', '.join(f'#{run.id}' for run in previous_runs)} for branch "
                f"'{workflow_run.head_branch}' because of this new workflow run"
            )
            return previous_runs

        return []

    async def _cancel(
        self, workflow_run: WorkflowRun, run_to_cancel: WorkflowRun
    ) -> None:
        """Cancel one run, logging instead in dry run mode."""
        if self.config.dry_run:
            logger.info(
                f"Workflow run #{workflow_run.id} - Cancelling workflow run "
                f"#{run_to_cancel.id} for branch '{workflow_run.head_branch}' (dry run)"
            )
            return

        try:
            logger.debug(
                f"Workflow run #{workflow_run.id} - Cancelling workflow run "
                f"#{run_to_cancel.id} for branch '{workflow_run.head_branch}'"
            )
            await self.catalog.cancel_run(run_to_cancel.id)
        except Exception:
            logger.exception(
                f"Workflow run #{workflow_run.id} - Unable to cancel workflow run "
                f"#{run_to_cancel.id} for branch '{workflow_run.head_branch}'"
            )
