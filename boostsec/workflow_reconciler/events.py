"""Dispatch ``workflow_run`` webhook notifications to the reconciler."""

import logging
from collections.abc import Mapping

from boostsec.workflow_reconciler.models.workflow_run import WorkflowRunEvent
from boostsec.workflow_reconciler.reconciler import DuplicateRunReconciler

logger = logging.getLogger(__name__)


async def handle_workflow_run_event(
    payload: Mapping[str, object], reconciler: DuplicateRunReconciler
) -> str | None:
    """Route a webhook payload to the matching reconciler entry point.

    Args:
        payload: Raw ``workflow_run`` webhook payload
        reconciler: Reconciler handling the event

    Returns:
        The action that was handled, or None when the payload was ignored

    """
    try:
        event = WorkflowRunEvent.from_payload(payload)
    except ValueError as e:
        logger.error(f"Ignoring malformed workflow_run payload: {e}")
        return None

    run = event.workflow_run
    logger.info(
        f"Workflow run #{run.id} - Received '{event.action}' for event "
        f"'{run.event}' on branch '{run.head_branch}'"
    )

    if event.action == "requested":
        await reconciler.cancel_duplicate_workflow_runs(run)
    elif event.action == "completed":
        await reconciler.rerun_last_cancelled_workflow(run)
    else:
        logger.debug(f"Workflow run #{run.id} - Ignoring action '{event.action}'")
        return None

    return event.action
