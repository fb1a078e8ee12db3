"""Tests for workflow run models."""

import pytest
from pydantic import ValidationError

from boostsec.workflow_reconciler.models.workflow_run import (
    Artifact,
    WorkflowRun,
    WorkflowRunEvent,
)


def run_payload(**overrides: object) -> dict[str, object]:
    """Create a GitHub workflow run payload."""
    payload: dict[str, object] = {
        "id": 30433642,
        "name": "Build",
        "event": "push",
        "status": "queued",
        "conclusion": None,
        "workflow_id": 159038,
        "head_branch": "main",
        "head_repository": {"id": 217723378, "full_name": "octo-org/octo-repo"},
        "html_url": "https://github.com/octo-org/octo-repo/actions/runs/30433642",
    }
    payload.update(overrides)
    return payload


def test_from_payload_reads_github_fields() -> None:
    """from_payload maps the GitHub payload, including the head repository."""
    run = WorkflowRun.from_payload(run_payload())

    assert run.id == 30433642
    assert run.event == "push"
    assert run.status == "queued"
    assert run.conclusion is None
    assert run.workflow_id == 159038
    assert run.head_branch == "main"
    assert run.head_repository_id == 217723378
    assert run.name == "Build"


def test_from_payload_without_head_repository() -> None:
    """Runs from deleted forks have no head repository."""
    run = WorkflowRun.from_payload(run_payload(head_repository=None))

    assert run.head_repository_id is None


def test_from_payload_keeps_unknown_events() -> None:
    """Unknown trigger events are kept verbatim."""
    run = WorkflowRun.from_payload(run_payload(event="merge_group"))

    assert run.event == "merge_group"


def test_from_payload_requires_id() -> None:
    """from_payload rejects payloads without an id."""
    with pytest.raises(ValidationError) as exc_info:
        WorkflowRun.from_payload(run_payload(id=None))
    assert "id" in str(exc_info.value)


def test_is_cancelled() -> None:
    """is_cancelled checks the conclusion."""
    cancelled = WorkflowRun.from_payload(
        run_payload(status="completed", conclusion="cancelled")
    )
    succeeded = WorkflowRun.from_payload(
        run_payload(status="completed", conclusion="success")
    )

    assert cancelled.is_cancelled is True
    assert succeeded.is_cancelled is False


@pytest.mark.parametrize(
    ("overrides", "expected"),
    [
        ({}, True),
        ({"event": "pull_request"}, True),
        ({"event": "schedule"}, False),
        ({"workflow_id": 1}, False),
        ({"head_branch": "feature"}, False),
        ({"head_repository": {"id": 1}}, False),
        ({"head_repository": None}, False),
    ],
)
def test_is_similar_to(overrides: dict[str, object], expected: bool) -> None:
    """Similar runs share workflow, branch, head repository and trigger kind."""
    run = WorkflowRun.from_payload(run_payload())
    other = WorkflowRun.from_payload(run_payload(id=1, **overrides))

    assert run.is_similar_to(other) is expected


def test_artifact_from_payload() -> None:
    """Artifact.from_payload maps the GitHub artifact payload."""
    artifact = Artifact.from_payload(
        {
            "id": 11,
            "name": "build-reports",
            "archive_download_url": "https://api.github.com/artifacts/11/zip",
            "expired": True,
        }
    )

    assert artifact.id == 11
    assert artifact.name == "build-reports"
    assert artifact.expired is True


def test_workflow_run_event_from_payload() -> None:
    """WorkflowRunEvent reads the action and the run."""
    event = WorkflowRunEvent.from_payload(
        {"action": "completed", "workflow_run": run_payload()}
    )

    assert event.action == "completed"
    assert event.workflow_run.id == 30433642


def test_workflow_run_event_requires_run() -> None:
    """WorkflowRunEvent rejects payloads without a run."""
    with pytest.raises(ValueError, match="no workflow_run"):
        WorkflowRunEvent.from_payload({"action": "completed"})
