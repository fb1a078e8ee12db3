"""Models for GitHub workflow runs and artifacts."""

from collections.abc import Mapping
from typing import Literal

from pydantic import BaseModel, Field

RunStatus = Literal["queued", "in_progress", "completed"]

PUSH_EVENT = "push"
PULL_REQUEST_EVENT = "pull_request"
CANCELLED_CONCLUSION = "cancelled"

SIMILAR_RUN_EVENTS = frozenset({PUSH_EVENT, PULL_REQUEST_EVENT})


class WorkflowRun(BaseModel):
    """Snapshot of a single workflow run."""

    id: int = Field(..., description="Run identifier, increasing over time")
    event: str = Field(..., description="Triggering event (push, pull_request...)")
    status: str = Field(..., description="Run status (queued, in_progress...)")
    conclusion: str | None = Field(
        default=None, description="Run conclusion, only set once completed"
    )
    workflow_id: int = Field(..., description="Owning workflow identifier")
    head_branch: str | None = Field(default=None, description="Head branch name")
    head_repository_id: int | None = Field(
        default=None, description="Identifier of the repository holding the head"
    )
    name: str | None = Field(default=None, description="Workflow name")
    html_url: str | None = Field(default=None, description="Link to the run")

    @classmethod
    def from_payload(cls, payload: Mapping[str, object]) -> "WorkflowRun":
        """Build a run from a GitHub REST or webhook ``workflow_run`` object."""
        head_repository = payload.get("head_repository")
        head_repository_id = None
        if isinstance(head_repository, Mapping):
            head_repository_id = head_repository.get("id")

        return cls.model_validate(
            {
                "id": payload.get("id"),
                "event": payload.get("event") or "",
                "status": payload.get("status") or "",
                "conclusion": payload.get("conclusion"),
                "workflow_id": payload.get("workflow_id"),
                "head_branch": payload.get("head_branch"),
                "head_repository_id": head_repository_id,
                "name": payload.get("name"),
                "html_url": payload.get("html_url"),
            }
        )

    @property
    def is_cancelled(self) -> bool:
        """Whether the run completed with a cancelled conclusion."""
        return self.conclusion == CANCELLED_CONCLUSION

    def is_similar_to(self, other: "WorkflowRun") -> bool:
        """Check whether ``other`` belongs to the same lineage as this run.

        Runs are similar when they share workflow, head branch and head
        repository, and ``other`` was triggered by a push or a pull request.
        Runs whose head repository is unknown are never similar.
        """
        if self.head_repository_id is None or other.head_repository_id is None:
            return False

        return (
            other.workflow_id == self.workflow_id
            and other.head_branch == self.head_branch
            and other.head_repository_id == self.head_repository_id
            and other.event in SIMILAR_RUN_EVENTS
        )


class Artifact(BaseModel):
    """Artifact uploaded by a workflow run."""

    id: int = Field(..., description="Artifact identifier")
    name: str = Field(..., description="Artifact name")
    archive_download_url: str | None = Field(
        default=None, description="API URL of the zip archive"
    )
    expired: bool = Field(default=False, description="Whether it was purged")

    @classmethod
    def from_payload(cls, payload: Mapping[str, object]) -> "Artifact":
        """Build an artifact from a GitHub REST artifact object."""
        return cls.model_validate(
            {
                "id": payload.get("id"),
                "name": payload.get("name") or "",
                "archive_download_url": payload.get("archive_download_url"),
                "expired": bool(payload.get("expired", False)),
            }
        )


class WorkflowRunEvent(BaseModel):
    """Inbound ``workflow_run`` webhook notification."""

    action: str = Field(..., description="Lifecycle action (requested, completed)")
    workflow_run: WorkflowRun = Field(..., description="Run the event is about")

    @classmethod
    def from_payload(cls, payload: Mapping[str, object]) -> "WorkflowRunEvent":
        """Build an event from a raw webhook payload."""
        run_payload = payload.get("workflow_run")
        if not isinstance(run_payload, Mapping):
            raise ValueError("Payload has no workflow_run object")

        return cls(
            action=str(payload.get("action") or ""),
            workflow_run=WorkflowRun.from_payload(run_payload),
        )
