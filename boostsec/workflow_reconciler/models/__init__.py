"""Data models for workflow runs, configuration, and build reports."""

from boostsec.workflow_reconciler.models.build_reports import (
    BuildReports,
    TestResultsKind,
    TestResultsPath,
)
from boostsec.workflow_reconciler.models.provider_config import (
    BotConfig,
    GitHubConfig,
    PollingConfig,
)
from boostsec.workflow_reconciler.models.workflow_run import (
    Artifact,
    WorkflowRun,
    WorkflowRunEvent,
)

__all__ = [
    "Artifact",
    "BotConfig",
    "BuildReports",
    "GitHubConfig",
    "PollingConfig",
    "TestResultsKind",
    "TestResultsPath",
    "WorkflowRun",
    "WorkflowRunEvent",
]
