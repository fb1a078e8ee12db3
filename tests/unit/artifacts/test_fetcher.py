"""Tests for the build reports artifact fetcher."""

import asyncio
import io
import logging
import zipfile
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from boostsec.workflow_reconciler.artifacts.fetcher import ArtifactFetcher
from boostsec.workflow_reconciler.errors import ArtifactUnavailableError
from boostsec.workflow_reconciler.models.build_reports import TestResultsKind
from boostsec.workflow_reconciler.models.provider_config import PollingConfig
from boostsec.workflow_reconciler.models.workflow_run import (
    Artifact,
    RunStatus,
    WorkflowRun,
)
from boostsec.workflow_reconciler.providers.base import RunCatalog


class ArtifactCatalog(RunCatalog):
    """Run catalog serving artifact downloads from a mock."""

    def __init__(self) -> None:
        """Initialize catalog with a download mock."""
        self.download_mock = AsyncMock()

    async def list_workflow_runs(  # pragma: no cover
        self, workflow_id: int, branch: str | None, status: RunStatus
    ) -> list[WorkflowRun]:
        """Not used by the fetcher."""
        return []

    async def cancel_run(self, run_id: int) -> None:  # pragma: no cover
        """Not used by the fetcher."""

    async def rerun_run(self, run_id: int) -> None:  # pragma: no cover
        """Not used by the fetcher."""

    async def download_artifact(self, artifact: Artifact) -> bytes:
        """Mock download."""
        result: bytes = await self.download_mock(artifact)
        return result


def make_archive() -> bytes:
    """Build a small build reports archive."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zip_file:
        zip_file.writestr("target/build-report.json", "{}")
        zip_file.writestr("core/target/surefire-reports/TEST-Foo.xml", "<testsuite/>")
    return buffer.getvalue()


@pytest.fixture
def artifact() -> Artifact:
    """Create build reports artifact."""
    return Artifact(id=99, name="build-reports-JVM Tests")


@pytest.fixture
def fast_polling() -> PollingConfig:
    """Create a polling schedule suitable for tests."""
    return PollingConfig(initial_delay=0, interval=0.01, timeout=1)


async def test_fetch_succeeds_on_third_attempt(
    tmp_path: Path,
    artifact: Artifact,
    fast_polling: PollingConfig,
    caplog: pytest.LogCaptureFixture,
) -> None:
    """Artifacts becoming available after a few attempts are extracted."""
    catalog = ArtifactCatalog()
    catalog.download_mock.side_effect = [
        ArtifactUnavailableError("not uploaded yet"),
        ConnectionError("network down"),
        make_archive(),
    ]
    fetcher = ArtifactFetcher(catalog, fast_polling)

    with caplog.at_level(logging.ERROR):
        reports = await fetcher.fetch_build_reports(artifact, tmp_path)

    assert reports is not None
    expected = tmp_path.resolve() / "target" / "build-report.json"
    assert reports.build_report_path == expected
    assert [p.kind for p in reports.test_results_paths] == [
        TestResultsKind.MAVEN_SUREFIRE
    ]
    assert catalog.download_mock.call_count == 3
    assert "build-reports-JVM Tests (#99) - retry #1" in caplog.text
    assert "retry #2" in caplog.text
    assert "retry #3" not in caplog.text


async def test_fetch_returns_none_after_timeout(
    tmp_path: Path, artifact: Artifact
) -> None:
    """Artifacts never becoming available yield no result without raising."""
    catalog = ArtifactCatalog()
    catalog.download_mock.side_effect = ArtifactUnavailableError("not uploaded yet")
    fetcher = ArtifactFetcher(
        catalog, PollingConfig(initial_delay=0, interval=0.02, timeout=0.1)
    )

    reports = await fetcher.fetch_build_reports(artifact, tmp_path)

    assert reports is None
    assert catalog.download_mock.call_count >= 2


async def test_fetch_retries_unsafe_archives(
    tmp_path: Path, artifact: Artifact, fast_polling: PollingConfig
) -> None:
    """Archive security violations abort the attempt and are retried."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zip_file:
        zip_file.writestr("../evil.txt", "pwned")

    destination = tmp_path / "job"
    destination.mkdir()
    catalog = ArtifactCatalog()
    catalog.download_mock.side_effect = [buffer.getvalue(), make_archive()]
    fetcher = ArtifactFetcher(catalog, fast_polling)

    reports = await fetcher.fetch_build_reports(artifact, destination)

    assert reports is not None
    assert not (tmp_path / "evil.txt").exists()
    assert catalog.download_mock.call_count == 2


async def test_fetch_retry_counters_are_independent(
    tmp_path: Path,
    artifact: Artifact,
    fast_polling: PollingConfig,
    caplog: pytest.LogCaptureFixture,
) -> None:
    """Each fetch counts its own retries."""
    catalog = ArtifactCatalog()
    catalog.download_mock.side_effect = [
        ArtifactUnavailableError("first"),
        make_archive(),
        ArtifactUnavailableError("second"),
        make_archive(),
    ]
    fetcher = ArtifactFetcher(catalog, fast_polling)

    with caplog.at_level(logging.ERROR):
        await fetcher.fetch_build_reports(artifact, tmp_path / "one")
        await fetcher.fetch_build_reports(artifact, tmp_path / "two")

    assert caplog.text.count("retry #1") == 2
    assert "retry #2" not in caplog.text


async def test_fetch_gives_up_on_stalled_download(
    tmp_path: Path, artifact: Artifact
) -> None:
    """A download still running at the timeout is abandoned."""

    async def stalled_download(_artifact: Artifact) -> bytes:
        await asyncio.sleep(2)
        return make_archive()

    catalog = ArtifactCatalog()
    catalog.download_mock.side_effect = stalled_download
    fetcher = ArtifactFetcher(
        catalog, PollingConfig(initial_delay=0, interval=0.05, timeout=0.3)
    )

    loop = asyncio.get_running_loop()
    start = loop.time()
    reports = await fetcher.fetch_build_reports(artifact, tmp_path)

    assert reports is None
    assert loop.time() - start < 1
    assert not (tmp_path / "target").exists()
