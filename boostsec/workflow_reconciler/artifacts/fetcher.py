"""Poll for a build reports artifact until it can be downloaded."""

import asyncio
import logging
from pathlib import Path, PurePosixPath

from boostsec.workflow_reconciler.artifacts.extractor import (
    DEFAULT_BUILD_REPORT_PATH,
    extract_build_reports,
)
from boostsec.workflow_reconciler.models.build_reports import BuildReports
from boostsec.workflow_reconciler.models.provider_config import PollingConfig
from boostsec.workflow_reconciler.models.workflow_run import Artifact
from boostsec.workflow_reconciler.polling import PollStatus, wait_for
from boostsec.workflow_reconciler.providers.base import RunCatalog

logger = logging.getLogger(__name__)


class ArtifactFetcher:
    """Downloads and extracts build reports artifacts once they are available."""

    def __init__(
        self,
        catalog: RunCatalog,
        polling: PollingConfig | None = None,
        build_report_path: PurePosixPath = DEFAULT_BUILD_REPORT_PATH,
    ) -> None:
        """Initialize fetcher with a run catalog and a polling schedule."""
        self.catalog = catalog
        self.polling = polling or PollingConfig()
        self.build_report_path = build_report_path

    async def fetch_build_reports(
        self, artifact: Artifact, destination: Path
    ) -> BuildReports | None:
        """Wait for ``artifact`` to be downloadable and extract it.

        Every attempt downloads and extracts the whole archive again. Failures
        of any kind are logged and retried until the polling timeout.

        Args:
            artifact: Artifact holding the build reports
            destination: Directory to extract the archive into

        Returns:
            Extracted build reports, or None if the timeout was reached

        """
        retry = 0

        async def attempt() -> tuple[PollStatus, BuildReports | None]:
            nonlocal retry
            retry += 1
            try:
                content = await self.catalog.download_artifact(artifact)
                reports = await asyncio.to_thread(
                    extract_build_reports,
                    content,
                    destination,
                    self.build_report_path,
                )
            except Exception:
                logger.error(
                    f"Unable to download artifact {artifact.name} "
                    f"(#{artifact.id}) - retry #{retry}",
                    exc_info=True,
                )
                return ("continue", None)
            return ("success", reports)

        reports = await wait_for(
            attempt,
            initial_delay=self.polling.initial_delay,
            interval=self.polling.interval,
            timeout=self.polling.timeout,
        )

        if reports is None:
            logger.warning(
                f"Artifact {artifact.name} (#{artifact.id}) was not available "
                f"after {retry} attempts and {self.polling.timeout} seconds"
            )
        return reports
