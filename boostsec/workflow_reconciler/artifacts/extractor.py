"""Safely extract build reports archives and classify test results."""

import io
import logging
import shutil
import zipfile
from pathlib import Path, PurePosixPath
from typing import BinaryIO

from boostsec.workflow_reconciler.errors import (
    ArchiveExtractionError,
    UnsafeArchiveEntryError,
)
from boostsec.workflow_reconciler.models.build_reports import (
    BuildReports,
    TestResultsKind,
    TestResultsPath,
)

logger = logging.getLogger(__name__)

DEFAULT_BUILD_REPORT_PATH = PurePosixPath("target/build-report.json")


def resolve_entry_path(destination: Path, entry_name: str) -> Path:
    """Resolve an archive entry against the destination directory.

    Raises:
        UnsafeArchiveEntryError: If the entry escapes ``destination``

    """
    root = destination.resolve()
    target = (root / entry_name).resolve()

    if not target.is_relative_to(root):
        raise UnsafeArchiveEntryError(
            f"Entry is outside of the target dir: {entry_name}"
        )

    return target


def classify_test_results(destination: Path, path: Path) -> TestResultsPath | None:
    """Find the test results directory ``path`` lives in, if any.

    Directory entries match the build tool convention by their trailing
    segments; file entries are attributed to the report directory holding them.
    """
    parts = path.relative_to(destination).parts

    for kind in TestResultsKind:
        convention = kind.reports_dir.parts
        size = len(convention)
        for end in range(size, len(parts) + 1):
            if parts[end - size : end] == convention:
                return TestResultsPath(
                    kind=kind, path=destination.joinpath(*parts[:end])
                )

    return None


def extract_build_reports(
    archive: BinaryIO | bytes,
    destination: Path,
    build_report_path: PurePosixPath = DEFAULT_BUILD_REPORT_PATH,
) -> BuildReports:
    """Extract a zip archive into ``destination`` and locate its reports.

    Args:
        archive: Zip archive content or a binary stream over it
        destination: Directory receiving the archive entries
        build_report_path: Relative path of the build report file

    Returns:
        The build report path and the classified test results directories

    Raises:
        UnsafeArchiveEntryError: If an entry resolves outside ``destination``
        ArchiveExtractionError: If an entry cannot be written
        zipfile.BadZipFile: If the archive is corrupt

    """
    if isinstance(archive, bytes):
        archive = io.BytesIO(archive)
    elif not archive.seekable():
        archive = io.BytesIO(archive.read())

    root = destination.resolve()
    report_parts = build_report_path.parts
    found_report: Path | None = None
    test_results: set[TestResultsPath] = set()

    with zipfile.ZipFile(archive) as zip_file:
        for entry in zip_file.infolist():
            path = resolve_entry_path(root, entry.filename)

            if path.parts[-len(report_parts) :] == report_parts:
                found_report = path
            else:
                classified = classify_test_results(root, path)
                if classified is not None:
                    test_results.add(classified)

            if entry.is_dir():
                _make_directory(path)
            else:
                _make_directory(path.parent)
                _write_entry(zip_file, entry, path)

    logger.debug(
        f"Extracted archive to {root}: build report {found_report}, "
        f"{len(test_results)} test results directories"
    )
    return BuildReports(
        build_report_path=found_report,
        test_results_paths=sorted(test_results),
    )


def _make_directory(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ArchiveExtractionError(f"Failed to create directory {path}: {e}") from e


def _write_entry(
    zip_file: zipfile.ZipFile, entry: zipfile.ZipInfo, path: Path
) -> None:
    try:
        with zip_file.open(entry) as source, path.open("wb") as target:
            shutil.copyfileobj(source, target)
    except OSError as e:
        raise ArchiveExtractionError(f"Failed to write file {path}: {e}") from e
