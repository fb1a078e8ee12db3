"""Models for build reports recovered from workflow artifacts."""

from enum import Enum
from pathlib import Path, PurePosixPath

from pydantic import BaseModel, ConfigDict, Field


class TestResultsKind(Enum):
    """Build tool conventions for test result directories.

    Each member holds the conventional report directory, relative to the
    module root, and the number of trailing segments to strip from a matched
    path to get back to that module.
    """

    __test__ = False

    MAVEN_SUREFIRE = ("maven-surefire", PurePosixPath("target/surefire-reports"))
    MAVEN_FAILSAFE = ("maven-failsafe", PurePosixPath("target/failsafe-reports"))
    GRADLE = ("gradle", PurePosixPath("build/test-results/test"))

    def __init__(self, label: str, reports_dir: PurePosixPath) -> None:
        self.label = label
        self.reports_dir = reports_dir

    @property
    def segments_to_strip(self) -> int:
        """Number of parent segments between a report directory and its module."""
        return len(self.reports_dir.parts)


class TestResultsPath(BaseModel):
    """Test results directory classified by build tool."""

    __test__ = False

    model_config = ConfigDict(frozen=True)

    kind: TestResultsKind = Field(..., description="Build tool convention matched")
    path: Path = Field(..., description="Absolute extracted path")

    def module_name(self, destination: Path) -> str:
        """Derive the owning module name relative to ``destination``.

        Reports found at the root of the archive belong to module ``"."``.
        """
        relative = self.path.relative_to(destination.resolve())
        return relative.parents[self.kind.segments_to_strip - 1].as_posix()

    def __lt__(self, other: "TestResultsPath") -> bool:
        return (self.path, self.kind.label) < (other.path, other.kind.label)


class BuildReports(BaseModel):
    """Result of extracting a build reports archive."""

    build_report_path: Path | None = Field(
        default=None, description="Build report file, if the archive had one"
    )
    test_results_paths: list[TestResultsPath] = Field(
        default_factory=list, description="Test results directories, sorted by path"
    )
