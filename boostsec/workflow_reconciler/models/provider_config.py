"""Configuration models for the reconciler bot and the GitHub provider."""

from pydantic import BaseModel, Field


class GitHubConfig(BaseModel):
    """Configuration for the GitHub Actions provider."""

    token: str = Field(..., description="GitHub personal access token or GITHUB_TOKEN")
    owner: str = Field(..., description="Repository owner")
    repo: str = Field(..., description="Repository name")
    base_url: str = Field(
        default="https://api.github.com", description="GitHub API base URL"
    )


class PollingConfig(BaseModel):
    """Timing of artifact download attempts, in seconds."""

    initial_delay: float = Field(default=5, ge=0, description="Delay before first try")
    interval: float = Field(default=30, gt=0, description="Delay between attempts")
    timeout: float = Field(default=300, ge=0, description="Total time to wait")


class BotConfig(BaseModel):
    """Behaviour settings for the reconciler bot."""

    dry_run: bool = Field(
        default=False, description="Log cancel/rerun commands instead of issuing them"
    )
    polling: PollingConfig = Field(
        default_factory=PollingConfig, description="Artifact polling schedule"
    )
    build_report_path: str = Field(
        default="target/build-report.json",
        description="Relative path of the build report inside artifacts",
    )
