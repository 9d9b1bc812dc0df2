"""Run configuration."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class RunConfig(BaseModel):
    """Settings consumed by the browser engine, runners and scheduler."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    concurrency: int = Field(default=3, ge=1, le=10, description="URLs per batch")
    capture_video: bool = Field(default=False, description="Keep a video per URL")
    headless: bool = True
    url_deadline: float = Field(
        default=180.0, gt=0, description="Seconds one URL may take in total"
    )
    batch_pause: float = Field(
        default=2.0, ge=0, description="Seconds to wait between batches"
    )
    navigation_timeout: float = Field(default=45.0, gt=0)
    settle_delay: float = Field(
        default=2.0, ge=0, description="Wait before the failure screenshot"
    )
    output_dir: Path = Path(".")
    summary_endpoint: str | None = None

    @property
    def screenshot_dir(self) -> Path:
        return self.output_dir / "screenshots"

    @property
    def video_dir(self) -> Path:
        return self.output_dir / "videos"

    @property
    def debug_dir(self) -> Path:
        return self.output_dir / "debug_logs"
