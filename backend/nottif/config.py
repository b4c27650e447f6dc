"""
Configuration for Nottif.

Two kinds of configuration live here:
- ``Settings``: process settings read from the environment (host, port, paths).
- ``NottifConfig``: the persisted notification state (webhook URL and cron
  jobs), stored as a JSON document and owned by ``ConfigStore``.
"""
import os
import tempfile
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CronJob(BaseModel):
    """A persisted, user-defined recurring notification."""
    id: str = Field(..., description="Opaque unique identifier, generated on creation")
    message: str = Field(..., description="Message sent on every firing")
    schedule: str = Field(..., description="Standard 5-field cron expression")


class NottifConfig(BaseModel):
    """Persisted notification state (config.json)."""
    webhook_url: str = ""
    cron_jobs: List[CronJob] = Field(default_factory=list)

    def find_job(self, job_id: str) -> Optional[CronJob]:
        """Return the job with the given ID, or None."""
        for job in self.cron_jobs:
            if job.id == job_id:
                return job
        return None


class Settings(BaseSettings):
    """Application settings loaded from environment and .env file."""

    model_config = SettingsConfigDict(
        env_prefix="NOTTIF_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Nottif"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8080

    # Persisted webhook URL + cron jobs
    config_path: Path = Field(
        Path("/data/config.json"),
        description="JSON file holding the webhook URL and cron jobs"
    )

    # Logging (file sink only when set)
    log_dir: Optional[Path] = None

    # Frontend build served at /
    static_dir: Path = Path("static")


def atomic_write_file(file_path: Path, content: str) -> None:
    """
    Atomically write text to a file using a temporary file and rename.
    Readers see either the old content or the new content, never a partial write.

    Raises:
        OSError: if the directory cannot be created or the file cannot be written
    """
    file_path.parent.mkdir(parents=True, exist_ok=True)
    # Temp file in the same directory so the rename stays on one filesystem
    fd, temp_path = tempfile.mkstemp(dir=file_path.parent, prefix=f".{file_path.name}.")
    temp_file = Path(temp_path)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        temp_file.chmod(0o644)
        os.replace(temp_file, file_path)
    except BaseException:
        temp_file.unlink(missing_ok=True)
        raise


# Global settings instance
settings = Settings()
