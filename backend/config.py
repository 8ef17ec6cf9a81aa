"""Centralized configuration — all env vars in one place."""

import os
from pathlib import Path


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        self.cors_origins: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
        self.git_sha: str = os.getenv("GIT_SHA", "unknown")
        self.environment: str = os.getenv("ENVIRONMENT", "local")

        # Student data source
        self.student_data_path: Path = Path(os.getenv("STUDENT_DATA_PATH", "student-data/data.csv"))
        self.student_data_encoding: str = os.getenv("STUDENT_DATA_ENCODING", "utf-8-sig")
        self.cache_ttl_seconds: float = float(os.getenv("STUDENT_CACHE_TTL_SECONDS", "300"))
        self.serve_stale_on_error: bool = _as_bool(os.getenv("STUDENT_DATA_SERVE_STALE", "false"))

        # Fixed label reported by the stats endpoint, not derived from the data
        self.cohort_label: str = os.getenv("COHORT_LABEL", "2024.2B")

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def validate(self) -> list[str]:
        """Return list of configuration problems that will break lookups."""
        problems = []
        if not self.student_data_path.is_file():
            problems.append(f"STUDENT_DATA_PATH does not point to a file: {self.student_data_path}")
        if self.cache_ttl_seconds <= 0:
            problems.append("STUDENT_CACHE_TTL_SECONDS must be positive")
        return problems


settings = Settings()
