"""Environment-driven configuration for supplycredit."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(slots=True)
class Settings:
    """Runtime settings loaded from environment variables."""

    data_dir: Path
    output_dir: Path
    sqlite_path: Path
    scoring_config: Path
    sources_manifest: Path
    log_level: str

    @classmethod
    def load(cls) -> "Settings":
        """Load settings from environment variables with sensible defaults."""

        data_dir = Path(os.getenv("SUPPLYCREDIT_DATA_DIR", "data"))
        output_dir = Path(os.getenv("SUPPLYCREDIT_OUTPUT_DIR", "artifacts"))
        sqlite_path = Path(os.getenv("SUPPLYCREDIT_DB_PATH", "supplycredit.sqlite"))
        log_level = os.getenv("LOG_LEVEL", "INFO")
        scoring_config = Path(
            os.getenv("SUPPLYCREDIT_SCORING_CONFIG", "config/scoring.yaml")
        )
        sources_manifest = Path(
            os.getenv("SUPPLYCREDIT_SOURCES", "config/sources.yaml")
        )
        return cls(
            data_dir=data_dir,
            output_dir=output_dir,
            sqlite_path=sqlite_path,
            scoring_config=scoring_config,
            sources_manifest=sources_manifest,
            log_level=log_level,
        )

    def ensure_directories(self) -> None:
        """Create directories required for the runtime to operate."""

        for path in {self.data_dir, self.output_dir, self.sqlite_path.parent}:
            if not path.exists():
                path.mkdir(parents=True, exist_ok=True)
