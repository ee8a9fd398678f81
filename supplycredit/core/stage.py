"""Stage primitives for the supplycredit orchestration runtime."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Protocol

from supplycredit.settings import Settings


class StageCallable(Protocol):
    """Callable protocol for a pipeline stage."""

    def __call__(self, context: "StageContext") -> None:
        """Execute the stage logic."""


@dataclass(slots=True)
class StageContext:
    """Context object passed to every stage run."""

    settings: Settings
    run_id: str
    timestamp: datetime
    workspace: Path

    @property
    def as_of(self) -> date:
        """Business date stamped onto scores computed during the run."""

        return self.timestamp.date()


@dataclass(slots=True, frozen=True)
class StageDefinition:
    """Metadata about a registered stage."""

    name: str
    callable: StageCallable
    description: str
    module: str
    order: int = 100


@dataclass(slots=True, frozen=True)
class StageResult:
    """Outcome of a single stage execution."""

    name: str
    seconds: float
