"""Sequential stage runner used by the supplycredit CLI."""
from __future__ import annotations

import logging
import time
from typing import Iterable, List, Sequence

from .registry import StageRegistry
from .stage import StageContext, StageResult

logger = logging.getLogger(__name__)


class StageRunner:
    """Execute registered stages one after another."""

    def __init__(self, registry: StageRegistry) -> None:
        self._registry = registry

    def available(self) -> List[str]:
        return self._registry.names()

    def run(self, stages: Sequence[str], context: StageContext) -> List[StageResult]:
        """Run each stage listed in *stages* with the provided context."""

        results: List[StageResult] = []
        for name in stages:
            definition = self._registry.get(name)
            stage_logger = logging.getLogger(definition.module)
            stage_logger.info(
                "Starting stage '%s' (run_id=%s, as_of=%s)",
                definition.name,
                context.run_id,
                context.as_of.isoformat(),
            )
            started = time.perf_counter()
            try:
                definition.callable(context)
            except Exception:
                stage_logger.exception("Stage '%s' failed", definition.name)
                raise
            elapsed = time.perf_counter() - started
            stage_logger.info("Completed stage '%s' in %.2fs", definition.name, elapsed)
            results.append(StageResult(name=definition.name, seconds=elapsed))
        return results

    def resolve(self, requested: Iterable[str] | None) -> List[str]:
        """Return a validated, de-duplicated list of stage names."""

        if not requested:
            return self.available()
        requested = list(requested)
        missing = [name for name in requested if name not in self._registry]
        if missing:
            raise ValueError(f"Unknown stages requested: {', '.join(missing)}")
        result: List[str] = []
        for name in requested:
            if name not in result:
                result.append(name)
        return result
