"""Core orchestration utilities for the supplycredit runtime."""
from __future__ import annotations

from .registry import StageRegistry, register_stage, registry
from .runner import StageRunner
from .stage import StageContext, StageDefinition, StageResult

__all__ = [
    "StageRegistry",
    "StageRunner",
    "StageContext",
    "StageDefinition",
    "StageResult",
    "register_stage",
    "registry",
]
