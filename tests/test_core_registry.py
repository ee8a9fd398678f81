from __future__ import annotations

import pytest

from supplycredit.core.registry import StageRegistry
from supplycredit.core.runner import StageRunner
from supplycredit.core.stage import StageContext


def _dummy_stage(context: StageContext) -> None:  # pragma: no cover - simple stub
    del context


def test_registry_prevents_duplicate_registration() -> None:
    registry = StageRegistry()
    registry.register("demo", _dummy_stage)
    with pytest.raises(ValueError):
        registry.register("demo", _dummy_stage)


def test_registry_orders_stages_by_declared_order() -> None:
    registry = StageRegistry()
    registry.register("export", _dummy_stage, order=30)
    registry.register("ingest", _dummy_stage, order=10)
    registry.register("score", _dummy_stage, order=20)

    assert registry.names() == ["ingest", "score", "export"]


def test_stage_runner_resolve_filters_duplicates() -> None:
    registry = StageRegistry()
    registry.register("one", _dummy_stage)
    registry.register("two", _dummy_stage)
    runner = StageRunner(registry)

    assert runner.resolve(["two", "one", "two"]) == ["two", "one"]
    assert runner.resolve(None) == ["one", "two"]

    with pytest.raises(ValueError):
        runner.resolve(["missing"])


def test_stage_runner_reports_results_and_reraises(stage_context) -> None:
    calls = []

    def recording_stage(context: StageContext) -> None:
        calls.append(context.run_id)

    def failing_stage(context: StageContext) -> None:
        raise RuntimeError("boom")

    registry = StageRegistry()
    registry.register("ok", recording_stage)
    registry.register("bad", failing_stage)
    runner = StageRunner(registry)

    results = runner.run(["ok"], stage_context)
    assert [result.name for result in results] == ["ok"]
    assert calls == ["test-run"]

    with pytest.raises(RuntimeError):
        runner.run(["bad"], stage_context)


def test_bootstrap_registers_pipeline_stages() -> None:
    from supplycredit import bootstrap
    from supplycredit.core import registry

    bootstrap()
    assert registry.names()[:3] == ["ingest", "score", "export"]
