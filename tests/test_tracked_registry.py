from __future__ import annotations

import logging
from pathlib import Path

import pytest

from calculator_tools.engine import CalculatorEngine
from calculator_tools.errors import DivisionByZero, UnknownTool
from calculator_tools.observability.metrics import MetricsCollector
from calculator_tools.tools import (
    ToolDescriptor,
    ToolParameter,
    ToolRegistry,
    TrackedToolRegistry,
    register_calculator_tools,
)


def _tracked(tmp_path: Path, *, extra: bool = False) -> TrackedToolRegistry:
    base = ToolRegistry()
    register_calculator_tools(base, CalculatorEngine())
    if extra:
        def explode(v: float) -> float:
            raise RuntimeError("boom")

        base.register(
            ToolDescriptor(name="explode", description="Always fails", parameters=(ToolParameter(name="v"),)),
            explode,
        )
    base.seal()
    metrics = MetricsCollector(runtime_dir=tmp_path, run_id="r1")
    return TrackedToolRegistry(base, metrics=metrics, server_name="test-server")


def test_success_is_counted_and_logged(tmp_path: Path, caplog):
    tracked = _tracked(tmp_path)
    with caplog.at_level(logging.INFO, logger="calculator_tools.tools.tracked_registry"):
        assert tracked.invoke("multiply", {"a": 6, "b": 7}, call_id="c-1") == pytest.approx(42.0)

    assert tracked.metrics.counters["tool_calls"] == 1
    assert "tool_errors" not in tracked.metrics.counters
    assert len(tracked.metrics.timers_ms["tool_latency_ms.multiply"]) == 1

    records = [r for r in caplog.records if getattr(r, "event", None) == "tool_result"]
    assert len(records) == 1
    assert records[0].call_id == "c-1"
    assert records[0].tool_name == "multiply"
    assert records[0].server_name == "test-server"


def test_tool_error_is_reraised_unchanged(tmp_path: Path, caplog):
    tracked = _tracked(tmp_path)
    with caplog.at_level(logging.INFO, logger="calculator_tools.tools.tracked_registry"):
        with pytest.raises(DivisionByZero):
            tracked.call("divide", a=1, b=0)
        with pytest.raises(UnknownTool):
            tracked.invoke("modulo", {})

    counters = tracked.metrics.counters
    assert counters["tool_calls"] == 2
    assert counters["tool_errors"] == 2
    assert counters["tool_errors.division_by_zero"] == 1
    assert counters["tool_errors.unknown_tool"] == 1

    errors = [r for r in caplog.records if getattr(r, "event", None) == "tool_error"]
    assert [r.levelno for r in errors] == [logging.WARNING, logging.WARNING]
    assert errors[0].data["parameter"] == "b"


def test_unexpected_error_logged_with_traceback(tmp_path: Path, caplog):
    tracked = _tracked(tmp_path, extra=True)
    with caplog.at_level(logging.INFO, logger="calculator_tools.tools.tracked_registry"):
        with pytest.raises(RuntimeError, match="boom"):
            tracked.invoke("explode", {"v": 1})

    assert tracked.metrics.counters["tool_errors.unexpected"] == 1
    errors = [r for r in caplog.records if getattr(r, "event", None) == "tool_error"]
    assert errors[-1].levelno == logging.ERROR
    assert errors[-1].exc_info is not None


def test_passthrough_discovery(tmp_path: Path):
    tracked = _tracked(tmp_path)
    assert tracked.sealed
    assert [d.name for d in tracked.list()] == [d.name for d in tracked.base_registry.list()]
    assert tracked.get("sqrt").parameter_names() == ["x"]


def test_latency_recorded_for_failures_and_without_metrics(tmp_path: Path, caplog):
    tracked = _tracked(tmp_path)
    with pytest.raises(DivisionByZero):
        tracked.invoke("divide", {"a": 1, "b": 0})
    assert len(tracked.metrics.timers_ms["tool_latency_ms.divide"]) == 1

    bare = TrackedToolRegistry(tracked.base_registry)
    with caplog.at_level(logging.INFO, logger="calculator_tools.tools.tracked_registry"):
        assert bare.call("add", a=1, b=2) == pytest.approx(3.0)
    record = next(r for r in caplog.records if getattr(r, "event", None) == "tool_result")
    assert record.data["latency_ms"] >= 0
