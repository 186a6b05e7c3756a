from __future__ import annotations

import json
from pathlib import Path

from calculator_tools.observability.metrics import MetricsCollector


def test_metrics_jsonl_written(tmp_path: Path):
    m = MetricsCollector(runtime_dir=tmp_path, run_id="r1")
    m.inc("tool_calls", 2)
    m.set("tool_name", "divide")
    with m.timing("tool_latency_ms.divide"):
        pass
    record = m.finalize_record(status="ok")
    path = m.write(record)

    assert path.exists()
    last = path.read_text(encoding="utf-8").strip().splitlines()[-1]
    payload = json.loads(last)
    assert payload["run_id"] == "r1"
    assert payload["status"] == "ok"
    assert payload["tool_name"] == "divide"
    assert payload["counters"]["tool_calls"] == 2
    assert len(payload["timers_ms"]["tool_latency_ms.divide"]) == 1
