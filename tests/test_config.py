from __future__ import annotations

from pathlib import Path

from calculator_tools.config import load_settings


def test_defaults(monkeypatch, tmp_path: Path):
    monkeypatch.chdir(tmp_path)
    for var in ("RUNTIME_DIR", "LOG_LEVEL", "SERVER_NAME", "RESULT_DECIMALS", "WRITE_METRICS"):
        monkeypatch.delenv(var, raising=False)

    settings = load_settings()
    assert settings.runtime_dir == Path("./runtime")
    assert settings.log_level == "INFO"
    assert settings.server_name == "calculator-tools"
    assert settings.result_decimals == 2
    assert settings.write_metrics is True


def test_environment_overrides(monkeypatch, tmp_path: Path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("RUNTIME_DIR", str(tmp_path / "rt"))
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("SERVER_NAME", "finance-tools")
    monkeypatch.setenv("RESULT_DECIMALS", "4")
    monkeypatch.setenv("WRITE_METRICS", "false")

    settings = load_settings()
    assert settings.runtime_dir == tmp_path / "rt"
    assert settings.log_level == "DEBUG"
    assert settings.server_name == "finance-tools"
    assert settings.result_decimals == 4
    assert settings.write_metrics is False
