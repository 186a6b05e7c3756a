from __future__ import annotations

import json
import uuid
from dataclasses import replace
from pathlib import Path
from typing import Any, List, Optional

import typer
from rich.console import Console
from rich.table import Table

from calculator_tools.config import Settings, load_settings
from calculator_tools.errors import UnknownTool
from calculator_tools.host import ToolCallResult, build_host, input_schema, startup_banner
from calculator_tools.observability.logger import setup_logging
from calculator_tools.observability.metrics import MetricsCollector


app = typer.Typer(add_completion=False, help="Calculator operations exposed as callable tools.")
console = Console()


def _settings(log_level: str | None, runtime_dir: Path | None) -> Settings:
    settings = load_settings()
    if log_level:
        settings = replace(settings, log_level=log_level)
    if runtime_dir:
        settings = replace(settings, runtime_dir=runtime_dir)
    setup_logging(runtime_dir=settings.runtime_dir, level=settings.log_level)
    return settings


def _parse_assignments(items: list[str]) -> dict[str, Any]:
    args: dict[str, Any] = {}
    for item in items:
        key, sep, raw = item.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected KEY=VALUE, got '{item}'")
        try:
            args[key] = json.loads(raw)
        except json.JSONDecodeError:
            # left as a string; the registry rejects it with the parameter name
            args[key] = raw
    return args


def _tools_table(rows: list[dict[str, Any]]) -> Table:
    t = Table(title="Available tools")
    t.add_column("name", style="bold", no_wrap=True)
    t.add_column("parameters")
    t.add_column("description")
    for row in rows:
        schema = row["inputSchema"]
        params = ", ".join(f"{k}: {v['type']}" for k, v in schema["properties"].items())
        t.add_row(row["name"], params, row["description"])
    return t


def _print_result(result: ToolCallResult) -> None:
    if result.ok:
        console.print(result.text)
        return
    err = result.error
    detail = f" (parameter: {err.parameter})" if err and err.parameter else ""
    console.print(f"[red]{result.text}{detail}[/red]")


LogLevelOpt = typer.Option(None, "--log-level", help="INFO or DEBUG")
RuntimeDirOpt = typer.Option(None, "--runtime-dir", help="Runtime folder for logs/metrics")


@app.command()
def tools(
    log_level: Optional[str] = LogLevelOpt,
    runtime_dir: Optional[Path] = RuntimeDirOpt,
):
    """List every registered tool."""
    settings = _settings(log_level, runtime_dir)
    host = build_host(settings)
    console.print(_tools_table(host.list_tools()))


@app.command()
def describe(
    name: str = typer.Argument(..., help="Tool name, e.g. calculateCompoundInterest"),
    log_level: Optional[str] = LogLevelOpt,
    runtime_dir: Optional[Path] = RuntimeDirOpt,
):
    """Print the JSON input schema of one tool."""
    settings = _settings(log_level, runtime_dir)
    host = build_host(settings)
    try:
        descriptor = host.registry.get(name)
    except UnknownTool as e:
        console.print(f"[red]Error ({e.code}): {e}[/red]")
        raise typer.Exit(code=1)
    console.print_json(
        data={"name": descriptor.name, "description": descriptor.description, "inputSchema": input_schema(descriptor)}
    )


@app.command()
def call(
    name: str = typer.Argument(..., help="Tool name, e.g. divide"),
    assignments: Optional[List[str]] = typer.Argument(None, help="Arguments as KEY=VALUE, e.g. a=6 b=3"),
    as_json: bool = typer.Option(False, "--json", help="Print the full structured result"),
    log_level: Optional[str] = LogLevelOpt,
    runtime_dir: Optional[Path] = RuntimeDirOpt,
):
    """Call one tool and print its result."""
    settings = _settings(log_level, runtime_dir)
    args = _parse_assignments(assignments or [])

    run_id = str(uuid.uuid4())
    metrics = MetricsCollector(runtime_dir=settings.runtime_dir, run_id=run_id)
    host = build_host(settings, metrics=metrics)
    result = host.call_tool(name, args, call_id=run_id)

    if as_json:
        console.print_json(result.model_dump_json())
    else:
        _print_result(result)

    if settings.write_metrics:
        metrics.set("tool_name", name)
        metrics.set("error_code", result.error.code if result.error else None)
        metrics.write(metrics.finalize_record(status="ok" if result.ok else "error"))

    if not result.ok:
        raise typer.Exit(code=1)


@app.command()
def banner(
    log_level: Optional[str] = LogLevelOpt,
    runtime_dir: Optional[Path] = RuntimeDirOpt,
):
    """Print the startup banner an embedding host would show."""
    settings = _settings(log_level, runtime_dir)
    console.print(startup_banner(build_host(settings)), markup=False, highlight=False)


if __name__ == "__main__":
    app()
