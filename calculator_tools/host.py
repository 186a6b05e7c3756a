"""
Tool host surface.

``ToolHost`` is what an external invoker (an LLM tool-use loop, an MCP server,
a test harness) talks to: ``list_tools()`` for discovery and ``call_tool()``
for execution. Transport and framing stay with the invoker. Failures come back
as a tagged ``ToolCallResult`` instead of an exception so the caller can branch
on ``error.code`` and retry with corrected arguments.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Callable, Mapping, Sequence

from pydantic import BaseModel

from calculator_tools.config import Settings, load_settings
from calculator_tools.engine import CalculatorEngine
from calculator_tools.errors import RegistryNotSealed, ToolError
from calculator_tools.observability.logger import LogContext, get_logger, log_event
from calculator_tools.observability.metrics import MetricsCollector
from calculator_tools.tools import (
    ToolDescriptor,
    ToolRegistry,
    TrackedToolRegistry,
    register_calculator_tools,
)


logger = get_logger(__name__)

ToolProvider = Callable[[ToolRegistry], None]


class ToolErrorInfo(BaseModel):
    code: str
    message: str
    parameter: str | None = None
    tool_name: str | None = None


class ToolCallResult(BaseModel):
    tool_name: str
    ok: bool
    value: Any = None
    text: str = ""
    error: ToolErrorInfo | None = None

    @classmethod
    def failure(cls, tool_name: str, exc: ToolError) -> "ToolCallResult":
        return cls(
            tool_name=tool_name,
            ok=False,
            text=f"Error ({exc.code}): {exc}",
            error=ToolErrorInfo(
                code=exc.code,
                message=str(exc),
                parameter=getattr(exc, "parameter", None),
                tool_name=tool_name,
            ),
        )


def input_schema(descriptor: ToolDescriptor) -> dict[str, Any]:
    properties: dict[str, Any] = {}
    for param in descriptor.parameters:
        prop: dict[str, Any] = {"type": param.type.value}
        if param.description:
            prop["description"] = param.description
        properties[param.name] = prop
    return {
        "type": "object",
        "properties": properties,
        "required": [p.name for p in descriptor.parameters if p.required],
    }


def _format_number(value: float) -> str:
    return format(value, ".12g")


class ToolHost:
    def __init__(
        self,
        registry: ToolRegistry | TrackedToolRegistry,
        *,
        server_name: str = "calculator-tools",
        result_decimals: int = 2,
    ) -> None:
        if not registry.sealed:
            raise RegistryNotSealed()
        self.registry = registry
        self.server_name = server_name
        self.result_decimals = result_decimals

    def descriptors(self) -> list[ToolDescriptor]:
        return self.registry.list()

    def list_tools(self) -> list[dict[str, Any]]:
        return [
            {"name": d.name, "description": d.description, "inputSchema": input_schema(d)}
            for d in self.registry.list()
        ]

    def call_tool(self, name: str, args: Mapping[str, Any] | None = None, *, call_id: str | None = None) -> ToolCallResult:
        arguments = dict(args or {})
        call_id = call_id or str(uuid.uuid4())
        try:
            if isinstance(self.registry, TrackedToolRegistry):
                value = self.registry.invoke(name, arguments, call_id=call_id)
            else:
                value = self.registry.invoke(name, arguments)
        except ToolError as e:
            log_event(
                logger,
                level=logging.INFO,
                message="Tool call returned an error result",
                event="tool_call_rejected",
                context=LogContext(call_id=call_id, tool_name=name, server_name=self.server_name),
                data={"code": e.code, "parameter": getattr(e, "parameter", None)},
            )
            return ToolCallResult.failure(name, e)
        return self._success(name, value)

    def _success(self, name: str, value: Any) -> ToolCallResult:
        if isinstance(value, BaseModel):
            text = value.summary(self.result_decimals) if hasattr(value, "summary") else value.model_dump_json()
            return ToolCallResult(tool_name=name, ok=True, value=value.model_dump(), text=text)
        if isinstance(value, float):
            return ToolCallResult(tool_name=name, ok=True, value=value, text=_format_number(value))
        return ToolCallResult(tool_name=name, ok=True, value=value, text=str(value))


def startup_banner(host: ToolHost) -> str:
    lines = [f"=== {host.server_name} tool server ===", "Available tools:"]
    for d in host.descriptors():
        params = ", ".join(d.parameter_names())
        lines.append(f"  - {d.name}({params}): {d.description}")
    lines.append("Transport is provided by the embedding host (stdio, SSE or HTTP).")
    return "\n".join(lines)


def build_host(
    settings: Settings | None = None,
    *,
    metrics: MetricsCollector | None = None,
    providers: Sequence[ToolProvider] = (),
) -> ToolHost:
    """
    Wire the engine, registry and host together at startup.

    Calculator tools are registered first, then each extra provider gets a
    chance to register its own tools. The registry is sealed before the host
    is returned, so no tool can be added once calls start arriving.
    """
    settings = settings or load_settings()

    engine = CalculatorEngine()
    registry = ToolRegistry()
    register_calculator_tools(registry, engine)
    for provider in providers:
        provider(registry)
    registry.seal()

    tracked = TrackedToolRegistry(registry, metrics=metrics, server_name=settings.server_name)
    host = ToolHost(tracked, server_name=settings.server_name, result_decimals=settings.result_decimals)

    log_event(
        logger,
        level=logging.INFO,
        message="Tool host started",
        event="host_started",
        context=LogContext(server_name=settings.server_name),
        data={"tools": [d.name for d in registry.list()]},
    )
    return host
