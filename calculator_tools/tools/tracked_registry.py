"""
Instrumented tool registry.
Times, counts and logs every invocation, then hands back the result or
re-raises the original exception unchanged.
"""

import logging
import uuid
from typing import Any, Mapping

from calculator_tools.errors import ToolError
from calculator_tools.observability.logger import LogContext, get_logger, log_event
from calculator_tools.observability.metrics import MetricsCollector, Timer

from .registry import ToolDescriptor, ToolRegistry


logger = get_logger(__name__)


class TrackedToolRegistry:
    """
    Wrapper around ToolRegistry that records every tool call.

    Tool errors (bad arguments, unknown tool) are expected outcomes and are
    logged at WARNING. Anything else is a bug in an operation and is logged at
    ERROR with its traceback.
    """

    def __init__(self, base_registry: ToolRegistry, metrics: MetricsCollector | None = None, server_name: str | None = None):
        self.base_registry = base_registry
        self.metrics = metrics
        self.server_name = server_name

    @property
    def sealed(self) -> bool:
        return self.base_registry.sealed

    def list(self) -> list[ToolDescriptor]:
        return self.base_registry.list()

    def get(self, name: str) -> ToolDescriptor:
        return self.base_registry.get(name)

    def invoke(self, name: str, arguments: Mapping[str, Any] | None = None, *, call_id: str | None = None) -> Any:
        """
        Invoke a tool with tracking.

        Args:
            name: Tool name (e.g., "divide")
            arguments: Tool arguments keyed by parameter name
            call_id: Correlation id; generated when omitted

        Returns:
            Whatever the bound operation returns

        Raises:
            ToolError subclasses from the registry or the operation, unchanged
        """
        context = LogContext(call_id=call_id or str(uuid.uuid4()), tool_name=name, server_name=self.server_name)
        args = dict(arguments or {})
        if self.metrics is not None:
            self.metrics.inc("tool_calls")

        timer = Timer(self.metrics, f"tool_latency_ms.{name}")
        try:
            with timer:
                result = self.base_registry.invoke(name, args)
        except ToolError as e:
            if self.metrics is not None:
                self.metrics.inc("tool_errors")
                self.metrics.inc(f"tool_errors.{e.code}")
            log_event(
                logger,
                level=logging.WARNING,
                message="Tool call rejected",
                event="tool_error",
                context=context,
                data={
                    "code": e.code,
                    "error": str(e),
                    "parameter": getattr(e, "parameter", None),
                    "arguments": args,
                    "latency_ms": round(timer.elapsed_ms, 3),
                },
            )
            raise
        except Exception as e:
            if self.metrics is not None:
                self.metrics.inc("tool_errors")
                self.metrics.inc("tool_errors.unexpected")
            log_event(
                logger,
                level=logging.ERROR,
                message="Tool call failed unexpectedly",
                event="tool_error",
                context=context,
                data={
                    "code": "unexpected",
                    "error_type": type(e).__name__,
                    "error": str(e),
                    "arguments": args,
                    "latency_ms": round(timer.elapsed_ms, 3),
                },
                exc_info=True,
            )
            raise

        log_event(
            logger,
            level=logging.INFO,
            message="Tool call completed",
            event="tool_result",
            context=context,
            data={"arguments": args, "latency_ms": round(timer.elapsed_ms, 3)},
        )
        return result

    def call(self, name: str, **kwargs: Any) -> Any:
        return self.invoke(name, kwargs)

