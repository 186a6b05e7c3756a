from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Callable, Mapping

from pydantic import BaseModel, ConfigDict

from calculator_tools.errors import (
    DuplicateName,
    InvalidArgument,
    RegistryNotSealed,
    RegistrySealed,
    UnknownTool,
)
from calculator_tools.observability.logger import LogContext, get_logger, log_event


ToolFn = Callable[..., Any]

logger = get_logger(__name__)


class ParamType(StrEnum):
    NUMBER = "number"
    INTEGER = "integer"


class RegistryPhase(StrEnum):
    BUILDING = "building"
    SEALED = "sealed"


class ToolParameter(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    type: ParamType = ParamType.NUMBER
    description: str = ""
    required: bool = True
    # keyword the bound operation receives; defaults to ``name``
    keyword: str | None = None

    @property
    def target(self) -> str:
        return self.keyword or self.name


class ToolDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    parameters: tuple[ToolParameter, ...] = ()

    def parameter_names(self) -> list[str]:
        return [p.name for p in self.parameters]


def _coerce(param: ToolParameter, value: Any) -> float | int:
    # bool is an int subclass but never a valid number argument
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidArgument(
            param.name,
            f"Parameter '{param.name}' must be a {param.type.value}, got {type(value).__name__}",
        )
    if param.type == ParamType.INTEGER:
        if isinstance(value, int):
            return value
        if not math.isfinite(value) or not value.is_integer():
            raise InvalidArgument(param.name, f"Parameter '{param.name}' must be an integer, got {value!r}")
        return int(value)
    try:
        number = float(value)
    except OverflowError:
        raise InvalidArgument(param.name, f"Parameter '{param.name}' is too large") from None
    if not math.isfinite(number):
        raise InvalidArgument(param.name, f"Parameter '{param.name}' must be a finite number, got {value!r}")
    return number


def bind_arguments(descriptor: ToolDescriptor, arguments: Mapping[str, Any]) -> dict[str, Any]:
    """Validate ``arguments`` against the descriptor and map them to call keywords."""
    known = set(descriptor.parameter_names())
    for key in arguments:
        if key not in known:
            raise InvalidArgument(str(key), f"Unexpected parameter '{key}' for tool '{descriptor.name}'")

    kwargs: dict[str, Any] = {}
    for param in descriptor.parameters:
        if param.name not in arguments:
            if param.required:
                raise InvalidArgument(param.name, f"Missing required parameter '{param.name}'")
            continue
        kwargs[param.target] = _coerce(param, arguments[param.name])
    return kwargs


@dataclass
class ToolRegistry:
    tools: dict[str, ToolFn] = field(default_factory=dict)
    descriptors: dict[str, ToolDescriptor] = field(default_factory=dict)
    phase: RegistryPhase = RegistryPhase.BUILDING

    @property
    def sealed(self) -> bool:
        return self.phase == RegistryPhase.SEALED

    def register(self, descriptor: ToolDescriptor, fn: ToolFn) -> None:
        name = descriptor.name
        if self.sealed:
            raise RegistrySealed(name)
        if name in self.descriptors:
            raise DuplicateName(name)
        self.descriptors[name] = descriptor
        self.tools[name] = fn
        log_event(
            logger,
            level=logging.DEBUG,
            message=f"Registered tool {name}",
            event="tool_registered",
            context=LogContext(tool_name=name),
            data={"parameters": descriptor.parameter_names()},
        )

    def seal(self) -> None:
        if self.sealed:
            return
        self.phase = RegistryPhase.SEALED
        log_event(
            logger,
            level=logging.INFO,
            message=f"Tool registry sealed with {len(self.descriptors)} tool(s)",
            event="registry_sealed",
            data={"tools": list(self.descriptors)},
        )

    def list(self) -> list[ToolDescriptor]:
        return list(self.descriptors.values())

    def get(self, name: str) -> ToolDescriptor:
        if name not in self.descriptors:
            raise UnknownTool(name)
        return self.descriptors[name]

    def invoke(self, name: str, arguments: Mapping[str, Any] | None = None) -> Any:
        if not self.sealed:
            raise RegistryNotSealed(name)
        descriptor = self.get(name)
        kwargs = bind_arguments(descriptor, arguments or {})
        return self.tools[name](**kwargs)

    def call(self, name: str, **kwargs: Any) -> Any:
        return self.invoke(name, kwargs)
