from .engine import CalculatorEngine, CompoundInterestResult
from .host import ToolCallResult, ToolHost, build_host
from .tools import ToolDescriptor, ToolParameter, ToolRegistry

__all__ = [
    "CalculatorEngine",
    "CompoundInterestResult",
    "ToolCallResult",
    "ToolDescriptor",
    "ToolHost",
    "ToolParameter",
    "ToolRegistry",
    "build_host",
]
