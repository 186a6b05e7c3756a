from .calculator import calculator_descriptors, register_calculator_tools
from .registry import ParamType, RegistryPhase, ToolDescriptor, ToolParameter, ToolRegistry
from .tracked_registry import TrackedToolRegistry

__all__ = [
    "ParamType",
    "RegistryPhase",
    "ToolDescriptor",
    "ToolParameter",
    "ToolRegistry",
    "TrackedToolRegistry",
    "calculator_descriptors",
    "register_calculator_tools",
]
