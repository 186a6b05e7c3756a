"""
Error taxonomy for calculator tools.
Every failure a caller can correct carries a stable ``code`` so hosts can
branch on the kind of error instead of parsing messages.
"""

from __future__ import annotations


class ToolError(Exception):
    code = "tool_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class InvalidArgument(ToolError, ValueError):
    """A tool argument is outside its domain or has the wrong shape."""

    code = "invalid_argument"

    def __init__(self, parameter: str, message: str) -> None:
        super().__init__(message)
        self.parameter = parameter


class DivisionByZero(InvalidArgument):
    code = "division_by_zero"

    def __init__(self, parameter: str = "b") -> None:
        super().__init__(parameter, "Cannot divide by zero")


class InvalidDomain(InvalidArgument):
    code = "invalid_domain"


class UnknownTool(ToolError, KeyError):
    code = "unknown_tool"

    def __init__(self, tool_name: str) -> None:
        super().__init__(f"Unknown tool: {tool_name}")
        self.tool_name = tool_name


class DuplicateName(ToolError):
    code = "duplicate_name"

    def __init__(self, tool_name: str) -> None:
        super().__init__(f"Tool already registered: {tool_name}")
        self.tool_name = tool_name


class RegistrySealed(ToolError):
    code = "registry_sealed"

    def __init__(self, tool_name: str) -> None:
        super().__init__(f"Registry is sealed; cannot register '{tool_name}'")
        self.tool_name = tool_name


class RegistryNotSealed(ToolError):
    code = "registry_not_sealed"

    def __init__(self, tool_name: str | None = None) -> None:
        if tool_name:
            message = f"Registry is still building; cannot invoke '{tool_name}' before seal()"
        else:
            message = "Registry is still building; call seal() before serving tools"
        super().__init__(message)
        self.tool_name = tool_name
