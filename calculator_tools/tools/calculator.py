from __future__ import annotations

from calculator_tools.engine import CalculatorEngine

from .registry import ParamType, ToolDescriptor, ToolParameter, ToolRegistry


def _number(name: str, description: str, *, keyword: str | None = None) -> ToolParameter:
    return ToolParameter(name=name, type=ParamType.NUMBER, description=description, keyword=keyword)


def _integer(name: str, description: str, *, keyword: str | None = None) -> ToolParameter:
    return ToolParameter(name=name, type=ParamType.INTEGER, description=description, keyword=keyword)


def calculator_descriptors() -> list[ToolDescriptor]:
    """Descriptors for every calculator tool, in the order they are exposed."""
    return [
        ToolDescriptor(
            name="add",
            description="Add two numbers together",
            parameters=(_number("a", "First addend"), _number("b", "Second addend")),
        ),
        ToolDescriptor(
            name="subtract",
            description="Subtract the second number from the first",
            parameters=(_number("a", "Minuend"), _number("b", "Subtrahend")),
        ),
        ToolDescriptor(
            name="multiply",
            description="Multiply two numbers",
            parameters=(_number("a", "First factor"), _number("b", "Second factor")),
        ),
        ToolDescriptor(
            name="divide",
            description="Divide the first number by the second",
            parameters=(_number("a", "Dividend"), _number("b", "Divisor; must not be zero")),
        ),
        ToolDescriptor(
            name="sqrt",
            description="Calculate the square root of a number",
            parameters=(_number("x", "Non-negative number"),),
        ),
        ToolDescriptor(
            name="power",
            description="Calculate a number raised to a power",
            parameters=(_number("base", "Base"), _number("exp", "Exponent")),
        ),
        ToolDescriptor(
            name="calculatePercentage",
            description=(
                "Calculate a percentage of a number "
                "(e.g., pct=15, value=100 returns 15)"
            ),
            parameters=(_number("pct", "Percentage to take"), _number("value", "Number to take it of")),
        ),
        ToolDescriptor(
            name="calculateCompoundInterest",
            description=(
                "Calculate compound interest given principal, annual rate (as percentage), "
                "years, and compounding frequency per year"
            ),
            parameters=(
                _number("principal", "Initial amount; must be positive"),
                _number("annualRate", "Annual interest rate in percent; must not be negative", keyword="annual_rate"),
                _integer("years", "Number of years; must be positive"),
                _integer(
                    "compoundingFrequency",
                    "Compounding periods per year (12 = monthly); must be positive",
                    keyword="compounding_frequency",
                ),
            ),
        ),
    ]


def register_calculator_tools(registry: ToolRegistry, engine: CalculatorEngine) -> None:
    operations = {
        "add": engine.add,
        "subtract": engine.subtract,
        "multiply": engine.multiply,
        "divide": engine.divide,
        "sqrt": engine.sqrt,
        "power": engine.power,
        "calculatePercentage": engine.calculate_percentage,
        "calculateCompoundInterest": engine.calculate_compound_interest,
    }
    for descriptor in calculator_descriptors():
        registry.register(descriptor, operations[descriptor.name])
