from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict

from calculator_tools.errors import DivisionByZero, InvalidArgument, InvalidDomain


class CompoundInterestResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    principal: float
    final_amount: float
    total_interest: float
    years: int
    annual_rate: float

    def summary(self, decimals: int = 2) -> str:
        d = max(0, int(decimals))
        return (
            "Compound Interest Calculation:\n"
            f"Principal: ${self.principal:.{d}f}\n"
            f"Annual Rate: {self.annual_rate:.{d}f}%\n"
            f"Years: {self.years}\n"
            f"Final Amount: ${self.final_amount:.{d}f}\n"
            f"Total Interest: ${self.total_interest:.{d}f}"
        )


class CalculatorEngine:
    """
    Stateless numeric operations exposed as tools.

    Each method validates its inputs before computing and raises a
    ``ToolError`` subclass naming the offending parameter; no method keeps
    state between calls, so one engine can serve any number of threads.
    """

    def add(self, a: float, b: float) -> float:
        return a + b

    def subtract(self, a: float, b: float) -> float:
        return a - b

    def multiply(self, a: float, b: float) -> float:
        return a * b

    def divide(self, a: float, b: float) -> float:
        if b == 0:
            raise DivisionByZero("b")
        return a / b

    def sqrt(self, x: float) -> float:
        if math.isnan(x):
            raise InvalidDomain("x", "Cannot calculate square root of NaN")
        if x < 0:
            raise InvalidDomain("x", "Cannot calculate square root of negative number")
        return math.sqrt(x)

    def power(self, base: float, exp: float) -> float:
        try:
            return math.pow(base, exp)
        except ValueError:
            # negative base with fractional exponent, or zero to a negative power
            raise InvalidDomain("base", f"{base} ** {exp} is not a real number") from None
        except OverflowError:
            raise InvalidArgument("exp", f"{base} ** {exp} is too large to represent") from None

    def calculate_percentage(self, pct: float, value: float) -> float:
        # pct=15, value=100 -> 15.0
        return (pct / 100) * value

    def calculate_compound_interest(
        self,
        principal: float,
        annual_rate: float,
        years: int,
        compounding_frequency: int,
    ) -> CompoundInterestResult:
        if not principal > 0:
            raise InvalidArgument("principal", "Principal must be positive")
        if not math.isfinite(principal):
            raise InvalidArgument("principal", "Principal must be a finite number")
        if not annual_rate >= 0:
            raise InvalidArgument("annualRate", "Annual rate cannot be negative")
        if not math.isfinite(annual_rate):
            raise InvalidArgument("annualRate", "Annual rate must be a finite number")
        if years <= 0:
            raise InvalidArgument("years", "Years must be positive")
        if compounding_frequency <= 0:
            raise InvalidArgument("compoundingFrequency", "Compounding frequency must be positive")

        rate = annual_rate / 100
        try:
            amount = principal * math.pow(1 + rate / compounding_frequency, compounding_frequency * years)
        except OverflowError:
            raise InvalidArgument("years", "Final amount is too large to represent") from None
        if not math.isfinite(amount):
            raise InvalidArgument("years", "Final amount is too large to represent")
        return CompoundInterestResult(
            principal=principal,
            final_amount=amount,
            total_interest=amount - principal,
            years=years,
            annual_rate=annual_rate,
        )
