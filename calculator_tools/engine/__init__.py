from .calculator import CalculatorEngine, CompoundInterestResult

__all__ = ["CalculatorEngine", "CompoundInterestResult"]
