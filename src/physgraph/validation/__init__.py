"""Equation-level dimensional validation."""

from .dimensional import EquationChecker, check_equation

__all__ = ["EquationChecker", "check_equation"]
