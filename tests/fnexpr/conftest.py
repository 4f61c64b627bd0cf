"""Shared fixtures and utilities for fnexpr tests."""

import random

import pytest
from typing import Type

from fnexpr import FnExpr, FnExprComplex, FnExprNumber


@pytest.fixture
def fnexpr():
    """Create a fresh FnExpr instance for each test."""
    return FnExpr()


@pytest.fixture
def fnexpr_custom():
    """Factory for FnExpr instances with custom configuration."""
    def _create_fnexpr(factorial_limit: int = 170, seed: int | None = None) -> FnExpr:
        rng = random.Random(seed) if seed is not None else None
        return FnExpr(factorial_limit=factorial_limit, rng=rng)
    return _create_fnexpr


class FnExprTestHelpers:
    """Helper utilities for fnexpr testing."""

    @staticmethod
    def assert_evaluates_to(fnexpr: FnExpr, expression: str, expected: str) -> None:
        """Assert that expression evaluates to the expected canonical text."""
        result = fnexpr.evaluate_and_format(expression)
        assert result == expected, f"Expected '{expected}' for '{expression}', got '{result}'"

    @staticmethod
    def assert_value_type(fnexpr: FnExpr, expression: str, expected_type: Type[FnExprNumber]) -> FnExprNumber:
        """Assert that expression evaluates to a value of the expected variant."""
        result = fnexpr.evaluate(expression)
        assert isinstance(result, expected_type), (
            f"Expected {expected_type.__name__} for '{expression}', got {result!r}"
        )
        return result

    @staticmethod
    def assert_approx(fnexpr: FnExpr, expression: str, expected: float, rel: float = 1e-9) -> None:
        """Assert that a real-valued expression is approximately the expected number."""
        result = fnexpr.evaluate(expression)
        assert not isinstance(result, FnExprComplex), f"Expected a real result, got {result!r}"
        assert result.value == pytest.approx(expected, rel=rel)

    @staticmethod
    def assert_complex_approx(fnexpr: FnExpr, expression: str, expected: complex, abs_tol: float = 1e-9) -> None:
        """Assert that an expression is a complex value close to the expected number."""
        result = fnexpr.evaluate(expression)
        assert isinstance(result, FnExprComplex), f"Expected a complex result, got {result!r}"
        assert result.real == pytest.approx(expected.real, abs=abs_tol)
        assert result.imag == pytest.approx(expected.imag, abs=abs_tol)


@pytest.fixture
def helpers():
    """Provide test helper utilities."""
    return FnExprTestHelpers
