"""Tests for the FnExpr interpreter API, assignment and variables."""

import logging

import pytest

from fnexpr import FnExpr, FnExprDomainError, FnExprDouble, FnExprInteger, FnExprNameError, FnExprSyntaxError


class TestAssignment:
    """Test `name = expr` assignment."""

    def test_assignment_returns_value(self, fnexpr):
        """Test that an assignment both binds and yields its value."""
        assert fnexpr.evaluate("x = 5") == FnExprInteger(5)
        assert fnexpr.get_variable("x") == FnExprInteger(5)

    def test_assigned_variable_is_usable(self, fnexpr):
        """Test that later expressions see the assigned value."""
        fnexpr.evaluate("x = 10")
        assert fnexpr.evaluate_and_format("x * 3") == "30"

    def test_reassignment(self, fnexpr):
        """Test that a variable can be reassigned from its own value."""
        fnexpr.evaluate("y = 10")
        fnexpr.evaluate("y = y + 5")
        assert fnexpr.evaluate_and_format("y") == "15"

    @pytest.mark.parametrize("expression,name", [
        ("x=5", "x"),
        ("   total   =   5", "total"),
        ("a1 = 5", "a1"),
        ("X = 5", "X"),
    ])
    def test_assignment_spacing_and_names(self, fnexpr, expression, name):
        """Test the accepted assignment forms."""
        fnexpr.evaluate(expression)
        assert fnexpr.get_variable(name) == FnExprInteger(5)

    def test_assignment_of_expression(self, fnexpr):
        """Test assigning the result of a full expression."""
        fnexpr.evaluate("z = sqrt(-4) + 1")
        assert fnexpr.evaluate_and_format("z") == "1.0 + 2.0i"

    def test_failed_assignment_does_not_bind(self, fnexpr):
        """Test that a failing right-hand side leaves the variable undefined."""
        with pytest.raises(FnExprDomainError):
            fnexpr.evaluate("x = 1/0")

        assert fnexpr.get_variable("x") is None
        with pytest.raises(FnExprNameError):
            fnexpr.evaluate("x")

    def test_failed_reassignment_keeps_old_value(self, fnexpr):
        """Test that a failing reassignment leaves the previous value in place."""
        fnexpr.evaluate("x = 5")
        with pytest.raises(FnExprDomainError):
            fnexpr.evaluate("x = ln(0)")

        assert fnexpr.get_variable("x") == FnExprInteger(5)

    def test_invalid_assignment_target(self, fnexpr):
        """Test that a non-identifier target is not an assignment."""
        with pytest.raises(FnExprSyntaxError, match="Invalid character: ="):
            fnexpr.evaluate("2 = 3")


class TestVariableApi:
    """Test the programmatic variable accessors."""

    def test_set_and_get(self, fnexpr):
        """Test setting a variable from Python."""
        fnexpr.set_variable("rate", FnExprDouble(2.5))
        assert fnexpr.get_variable("rate") == FnExprDouble(2.5)
        assert fnexpr.evaluate_and_format("2rate") == "5.0"

    def test_get_missing(self, fnexpr):
        """Test that a missing variable reads as None."""
        assert fnexpr.get_variable("missing") is None

    def test_variables_view(self, fnexpr):
        """Test the read-only view of the variable map."""
        fnexpr.evaluate("a = 1")
        fnexpr.evaluate("b = 2.5")
        view = fnexpr.variables
        assert dict(view) == {"a": FnExprInteger(1), "b": FnExprDouble(2.5)}

        with pytest.raises(TypeError):
            view["c"] = FnExprInteger(3)  # type: ignore[index]

    def test_variables_view_is_live(self, fnexpr):
        """Test that the view reflects later assignments."""
        view = fnexpr.variables
        fnexpr.evaluate("n = 4")
        assert view["n"] == FnExprInteger(4)

    def test_delete_variable(self, fnexpr):
        """Test removing a single variable."""
        fnexpr.evaluate("x = 1")
        assert fnexpr.delete_variable("x") is True
        assert fnexpr.delete_variable("x") is False
        assert "x" not in fnexpr.variables

    def test_clear_variables(self, fnexpr):
        """Test removing every variable."""
        fnexpr.evaluate("x = 1")
        fnexpr.evaluate("y = 2")
        fnexpr.clear_variables()
        assert len(fnexpr.variables) == 0

    def test_instances_are_independent(self):
        """Test that variables are not shared between instances."""
        first = FnExpr()
        second = FnExpr()
        first.evaluate("x = 1")
        assert second.get_variable("x") is None


class TestInterpreterApi:
    """Test the rest of the public interface."""

    def test_eval_alias(self, fnexpr):
        """Test that eval is the same operation as evaluate."""
        assert fnexpr.eval("2 + 2") == FnExprInteger(4)

    def test_function_names(self, fnexpr):
        """Test the listing of built-in function names."""
        names = fnexpr.function_names()
        assert names == sorted(names)
        for name in ("sqrt", "ln", "gamma", "max", "stdev", "random", "complex"):
            assert name in names

    def test_evaluate_and_format(self, fnexpr):
        """Test canonical text output for each variant."""
        assert fnexpr.evaluate_and_format("(10 + 5) * 2") == "30"
        assert fnexpr.evaluate_and_format("5 / 2") == "2.5"
        assert fnexpr.evaluate_and_format("complex(2, 3) + complex(4, 5)") == "6.0 + 8.0i"

    def test_debug_logging(self, fnexpr, caplog):
        """Test that assignments and evaluations are logged at debug level."""
        caplog.set_level(logging.DEBUG, logger="FnExpr")
        fnexpr.evaluate("x = 2")
        fnexpr.evaluate("x + 1")
        assert "Assigned x = 2" in caplog.text
        assert "'x + 1' -> 3" in caplog.text
        assert all(record.levelno == logging.DEBUG for record in caplog.records)
