"""Tests for infix to postfix conversion."""

import pytest

from fnexpr import FnExprConverter, FnExprSyntaxError, FnExprTokenizer, FnExprTokenType


@pytest.fixture
def convert():
    """Tokenize and convert an expression, returning the postfix tokens."""
    tokenizer = FnExprTokenizer(
        functions=frozenset({'sin', 'max', 'min', 'random', 'complex'}),
        constants=frozenset({'pi', 'i'})
    )
    converter = FnExprConverter()

    def _convert(expression: str):
        return converter.to_postfix(tokenizer.tokenize(expression))

    return _convert


class TestPostfixOrder:
    """Test operator ordering in the postfix output."""

    @pytest.mark.parametrize("expression,expected", [
        ("1 + 2", ["1", "2", "+"]),
        ("1 + 2 * 3", ["1", "2", "3", "*", "+"]),
        ("(1 + 2) * 3", ["1", "2", "+", "3", "*"]),
        ("10 - 2 - 3", ["10", "2", "-", "3", "-"]),
        ("2 ^ 3 ^ 2", ["2", "3", "2", "^", "^"]),
        ("-2 ^ 2", ["2", "u-", "2", "^"]),
        ("2 ^ -1", ["2", "1", "u-", "^"]),
        ("--3", ["3", "u-", "u-"]),
        ("2x", ["2", "x", "*"]),
        ("sin(pi)", ["pi", "sin"]),
        ("max(1, 2 + 3)", ["1", "2", "3", "+", "max"]),
        ("max(min(1, 2), 3)", ["1", "2", "min", "3", "max"]),
    ])
    def test_postfix_order(self, convert, expression, expected):
        """Test shunting-yard output order."""
        assert [token.value for token in convert(expression)] == expected

    def test_parentheses_are_removed(self, convert):
        """Test that no structural tokens reach the output."""
        postfix = convert("((1 + 2)) * max(3, (4))")
        structural = {FnExprTokenType.LPAREN, FnExprTokenType.RPAREN, FnExprTokenType.COMMA}
        assert not any(token.type in structural for token in postfix)


class TestCallSiteArity:
    """Test argument counts recorded on function tokens."""

    def function_tokens(self, postfix):
        return [token for token in postfix if token.type == FnExprTokenType.FUNCTION]

    @pytest.mark.parametrize("expression,expected", [
        ("random()", 0),
        ("sin(1)", 1),
        ("max(1, 2)", 2),
        ("max(1, 2, 3, 4, 5)", 5),
        ("max((1 + 2), -3)", 2),
        ("complex(1, 2)", 2),
    ])
    def test_arg_count(self, convert, expression, expected):
        """Test that a call's argument count is the number of comma-separated arguments."""
        functions = self.function_tokens(convert(expression))
        assert len(functions) == 1
        assert functions[0].arg_count == expected

    def test_same_function_different_counts(self, convert):
        """Test that each call site carries its own count."""
        functions = self.function_tokens(convert("max(1, 2) + max(1, 2, 3)"))
        assert [token.arg_count for token in functions] == [2, 3]

    def test_nested_calls(self, convert):
        """Test that commas inside a nested call do not count for the outer call."""
        functions = self.function_tokens(convert("max(min(1, 2, 3), 4)"))
        assert [(token.value, token.arg_count) for token in functions] == [("min", 3), ("max", 2)]

    def test_function_without_parentheses(self, convert):
        """Test that a function used without a call has no recorded count."""
        functions = self.function_tokens(convert("sin pi"))
        assert functions[0].arg_count is None


class TestConverterErrors:
    """Test mismatched parentheses and commas."""

    @pytest.mark.parametrize("expression", [
        "(5 + 2",
        "((1)",
        "max(1, 2",
    ])
    def test_unclosed_parenthesis(self, convert, expression):
        """Test that an unclosed '(' is reported."""
        with pytest.raises(FnExprSyntaxError, match="Mismatched parentheses"):
            convert(expression)

    @pytest.mark.parametrize("expression", [
        "5 + 2)",
        "(1))",
        ")",
    ])
    def test_unopened_parenthesis(self, convert, expression):
        """Test that an unmatched ')' is reported."""
        with pytest.raises(FnExprSyntaxError, match="Mismatched parentheses"):
            convert(expression)

    @pytest.mark.parametrize("expression", [
        "1, 2",
        "1 + 2, 3",
    ])
    def test_comma_outside_call(self, convert, expression):
        """Test that a top-level comma is reported."""
        with pytest.raises(FnExprSyntaxError, match="Mismatched comma or parentheses"):
            convert(expression)
