"""Token types and token representation for fnexpr expressions."""

from dataclasses import dataclass
from enum import Enum

from fnexpr.fnexpr_value import FnExprNumber


class FnExprTokenType(Enum):
    """Token types for fnexpr expressions."""
    NUMBER = "NUMBER"
    OPERATOR = "OPERATOR"
    UNARY_MINUS = "UNARY_MINUS"
    FUNCTION = "FUNCTION"
    VARIABLE = "VARIABLE"
    CONSTANT = "CONSTANT"
    LPAREN = "("
    RPAREN = ")"
    COMMA = ","


# Binding strength of each operator symbol; unary minus binds tightest.
OPERATOR_PRECEDENCE = {
    'u-': 5,
    '^': 4,
    '*': 3,
    '/': 3,
    '%': 3,
    '+': 2,
    '-': 2,
}

RIGHT_ASSOCIATIVE_OPERATORS = frozenset({'u-', '^'})


@dataclass(frozen=True)
class FnExprToken:
    """
    Represents a single token in an fnexpr expression.

    `value` holds the originating lexeme.  Number tokens also carry their
    parsed value, and function tokens carry the argument count seen at their
    call site once the converter has closed the call's parentheses.
    """
    type: FnExprTokenType
    value: str
    position: int
    number: FnExprNumber | None = None
    arg_count: int | None = None

    @property
    def is_operator(self) -> bool:
        """True for binary operators and unary minus."""
        return self.type in (FnExprTokenType.OPERATOR, FnExprTokenType.UNARY_MINUS)

    @property
    def precedence(self) -> int:
        """Precedence of an operator token, 0 for anything else."""
        if not self.is_operator:
            return 0

        return OPERATOR_PRECEDENCE.get(self.value, 0)

    @property
    def is_left_associative(self) -> bool:
        """Whether equal-precedence operators group from the left."""
        return self.value not in RIGHT_ASSOCIATIVE_OPERATORS

    def __repr__(self) -> str:
        return f"FnExprToken({self.type.name}, {self.value!r}, pos={self.position})"
