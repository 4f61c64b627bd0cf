"""Tokenizer for fnexpr expressions with detailed error messages."""

from typing import AbstractSet, List, Tuple

from fnexpr.fnexpr_error import ErrorMessageBuilder, FnExprSyntaxError
from fnexpr.fnexpr_token import FnExprToken, FnExprTokenType
from fnexpr.fnexpr_value import FnExprDouble, FnExprInteger, decimal_to_integer


DIGITS = '0123456789'
OPERATORS = '+-*/^%'

# Token types that can end an operand, and token types that can start one.
_OPERAND_ENDS = (
    FnExprTokenType.NUMBER,
    FnExprTokenType.VARIABLE,
    FnExprTokenType.CONSTANT,
    FnExprTokenType.RPAREN,
)
_OPERAND_STARTS = (
    FnExprTokenType.VARIABLE,
    FnExprTokenType.CONSTANT,
    FnExprTokenType.FUNCTION,
    FnExprTokenType.LPAREN,
)

# A '-' after any of these starts an operand rather than subtracting.
_UNARY_CONTEXT = (
    FnExprTokenType.OPERATOR,
    FnExprTokenType.UNARY_MINUS,
    FnExprTokenType.LPAREN,
    FnExprTokenType.COMMA,
)


class FnExprTokenizer:
    """
    Tokenizes fnexpr expressions into tokens.

    Identifiers are classified against the known function and constant names;
    anything else is a variable.  Multiplication implied by juxtaposition, as in
    `2x`, `3(x+1)` or `(a+b)(c+d)`, is made explicit with an inserted `*` token.
    """

    def __init__(self, functions: AbstractSet[str], constants: AbstractSet[str]):
        """
        Initialize tokenizer.

        Args:
            functions: Names to classify as function tokens
            constants: Names to classify as constant tokens
        """
        self.functions = functions
        self.constants = constants

    def tokenize(self, expression: str) -> List[FnExprToken]:
        """
        Tokenize an fnexpr expression.

        Args:
            expression: The expression string to tokenize

        Returns:
            List of tokens, including any inserted implicit multiplications

        Raises:
            FnExprSyntaxError: If the expression contains an invalid character
        """
        tokens: List[FnExprToken] = []
        i = 0

        while i < len(expression):
            char = expression[i]

            if char.isspace():
                i += 1
                continue

            if self._is_number_start(expression, i):
                token, length = self._read_number(expression, i)

            elif char.isalpha():
                token, length = self._read_identifier(expression, i)

            elif char == '(':
                token, length = FnExprToken(FnExprTokenType.LPAREN, '(', i), 1

            elif char == ')':
                token, length = FnExprToken(FnExprTokenType.RPAREN, ')', i), 1

            elif char == ',':
                token, length = FnExprToken(FnExprTokenType.COMMA, ',', i), 1

            elif char in OPERATORS:
                if char == '-' and (not tokens or tokens[-1].type in _UNARY_CONTEXT):
                    token = FnExprToken(FnExprTokenType.UNARY_MINUS, 'u-', i)

                else:
                    token = FnExprToken(FnExprTokenType.OPERATOR, char, i)

                length = 1

            else:
                raise FnExprSyntaxError(
                    message=f"Invalid character: {char} at position {i}",
                    position=i,
                    received=f"Character: {char!r} (code {ord(char)})",
                    expected="Digits, letters, operators + - * / ^ %, parentheses or commas",
                    example="Valid: 2x + sin(pi/4)\nInvalid: 2 # 3, x = [1]",
                    context=ErrorMessageBuilder.get_expression_context(expression, i)
                )

            if tokens and tokens[-1].type in _OPERAND_ENDS and token.type in _OPERAND_STARTS:
                tokens.append(FnExprToken(FnExprTokenType.OPERATOR, '*', i))

            tokens.append(token)
            i += length

        return tokens

    def _is_number_start(self, expression: str, pos: int) -> bool:
        """Check if position starts a number: a digit, or '.' followed by a digit."""
        char = expression[pos]
        if char in DIGITS:
            return True

        return char == '.' and pos + 1 < len(expression) and expression[pos + 1] in DIGITS

    def _read_number(self, expression: str, start: int) -> Tuple[FnExprToken, int]:
        """
        Read a numeric literal: digits with at most one decimal point.

        Returns:
            Tuple of (token, length_consumed)
        """
        i = start
        has_decimal = False

        while i < len(expression):
            char = expression[i]
            if char in DIGITS:
                i += 1
                continue

            if char == '.' and not has_decimal:
                has_decimal = True
                i += 1
                continue

            break

        text = expression[start:i]
        if has_decimal:
            number = FnExprDouble(float(text))

        else:
            number = FnExprInteger(decimal_to_integer(text))

        return FnExprToken(FnExprTokenType.NUMBER, text, start, number=number), i - start

    def _read_identifier(self, expression: str, start: int) -> Tuple[FnExprToken, int]:
        """
        Read an identifier and classify it as a function, constant or variable.

        Returns:
            Tuple of (token, length_consumed)
        """
        i = start + 1
        while i < len(expression) and (expression[i].isalpha() or expression[i] in DIGITS):
            i += 1

        name = expression[start:i]
        if name in self.functions:
            token_type = FnExprTokenType.FUNCTION

        elif name in self.constants:
            token_type = FnExprTokenType.CONSTANT

        else:
            token_type = FnExprTokenType.VARIABLE

        return FnExprToken(token_type, name, start), i - start
