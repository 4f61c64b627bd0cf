"""Infix to postfix conversion for fnexpr token lists (shunting yard)."""

from dataclasses import dataclass, replace
from typing import List

from fnexpr.fnexpr_error import FnExprSyntaxError
from fnexpr.fnexpr_token import FnExprToken, FnExprTokenType


@dataclass
class _ParenFrame:
    """Tracks one open parenthesis while converting."""
    is_call: bool
    commas: int = 0
    has_content: bool = False

    def arg_count(self) -> int:
        """Number of arguments written between this call's parentheses."""
        if not self.has_content:
            return 0

        return self.commas + 1


class FnExprConverter:
    """
    Converts infix token lists to postfix order.

    Besides reordering, the converter records how many arguments each
    function call was written with.  When the closing parenthesis of a call
    moves the function token to the output, the emitted token carries that
    count in `arg_count`, so variadic functions know how many stack values
    belong to them at that call site.
    """

    def to_postfix(self, tokens: List[FnExprToken]) -> List[FnExprToken]:
        """
        Convert tokens in infix order to postfix order.

        Args:
            tokens: Tokens as produced by the tokenizer

        Returns:
            Tokens in postfix order

        Raises:
            FnExprSyntaxError: If parentheses or commas are mismatched
        """
        output: List[FnExprToken] = []
        operator_stack: List[FnExprToken] = []
        frames: List[_ParenFrame] = []

        for token in tokens:
            token_type = token.type

            if token_type not in (FnExprTokenType.COMMA, FnExprTokenType.RPAREN) and frames:
                frames[-1].has_content = True

            if token_type in (FnExprTokenType.NUMBER, FnExprTokenType.VARIABLE, FnExprTokenType.CONSTANT):
                output.append(token)
                continue

            if token_type == FnExprTokenType.FUNCTION:
                operator_stack.append(token)
                continue

            if token_type == FnExprTokenType.COMMA:
                while operator_stack and operator_stack[-1].type != FnExprTokenType.LPAREN:
                    output.append(operator_stack.pop())

                if not operator_stack:
                    raise FnExprSyntaxError(
                        message="Mismatched comma or parentheses",
                        position=token.position,
                        received="',' outside of a function's argument list",
                        expected="Commas only between function arguments",
                        example="Correct: max(1, 2)\nIncorrect: 1, 2"
                    )

                frames[-1].commas += 1
                continue

            if token.is_operator:
                while operator_stack and operator_stack[-1].is_operator:
                    top = operator_stack[-1]
                    if top.precedence > token.precedence or (
                        top.precedence == token.precedence and token.is_left_associative
                    ):
                        output.append(operator_stack.pop())
                        continue

                    break

                operator_stack.append(token)
                continue

            if token_type == FnExprTokenType.LPAREN:
                is_call = bool(operator_stack) and operator_stack[-1].type == FnExprTokenType.FUNCTION
                frames.append(_ParenFrame(is_call=is_call))
                operator_stack.append(token)
                continue

            if token_type == FnExprTokenType.RPAREN:
                while operator_stack and operator_stack[-1].type != FnExprTokenType.LPAREN:
                    output.append(operator_stack.pop())

                if not operator_stack:
                    raise FnExprSyntaxError(
                        message="Mismatched parentheses",
                        position=token.position,
                        received="')' without a matching '('",
                        suggestion="Remove the extra ')' or add the missing '('"
                    )

                operator_stack.pop()
                frame = frames.pop()

                if operator_stack and operator_stack[-1].type == FnExprTokenType.FUNCTION:
                    function_token = operator_stack.pop()
                    if frame.is_call:
                        function_token = replace(function_token, arg_count=frame.arg_count())

                    output.append(function_token)

                continue

        while operator_stack:
            token = operator_stack.pop()
            if token.type == FnExprTokenType.LPAREN:
                raise FnExprSyntaxError(
                    message="Mismatched parentheses",
                    position=token.position,
                    received="'(' that is never closed",
                    suggestion="Add the missing ')'"
                )

            output.append(token)

        return output
