"""Postfix stack evaluator for fnexpr expressions."""

import logging
from typing import List, cast

from fnexpr.fnexpr_arithmetic import FnExprArithmetic
from fnexpr.fnexpr_environment import FnExprEnvironment
from fnexpr.fnexpr_error import (
    ErrorMessageBuilder, FnExprDomainError, FnExprNameError, FnExprStructuralError
)
from fnexpr.fnexpr_token import FnExprToken, FnExprTokenType
from fnexpr.fnexpr_value import FnExprNumber


class FnExprEvaluator:
    """
    Evaluates postfix token lists against an environment.

    Operands are pushed onto a single value stack; operators and functions pop
    their arguments and push their result.  Exactly one value must remain.
    """

    def __init__(self, arithmetic: FnExprArithmetic | None = None):
        """
        Initialize evaluator.

        Args:
            arithmetic: Operator implementations; a default instance if not given
        """
        self.arithmetic = arithmetic if arithmetic is not None else FnExprArithmetic()
        self._operators = self.arithmetic.get_operators()
        self._logger = logging.getLogger("FnExprEvaluator")

    def evaluate(self, postfix: List[FnExprToken], environment: FnExprEnvironment) -> FnExprNumber:
        """
        Evaluate tokens in postfix order.

        Args:
            postfix: Tokens as produced by the converter
            environment: Variables, constants and functions to resolve names against

        Returns:
            The single value the expression reduces to

        Raises:
            FnExprNameError: For undefined variables and unknown functions
            FnExprStructuralError: If the stack runs short or does not end with one value
            FnExprDomainError: If an operation's preconditions are not met
        """
        stack: List[FnExprNumber] = []

        for token in postfix:
            token_type = token.type

            if token_type == FnExprTokenType.NUMBER:
                stack.append(cast(FnExprNumber, token.number))
                continue

            if token_type == FnExprTokenType.CONSTANT:
                stack.append(environment.lookup_constant(token.value))
                continue

            if token_type == FnExprTokenType.VARIABLE:
                stack.append(environment.lookup_variable(token.value))
                continue

            if token_type == FnExprTokenType.UNARY_MINUS:
                if not stack:
                    raise FnExprStructuralError(
                        message="Invalid expression for unary minus",
                        position=token.position,
                        expected="An operand after '-'"
                    )

                stack.append(self.arithmetic.negate(stack.pop()))
                continue

            if token_type == FnExprTokenType.OPERATOR:
                self._apply_operator(token, stack)
                continue

            if token_type == FnExprTokenType.FUNCTION:
                self._apply_function(token, stack, environment)
                continue

            raise FnExprStructuralError(
                message=f"Unexpected token in postfix expression: {token.value}",
                position=token.position
            )

        self._logger.debug("Evaluated %d postfix tokens, %d value(s) on the stack", len(postfix), len(stack))

        if len(stack) != 1:
            raise FnExprStructuralError(
                message="The expression is malformed",
                received=f"{len(stack)} values left after evaluation",
                expected="Exactly one value",
                suggestion="Check for missing operators or operands, e.g. '5 + * 2' or '(1, 2)'"
            )

        return stack[0]

    def _apply_operator(self, token: FnExprToken, stack: List[FnExprNumber]) -> None:
        """Pop two operands, apply a binary operator and push the result."""
        if len(stack) < 2:
            raise FnExprStructuralError(
                message=f"Invalid expression for operator {token.value}",
                position=token.position,
                expected=f"Two operands around '{token.value}'"
            )

        operator = self._operators.get(token.value)
        if operator is None:
            raise FnExprStructuralError(
                message=f"Unknown operator: {token.value}",
                position=token.position
            )

        right = stack.pop()
        left = stack.pop()
        stack.append(operator(left, right))

    def _apply_function(self, token: FnExprToken, stack: List[FnExprNumber], environment: FnExprEnvironment) -> None:
        """Pop a function's arguments, call it and push the result."""
        name = token.value

        multi_arg = environment.multi_arg_functions.get(name)
        if multi_arg is not None:
            if multi_arg.is_variadic:
                arg_count = token.arg_count if token.arg_count is not None else 0

            else:
                arg_count = multi_arg.arity

            if len(stack) < arg_count:
                raise FnExprStructuralError(
                    message=f"Not enough arguments for function {name}",
                    position=token.position,
                    received=f"{len(stack)} available",
                    expected=f"{arg_count} argument(s)",
                    example=ErrorMessageBuilder.create_function_example(name)
                )

            if arg_count < multi_arg.min_args:
                raise FnExprDomainError(
                    message=f"Function '{name}' requires at least {multi_arg.min_args} "
                        f"argument{'s' if multi_arg.min_args != 1 else ''}, got {arg_count}",
                    position=token.position,
                    example=ErrorMessageBuilder.create_function_example(name)
                )

            args = stack[len(stack) - arg_count:]
            del stack[len(stack) - arg_count:]
            stack.append(multi_arg(args))
            return

        unary = environment.unary_functions.get(name)
        if unary is not None:
            if not stack:
                raise FnExprStructuralError(
                    message=f"Not enough arguments for function {name}",
                    position=token.position,
                    expected="1 argument"
                )

            stack.append(unary(stack.pop()))
            return

        raise FnExprNameError(
            message=f"Unknown function: {name}",
            position=token.position,
            suggestion=ErrorMessageBuilder.format_suggestions(name, environment.function_names())
        )
