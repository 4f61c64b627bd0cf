"""Main fnexpr interpreter class."""

import logging
import random
import re
from typing import List, Mapping

from fnexpr.fnexpr_converter import FnExprConverter
from fnexpr.fnexpr_environment import FnExprEnvironment
from fnexpr.fnexpr_evaluator import FnExprEvaluator
from fnexpr.fnexpr_math import DEFAULT_FACTORIAL_LIMIT, FnExprMathFunctions
from fnexpr.fnexpr_tokenizer import FnExprTokenizer
from fnexpr.fnexpr_value import FnExprNumber


ASSIGNMENT_PATTERN = re.compile(r'^\s*([A-Za-z][A-Za-z0-9]*)\s*=\s*(.+)', re.DOTALL)


class FnExpr:
    """
    fnexpr calculator: arithmetic over integers, doubles and complex numbers.

    Each instance owns one environment.  Variables assigned with `name = expr`
    persist across calls on the same instance; constants and built-in
    functions are fixed when the instance is created.

    An instance is not safe to share between threads without external locking.
    """

    def __init__(self, factorial_limit: int = DEFAULT_FACTORIAL_LIMIT, rng: random.Random | None = None):
        """
        Initialize fnexpr calculator.

        Args:
            factorial_limit: Largest argument accepted by fact and factorial2
            rng: Random source for random(); seed one for repeatable results
        """
        self.factorial_limit = factorial_limit

        math_functions = FnExprMathFunctions(factorial_limit=factorial_limit, rng=rng)
        self.environment = FnExprEnvironment(
            constants=math_functions.get_constants(),
            unary_functions=math_functions.get_unary_functions(),
            multi_arg_functions=math_functions.get_multi_arg_functions()
        )

        self._tokenizer = FnExprTokenizer(
            functions=frozenset(self.environment.function_names()),
            constants=frozenset(self.environment.constant_names())
        )
        self._converter = FnExprConverter()
        self._evaluator = FnExprEvaluator(math_functions.arithmetic)
        self._logger = logging.getLogger("FnExpr")

    def evaluate(self, expression: str) -> FnExprNumber:
        """
        Evaluate an fnexpr expression or assignment.

        `name = expr` evaluates `expr`, binds the result to `name` and returns it.
        The binding only happens once the right-hand side has evaluated
        successfully.

        Args:
            expression: Expression string to evaluate

        Returns:
            The resulting numeric value

        Raises:
            FnExprSyntaxError: For invalid characters and mismatched parentheses or commas
            FnExprNameError: For undefined variables and unknown functions
            FnExprDomainError: If an operation's preconditions are not met
            FnExprStructuralError: If the expression does not reduce to a single value
        """
        assignment = ASSIGNMENT_PATTERN.match(expression)
        if assignment is not None:
            name, rhs = assignment.group(1), assignment.group(2)
            result = self.evaluate(rhs)
            self.environment.set_variable(name, result)
            self._logger.debug("Assigned %s = %s", name, result.describe())
            return result

        tokens = self._tokenizer.tokenize(expression)
        postfix = self._converter.to_postfix(tokens)
        result = self._evaluator.evaluate(postfix, self.environment)
        self._logger.debug("Evaluated %r -> %s", expression, result.describe())
        return result

    eval = evaluate

    def evaluate_and_format(self, expression: str) -> str:
        """
        Evaluate an fnexpr expression and return the result in canonical text form.

        Args:
            expression: Expression string to evaluate

        Returns:
            String representation of the result, e.g. "30", "2.5" or "6.0 + 8.0i"
        """
        return self.evaluate(expression).describe()

    def set_variable(self, name: str, value: FnExprNumber) -> None:
        """Set a variable, replacing any previous value."""
        self.environment.set_variable(name, value)

    def get_variable(self, name: str) -> FnExprNumber | None:
        """Return a variable's value, or None if it has not been assigned."""
        return self.environment.get_variable(name)

    def delete_variable(self, name: str) -> bool:
        """Remove a variable; returns False if it was not defined."""
        if name not in self.environment.variables:
            return False

        del self.environment.variables[name]
        return True

    def clear_variables(self) -> None:
        """Remove every variable."""
        self.environment.variables.clear()
        self._logger.debug("Cleared all variables")

    @property
    def variables(self) -> Mapping[str, FnExprNumber]:
        """Read-only view of the current variables."""
        return self.environment.read_only_variables()

    def function_names(self) -> List[str]:
        """Return the names of all built-in functions."""
        return self.environment.function_names()

    def constant_names(self) -> List[str]:
        """Return the names of all built-in constants."""
        return self.environment.constant_names()
