"""fnexpr: arithmetic expression evaluator over integers, doubles and complex numbers."""

# Main API
from fnexpr.fnexpr import FnExpr

# Exceptions (for error handling)
from fnexpr.fnexpr_error import (
    FnExprError, FnExprSyntaxError, FnExprNameError, FnExprDomainError, FnExprStructuralError,
    ErrorMessageBuilder
)

# Value types
from fnexpr.fnexpr_value import (
    FnExprValue, FnExprInteger, FnExprDouble, FnExprComplex, FnExprNumber, wrap_python_number
)

# Lower-level components (for advanced usage)
from fnexpr.fnexpr_token import FnExprToken, FnExprTokenType
from fnexpr.fnexpr_tokenizer import FnExprTokenizer
from fnexpr.fnexpr_converter import FnExprConverter
from fnexpr.fnexpr_evaluator import FnExprEvaluator
from fnexpr.fnexpr_environment import FnExprEnvironment, FnExprMultiArgFunction
from fnexpr.fnexpr_arithmetic import FnExprArithmetic
from fnexpr.fnexpr_math import FnExprMathFunctions


__all__ = [
    # Main API
    "FnExpr",

    # Exceptions
    "FnExprError", "FnExprSyntaxError", "FnExprNameError", "FnExprDomainError", "FnExprStructuralError",
    "ErrorMessageBuilder",

    # Value types
    "FnExprValue", "FnExprInteger", "FnExprDouble", "FnExprComplex", "FnExprNumber", "wrap_python_number",

    # Lower-level components
    "FnExprToken", "FnExprTokenType", "FnExprTokenizer", "FnExprConverter", "FnExprEvaluator",
    "FnExprEnvironment", "FnExprMultiArgFunction", "FnExprArithmetic", "FnExprMathFunctions"
]
