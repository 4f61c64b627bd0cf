"""Mathematical built-in functions for fnexpr."""

import cmath
import math
import random
from collections import Counter
from typing import Any, Callable, Dict, List, Union

from fnexpr.fnexpr_arithmetic import FnExprArithmetic
from fnexpr.fnexpr_environment import FnExprMultiArgFunction, UnaryFunction
from fnexpr.fnexpr_error import FnExprDomainError
from fnexpr.fnexpr_value import (
    FnExprComplex, FnExprDouble, FnExprInteger, FnExprNumber, to_float, wrap_python_number
)


# Largest n for which n! still fits in a double.
DEFAULT_FACTORIAL_LIMIT = 170

LANCZOS_G = 7
LANCZOS_COEFFICIENTS = (
    0.99999999999980993,
    676.5203681218851,
    -1259.1392167224028,
    771.32342877765313,
    -176.61502916214059,
    12.507343278686905,
    -0.13857109526572012,
    9.9843695780195716e-6,
    1.5056327351493116e-7,
)


def lanczos_gamma(x: float) -> float:
    """Gamma function by the Lanczos approximation, reflected below 0.5."""
    if x < 0.5:
        return math.pi / (math.sin(math.pi * x) * lanczos_gamma(1 - x))

    z = x - 1
    series = LANCZOS_COEFFICIENTS[0]
    for i in range(1, len(LANCZOS_COEFFICIENTS)):
        series += LANCZOS_COEFFICIENTS[i] / (z + i)

    t = z + LANCZOS_G + 0.5
    return math.sqrt(2 * math.pi) * math.pow(t, z + 0.5) * math.exp(-t) * series


def double_factorial(n: int) -> int:
    """Product of n, n-2, n-4, ... down to 1 or 2; 1 for n <= 0."""
    result = 1
    for i in range(n, 0, -2):
        result *= i

    return result


class FnExprMathFunctions:
    """Mathematical built-in functions for fnexpr."""

    def __init__(self, factorial_limit: int = DEFAULT_FACTORIAL_LIMIT, rng: random.Random | None = None):
        """
        Initialize math functions.

        Args:
            factorial_limit: Largest argument accepted by fact and factorial2
            rng: Random source for random(); a private generator if not given
        """
        self.factorial_limit = factorial_limit
        self.rng = rng if rng is not None else random.Random()
        self.arithmetic = FnExprArithmetic()

    def get_unary_functions(self) -> Dict[str, UnaryFunction]:
        """Return dictionary of single-argument function implementations."""
        return {
            'sqrt': self._builtin_sqrt,
            'ln': self._builtin_ln,
            'exp': self._complex_aware('exp', math.exp, cmath.exp),
            'sin': self._complex_aware('sin', math.sin, cmath.sin),
            'cos': self._complex_aware('cos', math.cos, cmath.cos),
            'tan': self._complex_aware('tan', math.tan, cmath.tan),
            'atan': self._complex_aware('atan', math.atan, cmath.atan),
            'sinh': self._complex_aware('sinh', math.sinh, cmath.sinh),
            'cosh': self._complex_aware('cosh', math.cosh, cmath.cosh),
            'tanh': self._complex_aware('tanh', math.tanh, cmath.tanh),
            'asinh': self._complex_aware('asinh', math.asinh, cmath.asinh),
            'asin': self._builtin_asin,
            'acos': self._builtin_acos,
            'acosh': self._builtin_acosh,
            'atanh': self._builtin_atanh,
            'abs': self._builtin_abs,
            'floor': self._builtin_floor,
            'ceil': self._builtin_ceil,
            'round': self._builtin_round,
            'trunc': self._builtin_trunc,
            'fact': self._builtin_fact,
            'factorial2': self._builtin_factorial2,
            'gamma': self._builtin_gamma,
            'sign': self._builtin_sign,
        }

    def get_multi_arg_functions(self) -> Dict[str, FnExprMultiArgFunction]:
        """Return dictionary of multi-argument functions with their arities."""
        functions = [
            FnExprMultiArgFunction('complex', self._builtin_complex, 2),
            FnExprMultiArgFunction('fraction', self._builtin_fraction, 2),
            FnExprMultiArgFunction('log', self._builtin_log, 2),
            FnExprMultiArgFunction('pow', self._builtin_pow, 2),
            FnExprMultiArgFunction('clamp', self._builtin_clamp, 3),
            FnExprMultiArgFunction('gcd', self._builtin_gcd, 2),
            FnExprMultiArgFunction('lcm', self._builtin_lcm, 2),
            FnExprMultiArgFunction('min', self._builtin_min, -1, min_args=1),
            FnExprMultiArgFunction('max', self._builtin_max, -1, min_args=1),
            FnExprMultiArgFunction('average', self._builtin_average, -1, min_args=1),
            FnExprMultiArgFunction('median', self._builtin_median, -1, min_args=1),
            FnExprMultiArgFunction('mode', self._builtin_mode, -1, min_args=1),
            FnExprMultiArgFunction('stdev', self._builtin_stdev, -1, min_args=2),
            FnExprMultiArgFunction('variance', self._builtin_variance, -1, min_args=2),
            FnExprMultiArgFunction('random', self._builtin_random, 0),
        ]
        return {function.name: function for function in functions}

    def get_constants(self) -> Dict[str, FnExprNumber]:
        """Return dictionary of built-in constants."""
        return {
            'pi': FnExprDouble(math.pi),
            'e': FnExprDouble(math.e),
            'i': FnExprComplex(0.0, 1.0),
            'phi': FnExprDouble((1 + math.sqrt(5)) / 2),
            'tau': FnExprDouble(math.tau),
        }

    # Single-argument functions
    def _complex_aware(
        self,
        name: str,
        real_fn: Callable[[float], float],
        complex_fn: Callable[[complex], complex]
    ) -> UnaryFunction:
        """Build a function that uses `math` for reals and `cmath` for complex input."""
        def _apply(value: FnExprNumber) -> FnExprNumber:
            if isinstance(value, FnExprComplex):
                result = self._call_math(name, complex_fn, value.to_python())
                return FnExprComplex(result.real, result.imag)

            return FnExprDouble(self._call_math(name, real_fn, value.value))

        return _apply

    def _builtin_sqrt(self, value: FnExprNumber) -> FnExprNumber:
        """Implement sqrt; negative reals give a purely imaginary result."""
        if isinstance(value, FnExprComplex):
            result = cmath.sqrt(value.to_python())
            return FnExprComplex(result.real, result.imag)

        if value.value < 0:
            return FnExprComplex(0.0, self._call_math('sqrt', math.sqrt, -value.value))

        return FnExprDouble(self._call_math('sqrt', math.sqrt, value.value))

    def _builtin_ln(self, value: FnExprNumber) -> FnExprNumber:
        """Implement ln (natural logarithm)."""
        if isinstance(value, FnExprComplex):
            if value.real == 0 and value.imag == 0:
                raise FnExprDomainError(
                    message="Natural logarithm undefined for zero",
                    received=f"ln({value.describe()})"
                )

            result = cmath.log(value.to_python())
            return FnExprComplex(result.real, result.imag)

        if value.value <= 0:
            raise FnExprDomainError(
                message="Natural logarithm undefined for non-positive numbers",
                received=f"ln({value.describe()})",
                expected="A positive argument"
            )

        return FnExprDouble(math.log(value.value))

    def _builtin_asin(self, value: FnExprNumber) -> FnExprNumber:
        """Implement asin."""
        x = self._ensure_real(value, 'asin')
        if x < -1 or x > 1:
            raise FnExprDomainError(
                message="Arcsine domain error: input must be between -1 and 1",
                received=f"asin({value.describe()})"
            )

        return FnExprDouble(math.asin(x))

    def _builtin_acos(self, value: FnExprNumber) -> FnExprNumber:
        """Implement acos."""
        x = self._ensure_real(value, 'acos')
        if x < -1 or x > 1:
            raise FnExprDomainError(
                message="Arccosine domain error: input must be between -1 and 1",
                received=f"acos({value.describe()})"
            )

        return FnExprDouble(math.acos(x))

    def _builtin_acosh(self, value: FnExprNumber) -> FnExprNumber:
        """Implement acosh."""
        x = self._ensure_real(value, 'acosh')
        if x < 1:
            raise FnExprDomainError(
                message="Inverse hyperbolic cosine domain error: input must be >= 1",
                received=f"acosh({value.describe()})"
            )

        return FnExprDouble(self._call_math('acosh', math.acosh, x))

    def _builtin_atanh(self, value: FnExprNumber) -> FnExprNumber:
        """Implement atanh."""
        x = self._ensure_real(value, 'atanh')
        if x <= -1 or x >= 1:
            raise FnExprDomainError(
                message="Inverse hyperbolic tangent domain error: input must be in (-1, 1)",
                received=f"atanh({value.describe()})"
            )

        return FnExprDouble(math.atanh(x))

    def _builtin_abs(self, value: FnExprNumber) -> FnExprNumber:
        """Implement abs; the magnitude of a complex number is a double."""
        if isinstance(value, FnExprComplex):
            return FnExprDouble(math.hypot(value.real, value.imag))

        return wrap_python_number(abs(value.value))

    def _builtin_floor(self, value: FnExprNumber) -> FnExprNumber:
        """Implement floor."""
        x = self._ensure_real(value, 'floor')
        return FnExprInteger(self._call_math('floor', math.floor, x))

    def _builtin_ceil(self, value: FnExprNumber) -> FnExprNumber:
        """Implement ceil."""
        x = self._ensure_real(value, 'ceil')
        return FnExprInteger(self._call_math('ceil', math.ceil, x))

    def _builtin_trunc(self, value: FnExprNumber) -> FnExprNumber:
        """Implement trunc."""
        x = self._ensure_real(value, 'trunc')
        return FnExprInteger(self._call_math('trunc', math.trunc, x))

    def _builtin_round(self, value: FnExprNumber) -> FnExprNumber:
        """Implement round, with halves rounded away from zero."""
        x = self._ensure_real(value, 'round')
        if isinstance(x, int):
            return FnExprInteger(x)

        magnitude = abs(x)
        whole = self._call_math('round', math.floor, magnitude)
        if magnitude - whole >= 0.5:
            whole += 1

        return FnExprInteger(-whole if x < 0 else whole)

    def _builtin_fact(self, value: FnExprNumber) -> FnExprNumber:
        """Implement fact (factorial)."""
        n = self._ensure_factorial_argument(value, 'fact', "Factorial")
        return FnExprInteger(math.factorial(n))

    def _builtin_factorial2(self, value: FnExprNumber) -> FnExprNumber:
        """Implement factorial2 (double factorial)."""
        n = self._ensure_factorial_argument(value, 'factorial2', "Double factorial")
        return FnExprInteger(double_factorial(n))

    def _builtin_gamma(self, value: FnExprNumber) -> FnExprNumber:
        """Implement gamma."""
        x = to_float(self._ensure_real(value, 'gamma'))
        if x <= 0 and x.is_integer():
            raise FnExprDomainError(
                message="Gamma function undefined for zero and negative integers",
                received=f"gamma({value.describe()})"
            )

        return FnExprDouble(self._call_math('gamma', lanczos_gamma, x))

    def _builtin_sign(self, value: FnExprNumber) -> FnExprNumber:
        """Implement sign."""
        x = self._ensure_real(value, 'sign')
        if x > 0:
            return FnExprInteger(1)

        if x < 0:
            return FnExprInteger(-1)

        return FnExprInteger(0)

    # Multi-argument functions
    def _builtin_complex(self, args: List[FnExprNumber]) -> FnExprNumber:
        """Implement complex(real, imag)."""
        real = self._ensure_real(args[0], 'complex')
        imag = self._ensure_real(args[1], 'complex')
        return FnExprComplex(to_float(real), to_float(imag))

    def _builtin_fraction(self, args: List[FnExprNumber]) -> FnExprNumber:
        """Implement fraction(numerator, denominator)."""
        numerator = self._ensure_real(args[0], 'fraction')
        denominator = self._ensure_real(args[1], 'fraction')
        if denominator == 0:
            raise FnExprDomainError(
                message="Division by zero",
                received=f"fraction({args[0].describe()}, {args[1].describe()})",
                expected="A non-zero denominator"
            )

        try:
            return FnExprDouble(numerator / denominator)

        except OverflowError as e:
            raise FnExprDomainError(
                message="Fraction result is too large to represent",
                received=f"fraction({args[0].type_name()}, {args[1].type_name()})"
            ) from e

    def _builtin_log(self, args: List[FnExprNumber]) -> FnExprNumber:
        """Implement log(value, base)."""
        x = self._ensure_real(args[0], 'log')
        base = self._ensure_real(args[1], 'log')
        if x <= 0:
            raise FnExprDomainError(
                message="Logarithm undefined for non-positive numbers",
                received=f"log({args[0].describe()}, {args[1].describe()})",
                expected="A positive value"
            )

        if base <= 0 or base == 1:
            raise FnExprDomainError(
                message="Invalid logarithm base",
                received=f"Base: {args[1].describe()}",
                expected="A positive base other than 1"
            )

        return FnExprDouble(math.log(x) / math.log(base))

    def _builtin_pow(self, args: List[FnExprNumber]) -> FnExprNumber:
        """Implement pow(base, exponent)."""
        base = self._ensure_real(args[0], 'pow')
        exponent = self._ensure_real(args[1], 'pow')
        return FnExprDouble(self.arithmetic.real_power(base, exponent))

    def _builtin_clamp(self, args: List[FnExprNumber]) -> FnExprNumber:
        """Implement clamp(value, min, max)."""
        x, low, high = (self._ensure_real(arg, 'clamp') for arg in args)
        if low > high:
            raise FnExprDomainError(
                message="Minimum value cannot be greater than maximum value",
                received=f"clamp bounds: {args[1].describe()} > {args[2].describe()}"
            )

        return self._wrap_real(min(max(x, low), high), args)

    def _builtin_gcd(self, args: List[FnExprNumber]) -> FnExprNumber:
        """Implement gcd(a, b)."""
        a = self._ensure_integral(args[0], 'gcd')
        b = self._ensure_integral(args[1], 'gcd')
        return FnExprInteger(math.gcd(a, b))

    def _builtin_lcm(self, args: List[FnExprNumber]) -> FnExprNumber:
        """Implement lcm(a, b); zero when either argument is zero."""
        a = abs(self._ensure_integral(args[0], 'lcm'))
        b = abs(self._ensure_integral(args[1], 'lcm'))
        if a == 0 or b == 0:
            return FnExprInteger(0)

        return FnExprInteger(a * b // math.gcd(a, b))

    def _builtin_min(self, args: List[FnExprNumber]) -> FnExprNumber:
        """Implement min."""
        values = [self._ensure_real(arg, 'min') for arg in args]
        return self._wrap_real(min(values), args)

    def _builtin_max(self, args: List[FnExprNumber]) -> FnExprNumber:
        """Implement max."""
        values = [self._ensure_real(arg, 'max') for arg in args]
        return self._wrap_real(max(values), args)

    def _builtin_average(self, args: List[FnExprNumber]) -> FnExprNumber:
        """Implement average (arithmetic mean)."""
        values = [to_float(self._ensure_real(arg, 'average')) for arg in args]
        return FnExprDouble(sum(values) / len(values))

    def _builtin_median(self, args: List[FnExprNumber]) -> FnExprNumber:
        """Implement median."""
        values = sorted(to_float(self._ensure_real(arg, 'median')) for arg in args)
        middle = len(values) // 2
        if len(values) % 2:
            return FnExprDouble(values[middle])

        return FnExprDouble((values[middle - 1] + values[middle]) / 2)

    def _builtin_mode(self, args: List[FnExprNumber]) -> FnExprNumber:
        """Implement mode; ties go to the value seen first."""
        values = [self._ensure_real(arg, 'mode') for arg in args]
        mode = Counter(values).most_common(1)[0][0]
        if isinstance(mode, int):
            return FnExprInteger(mode)

        if mode.is_integer():
            return FnExprInteger(int(mode))

        return FnExprDouble(mode)

    def _builtin_variance(self, args: List[FnExprNumber]) -> FnExprNumber:
        """Implement variance (sample variance)."""
        return FnExprDouble(self._sample_variance(args, 'variance'))

    def _builtin_stdev(self, args: List[FnExprNumber]) -> FnExprNumber:
        """Implement stdev (sample standard deviation)."""
        return FnExprDouble(math.sqrt(self._sample_variance(args, 'stdev')))

    def _builtin_random(self, args: List[FnExprNumber]) -> FnExprNumber:
        """Implement random; a double in [0, 1)."""
        return FnExprDouble(self.rng.random())

    # Helper methods for type checking and conversion
    def _sample_variance(self, args: List[FnExprNumber], function_name: str) -> float:
        """Sample variance with an n - 1 denominator."""
        values = [to_float(self._ensure_real(arg, function_name)) for arg in args]
        mean = sum(values) / len(values)
        return sum((value - mean) ** 2 for value in values) / (len(values) - 1)

    def _wrap_real(self, result: Union[int, float], args: List[FnExprNumber]) -> FnExprNumber:
        """Integer when every argument was an integer, double otherwise."""
        if all(isinstance(arg, FnExprInteger) for arg in args):
            return FnExprInteger(int(result))

        return FnExprDouble(to_float(result))

    def _ensure_real(self, value: FnExprNumber, function_name: str) -> Union[int, float]:
        """Ensure value is a real number (integer or double), raise error if complex."""
        if isinstance(value, FnExprComplex):
            raise FnExprDomainError(
                message=f"Function '{function_name}' does not support complex numbers",
                received=f"Argument: {value.describe()}",
                expected="Integer or double arguments"
            )

        return value.value

    def _ensure_integral(self, value: FnExprNumber, function_name: str) -> int:
        """Ensure value is a real number with no fractional part, return Python int."""
        x = self._ensure_real(value, function_name)
        if isinstance(x, float) and not x.is_integer():
            raise FnExprDomainError(
                message=f"Function '{function_name}' requires integer arguments",
                received=f"Argument: {value.describe()}"
            )

        return int(x)

    def _ensure_factorial_argument(self, value: FnExprNumber, function_name: str, label: str) -> int:
        """Ensure value is a non-negative integer within the factorial limit."""
        x = self._ensure_real(value, function_name)
        if x < 0 or (isinstance(x, float) and not x.is_integer()):
            raise FnExprDomainError(
                message=f"{label} only defined for non-negative integers",
                received=f"{function_name}({value.describe()})"
            )

        n = int(x)
        if n > self.factorial_limit:
            raise FnExprDomainError(
                message=f"{label} input too large (overflow)",
                received=f"{function_name}({value.describe()})",
                expected=f"An argument no greater than {self.factorial_limit}"
            )

        return n

    def _call_math(self, function_name: str, fn: Callable, *args: Union[int, float, complex]) -> Any:
        """Call a math/cmath function, converting its errors to domain errors."""
        try:
            return fn(*args)

        except (ValueError, OverflowError, ZeroDivisionError) as e:
            raise FnExprDomainError(
                message=f"Function '{function_name}' failed: {e}",
                received=f"Arguments: {', '.join(wrap_python_number(arg).describe() for arg in args)}"
            ) from e
