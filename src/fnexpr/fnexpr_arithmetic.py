"""Arithmetic operators over the fnexpr numeric lattice.

Every operator accepts every pair of variants.  The result variant is the
larger of the two operand variants in the order integer < double < complex,
except that integer division and integer exponentiation only leave the
integers when the exact result is not integral.
"""

import math
from typing import Callable, Dict, Tuple, Union, cast

from fnexpr.fnexpr_error import FnExprDomainError
from fnexpr.fnexpr_value import (
    FnExprComplex, FnExprDouble, FnExprInteger, FnExprNumber, to_float, wrap_python_number
)


# Bound on the size of an exact integer power so `9^9^9` fails instead of hanging.
MAX_INTEGER_POWER_BITS = 1 << 16


def promotion_rank(value: FnExprNumber) -> int:
    """Return the position of a value's variant in the promotion order."""
    if isinstance(value, FnExprInteger):
        return 0

    if isinstance(value, FnExprDouble):
        return 1

    if isinstance(value, FnExprComplex):
        return 2

    raise TypeError(f"Not an fnexpr number: {type(value).__name__}")


class FnExprArithmetic:
    """Binary and unary operators for fnexpr numbers."""

    def get_operators(self) -> Dict[str, Callable[[FnExprNumber, FnExprNumber], FnExprNumber]]:
        """Return dictionary of binary operator implementations keyed by symbol."""
        return {
            '+': self.add,
            '-': self.subtract,
            '*': self.multiply,
            '/': self.divide,
            '%': self.modulo,
            '^': self.power,
        }

    def negate(self, value: FnExprNumber) -> FnExprNumber:
        """Return the negation of any numeric value."""
        if isinstance(value, FnExprInteger):
            return FnExprInteger(-value.value)

        if isinstance(value, FnExprDouble):
            return FnExprDouble(-value.value)

        if isinstance(value, FnExprComplex):
            return FnExprComplex(-value.real, -value.imag)

        raise TypeError(f"Not an fnexpr number: {type(value).__name__}")

    def add(self, left: FnExprNumber, right: FnExprNumber) -> FnExprNumber:
        """Implement + operation."""
        rank = max(promotion_rank(left), promotion_rank(right))
        if rank == 2:
            a = FnExprComplex.lift(left)
            b = FnExprComplex.lift(right)
            return FnExprComplex(a.real + b.real, a.imag + b.imag)

        x, y = self._real_operands(left, right)
        if rank == 1:
            return FnExprDouble(to_float(x) + to_float(y))

        return FnExprInteger(cast(int, x) + cast(int, y))

    def subtract(self, left: FnExprNumber, right: FnExprNumber) -> FnExprNumber:
        """Implement - operation."""
        rank = max(promotion_rank(left), promotion_rank(right))
        if rank == 2:
            a = FnExprComplex.lift(left)
            b = FnExprComplex.lift(right)
            return FnExprComplex(a.real - b.real, a.imag - b.imag)

        x, y = self._real_operands(left, right)
        if rank == 1:
            return FnExprDouble(to_float(x) - to_float(y))

        return FnExprInteger(cast(int, x) - cast(int, y))

    def multiply(self, left: FnExprNumber, right: FnExprNumber) -> FnExprNumber:
        """Implement * operation."""
        rank = max(promotion_rank(left), promotion_rank(right))
        if rank == 2:
            a = FnExprComplex.lift(left)
            b = FnExprComplex.lift(right)
            return FnExprComplex(
                a.real * b.real - a.imag * b.imag,
                a.real * b.imag + a.imag * b.real
            )

        x, y = self._real_operands(left, right)
        if rank == 1:
            return FnExprDouble(to_float(x) * to_float(y))

        return FnExprInteger(cast(int, x) * cast(int, y))

    def divide(self, left: FnExprNumber, right: FnExprNumber) -> FnExprNumber:
        """
        Implement / operation.

        Integer division stays integer only when the divisor divides exactly.

        Raises:
            FnExprDomainError: If the divisor is zero or has zero magnitude
        """
        rank = max(promotion_rank(left), promotion_rank(right))
        if rank == 2:
            a = FnExprComplex.lift(left)
            b = FnExprComplex.lift(right)
            denominator = b.real * b.real + b.imag * b.imag
            if denominator == 0:
                raise FnExprDomainError(
                    message="Division by zero (complex)",
                    received=f"Divisor: {right.describe()}",
                    expected="A divisor with non-zero magnitude"
                )

            return FnExprComplex(
                (a.real * b.real + a.imag * b.imag) / denominator,
                (a.imag * b.real - a.real * b.imag) / denominator
            )

        x, y = self._real_operands(left, right)
        if y == 0:
            raise FnExprDomainError(
                message="Division by zero",
                received=f"Divisor: {right.describe()}",
                expected="A non-zero divisor"
            )

        if rank == 1:
            return FnExprDouble(to_float(x) / to_float(y))

        numerator = cast(int, x)
        divisor = cast(int, y)
        if numerator % divisor == 0:
            return FnExprInteger(numerator // divisor)

        try:
            return FnExprDouble(numerator / divisor)

        except OverflowError as e:
            raise FnExprDomainError("Division result is too large to represent") from e

    def modulo(self, left: FnExprNumber, right: FnExprNumber) -> FnExprNumber:
        """
        Implement % operation.

        The remainder is taken against the divisor's magnitude, so it is never negative.

        Raises:
            FnExprDomainError: If either operand is complex or the divisor is zero
        """
        if isinstance(left, FnExprComplex) or isinstance(right, FnExprComplex):
            raise FnExprDomainError(
                message="Modulo operation is not supported for complex numbers",
                received=f"Operands: {left.describe()}, {right.describe()}",
                expected="Integer or double operands"
            )

        if right.value == 0:
            raise FnExprDomainError(
                message="Modulo by zero",
                received=f"Divisor: {right.describe()}",
                expected="A non-zero divisor"
            )

        if isinstance(left, FnExprInteger) and isinstance(right, FnExprInteger):
            return FnExprInteger(left.value % abs(right.value))

        return FnExprDouble(to_float(left.value) % abs(to_float(right.value)))

    def power(self, left: FnExprNumber, right: FnExprNumber) -> FnExprNumber:
        """
        Implement ^ operation.

        Raises:
            FnExprDomainError: If the base is complex, the base is zero with a negative
                exponent, a negative base meets a fractional exponent, or the result overflows
        """
        if isinstance(left, FnExprComplex):
            raise FnExprDomainError(
                message="Exponentiation with a complex base is not supported",
                received=f"Base: {left.describe()}",
                expected="An integer or double base"
            )

        if isinstance(right, FnExprComplex):
            try:
                result = complex(to_float(left.value)) ** right.to_python()

            except (ZeroDivisionError, OverflowError) as e:
                raise FnExprDomainError(
                    message="Complex exponentiation failed",
                    received=f"{left.describe()} ^ {right.describe()}",
                    context=str(e)
                ) from e

            return FnExprComplex(result.real, result.imag)

        if isinstance(left, FnExprInteger) and isinstance(right, FnExprInteger):
            return self._integer_power(left.value, right.value)

        return FnExprDouble(self.real_power(left.value, right.value))

    def _integer_power(self, base: int, exponent: int) -> FnExprNumber:
        """Raise an integer to an integer power, leaving the integers only if needed."""
        if exponent >= 0:
            if abs(base) > 1 and exponent * abs(base).bit_length() > MAX_INTEGER_POWER_BITS:
                raise FnExprDomainError(
                    message="Integer exponentiation result is too large",
                    received=self._power_text(base, exponent),
                    suggestion="Use a double base, e.g. 2.0^100, for an approximate result"
                )

            return FnExprInteger(base ** exponent)

        if base == 0:
            raise FnExprDomainError(
                message="Division by zero",
                received=self._power_text(base, exponent),
                context="A zero base with a negative exponent has no value"
            )

        if base == 1:
            return FnExprInteger(1)

        if base == -1:
            return FnExprInteger(-1 if exponent % 2 else 1)

        return FnExprDouble(self.real_power(base, exponent))

    def real_power(self, base: Union[int, float], exponent: Union[int, float]) -> float:
        """Raise a real base to a real power, converting math errors to domain errors."""
        try:
            return math.pow(float(base), float(exponent))

        except OverflowError as e:
            raise FnExprDomainError(
                message="Exponentiation overflow",
                received=self._power_text(base, exponent),
                expected="A result within the double range"
            ) from e

        except ValueError as e:
            if base == 0:
                raise FnExprDomainError(
                    message="Division by zero",
                    received=self._power_text(base, exponent),
                    context="A zero base with a negative exponent has no value"
                ) from e

            raise FnExprDomainError(
                message="Negative base with a fractional exponent",
                received=self._power_text(base, exponent),
                suggestion="Use complex(...) arithmetic or sqrt for roots of negative numbers"
            ) from e

    def _power_text(self, base: Union[int, float], exponent: Union[int, float]) -> str:
        return f"{wrap_python_number(base).describe()} ^ {wrap_python_number(exponent).describe()}"

    def _real_operands(self, left: FnExprNumber, right: FnExprNumber) -> Tuple[Union[int, float], Union[int, float]]:
        """Return the scalar values of two operands already known to be real."""
        if isinstance(left, FnExprComplex) or isinstance(right, FnExprComplex):
            raise TypeError("Complex operands must be lifted, not unpacked as reals")

        return left.value, right.value
