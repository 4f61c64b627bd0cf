"""fnexpr numeric values - immutable Integer, Double and Complex variants."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Union

from fnexpr.fnexpr_error import FnExprDomainError


@dataclass(frozen=True)
class FnExprValue(ABC):
    """
    Abstract base class for all fnexpr numeric values.

    All values are immutable.  Equality compares the variant and its scalar
    parts exactly, so `FnExprInteger(4) != FnExprDouble(4.0)` and callers that
    need a tolerance must apply it themselves.
    """

    @abstractmethod
    def to_python(self) -> Union[int, float, complex]:
        """Convert to the matching Python number."""

    @abstractmethod
    def type_name(self) -> str:
        """Return the variant name for error messages."""

    @abstractmethod
    def describe(self) -> str:
        """Describe the value in canonical text form."""

    def __str__(self) -> str:
        return self.describe()


@dataclass(frozen=True)
class FnExprInteger(FnExprValue):
    """Represents integer values."""
    value: int

    def to_python(self) -> int:
        return self.value

    def type_name(self) -> str:
        return "integer"

    def describe(self) -> str:
        return integer_to_decimal(self.value)


@dataclass(frozen=True)
class FnExprDouble(FnExprValue):
    """Represents floating-point values."""
    value: float

    def to_python(self) -> float:
        return self.value

    def type_name(self) -> str:
        return "double"

    def describe(self) -> str:
        return repr(float(self.value))


@dataclass(frozen=True)
class FnExprComplex(FnExprValue):
    """
    Represents complex values as a (real, imaginary) pair of floats.

    A complex value never collapses to a double, even with a zero imaginary
    part; only its text form drops the zero component.
    """
    real: float
    imag: float

    def to_python(self) -> complex:
        return complex(self.real, self.imag)

    def type_name(self) -> str:
        return "complex"

    def describe(self) -> str:
        real = repr(float(self.real))
        if self.imag == 0:
            return real

        if self.real == 0:
            return f"{float(self.imag)!r}i"

        if self.imag < 0:
            return f"{real} - {-float(self.imag)!r}i"

        return f"{real} + {float(self.imag)!r}i"

    @classmethod
    def lift(cls, value: 'FnExprNumber') -> 'FnExprComplex':
        """Lift any numeric value into the complex plane as (value, 0)."""
        if isinstance(value, FnExprComplex):
            return value

        if isinstance(value, (FnExprInteger, FnExprDouble)):
            return cls(to_float(value.value), 0.0)

        raise TypeError(f"Cannot convert {type(value).__name__} to FnExprComplex")


# Digits handled per str()/int() call; Python caps single conversions at 4300 digits by default.
DECIMAL_CHUNK_DIGITS = 1000


def integer_to_decimal(value: int) -> str:
    """Render an integer of any size in decimal."""
    chunk_base = 10 ** DECIMAL_CHUNK_DIGITS
    if abs(value) < chunk_base:
        return str(value)

    remaining = abs(value)
    chunks = []
    while remaining:
        remaining, chunk = divmod(remaining, chunk_base)
        chunks.append(chunk)

    head = str(chunks.pop())
    tail = "".join(str(chunk).zfill(DECIMAL_CHUNK_DIGITS) for chunk in reversed(chunks))
    return ("-" if value < 0 else "") + head + tail


def decimal_to_integer(digits: str) -> int:
    """Parse a string of decimal digits of any length."""
    value = 0
    for start in range(0, len(digits), DECIMAL_CHUNK_DIGITS):
        chunk = digits[start:start + DECIMAL_CHUNK_DIGITS]
        value = value * 10 ** len(chunk) + int(chunk)

    return value


# Closed union of every numeric variant, ordered by promotion rank.
FnExprNumber = Union[FnExprInteger, FnExprDouble, FnExprComplex]


def wrap_python_number(result: Union[int, float, complex]) -> FnExprNumber:
    """Wrap a Python number in the fnexpr variant that matches its type."""
    # bool is an int subclass; treat it as an integer
    if isinstance(result, int):
        return FnExprInteger(int(result))

    if isinstance(result, float):
        return FnExprDouble(result)

    if isinstance(result, complex):
        return FnExprComplex(result.real, result.imag)

    raise TypeError(f"Unexpected numeric type: {type(result).__name__}")


def to_float(value: Union[int, float]) -> float:
    """
    Convert a real scalar to a float.

    Raises:
        FnExprDomainError: If an integer is too large for the double range
    """
    try:
        return float(value)

    except OverflowError as e:
        raise FnExprDomainError(
            message="Integer is too large to represent as a double",
            received=f"An integer of {abs(int(value)).bit_length()} bits",
            expected="An integer within the double range (about 1.8e308)"
        ) from e
