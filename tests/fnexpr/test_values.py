"""Tests for the fnexpr numeric value types."""

import dataclasses

import pytest

from fnexpr import FnExprComplex, FnExprDomainError, FnExprDouble, FnExprInteger, wrap_python_number
from fnexpr.fnexpr_value import decimal_to_integer, integer_to_decimal, to_float
from fnexpr.fnexpr_arithmetic import promotion_rank


class TestValueFormatting:
    """Test the canonical text form of each value variant."""

    @pytest.mark.parametrize("value,expected", [
        (FnExprInteger(42), "42"),
        (FnExprInteger(-7), "-7"),
        (FnExprInteger(0), "0"),
        (FnExprDouble(4.0), "4.0"),
        (FnExprDouble(2.5), "2.5"),
        (FnExprDouble(-0.125), "-0.125"),
    ])
    def test_real_formatting(self, value, expected):
        """Test integer and double text forms."""
        assert value.describe() == expected
        assert str(value) == expected

    @pytest.mark.parametrize("value,expected", [
        (FnExprComplex(6.0, 8.0), "6.0 + 8.0i"),
        (FnExprComplex(2.0, -3.0), "2.0 - 3.0i"),
        (FnExprComplex(-1.0, 0.0), "-1.0"),
        (FnExprComplex(0.0, 2.0), "2.0i"),
        (FnExprComplex(0.0, -1.0), "-1.0i"),
        (FnExprComplex(0.0, 0.0), "0.0"),
        (FnExprComplex(1.5, 0.25), "1.5 + 0.25i"),
    ])
    def test_complex_formatting(self, value, expected):
        """Test that complex numbers drop zero components in their text form."""
        assert value.describe() == expected

    def test_type_names(self):
        """Test variant names used in messages."""
        assert FnExprInteger(1).type_name() == "integer"
        assert FnExprDouble(1.0).type_name() == "double"
        assert FnExprComplex(1.0, 1.0).type_name() == "complex"

    def test_to_python(self):
        """Test conversion to Python numbers."""
        assert FnExprInteger(3).to_python() == 3
        assert isinstance(FnExprInteger(3).to_python(), int)
        assert FnExprDouble(0.5).to_python() == 0.5
        assert FnExprComplex(1.0, -2.0).to_python() == complex(1, -2)


class TestValueSemantics:
    """Test equality, immutability and conversions between variants."""

    def test_equality_compares_variant_and_value(self):
        """Test that equal scalars in different variants are not equal."""
        assert FnExprInteger(4) == FnExprInteger(4)
        assert FnExprInteger(4) != FnExprDouble(4.0)
        assert FnExprDouble(4.0) != FnExprComplex(4.0, 0.0)
        assert FnExprComplex(1.0, 2.0) == FnExprComplex(1.0, 2.0)

    def test_values_are_immutable(self):
        """Test that values cannot be modified after construction."""
        value = FnExprInteger(1)
        with pytest.raises(dataclasses.FrozenInstanceError):
            value.value = 2

    def test_values_are_hashable(self):
        """Test that values can be used in sets and as dict keys."""
        assert len({FnExprInteger(1), FnExprInteger(1), FnExprDouble(1.0)}) == 2

    def test_lift_to_complex(self):
        """Test lifting reals into the complex plane."""
        assert FnExprComplex.lift(FnExprInteger(3)) == FnExprComplex(3.0, 0.0)
        assert FnExprComplex.lift(FnExprDouble(-1.5)) == FnExprComplex(-1.5, 0.0)

        value = FnExprComplex(1.0, 1.0)
        assert FnExprComplex.lift(value) is value

    def test_wrap_python_number(self):
        """Test wrapping Python numbers in the matching variant."""
        assert wrap_python_number(3) == FnExprInteger(3)
        assert wrap_python_number(2.5) == FnExprDouble(2.5)
        assert wrap_python_number(1 + 2j) == FnExprComplex(1.0, 2.0)
        assert wrap_python_number(True) == FnExprInteger(1)

    def test_wrap_rejects_non_numbers(self):
        """Test that non-numeric input is rejected."""
        with pytest.raises(TypeError, match="Unexpected numeric type"):
            wrap_python_number("3")  # type: ignore[arg-type]

    def test_promotion_rank_order(self):
        """Test the promotion order integer < double < complex."""
        ranks = [
            promotion_rank(FnExprInteger(1)),
            promotion_rank(FnExprDouble(1.0)),
            promotion_rank(FnExprComplex(1.0, 0.0)),
        ]
        assert ranks == sorted(ranks)
        assert len(set(ranks)) == 3


class TestLargeIntegerConversions:
    """Test conversions of integers outside the usual ranges."""

    def test_to_float(self):
        """Test the guarded conversion to a double."""
        assert to_float(3) == 3.0
        assert to_float(2.5) == 2.5
        with pytest.raises(FnExprDomainError, match="too large to represent as a double"):
            to_float(10 ** 400)

    def test_lift_of_huge_integer(self):
        """Test that lifting an integer beyond the double range is a domain error."""
        with pytest.raises(FnExprDomainError):
            FnExprComplex.lift(FnExprInteger(10 ** 400))

    def test_integer_to_decimal(self):
        """Test decimal rendering across chunk boundaries."""
        assert integer_to_decimal(0) == "0"
        assert integer_to_decimal(-42) == "-42"
        assert integer_to_decimal(10 ** 5000) == "1" + "0" * 5000
        assert integer_to_decimal(-(10 ** 5000) - 7) == "-1" + "0" * 4996 + "0007"
        assert integer_to_decimal(10 ** 1000) == "1" + "0" * 1000

    def test_decimal_to_integer(self):
        """Test parsing digit strings across chunk boundaries."""
        assert decimal_to_integer("0") == 0
        assert decimal_to_integer("007") == 7
        assert decimal_to_integer("1" + "0" * 5000) == 10 ** 5000
        assert decimal_to_integer("9" * 2500) == 10 ** 2500 - 1
