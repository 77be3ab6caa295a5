"""
Tests for validation decorators.
"""

import numpy as np
import pytest

from colorfx.validators import (
    validate_choices,
    validate_finite,
    validate_non_negative,
    validate_positive,
    validate_range,
    validate_type,
)


class Target:
    """Object whose methods carry the validators under test."""

    @validate_range(0.0, 1.0, "amount")
    def ranged(self, amount=0.5):
        return amount

    @validate_positive("gamma")
    def positive(self, gamma):
        return gamma

    @validate_non_negative("size")
    def non_negative(self, size=None):
        return size

    @validate_finite("value", 2)
    def finite(self, other, value=1.0):
        return value

    @validate_type((int, str), "key")
    def typed(self, key):
        return key

    @validate_choices({"a", "b"}, "mode")
    def choice(self, mode):
        return mode


@pytest.fixture
def target():
    return Target()


class TestValidateRange:
    """Test validate_range."""

    def test_bounds_inclusive(self, target):
        """Test both bounds are accepted."""
        assert target.ranged(0.0) == 0.0
        assert target.ranged(amount=1.0) == 1.0

    def test_outside_raises(self, target):
        """Test values outside the range are rejected."""
        with pytest.raises(ValueError, match="outside valid range"):
            target.ranged(1.01)

    def test_default_not_validated(self, target):
        """Test omitted arguments skip validation."""
        assert target.ranged() == 0.5

    def test_non_numeric_raises(self, target):
        """Test non-numbers and bools are rejected."""
        with pytest.raises(TypeError):
            target.ranged("0.5")
        with pytest.raises(TypeError):
            target.ranged(True)


class TestNumericValidators:
    """Test positive, non-negative and finite validators."""

    @pytest.mark.parametrize("gamma", [0, -1.0, float("nan"), float("inf")])
    def test_positive_rejects(self, target, gamma):
        """Test non-positive or non-finite values are rejected."""
        with pytest.raises(ValueError, match="positive"):
            target.positive(gamma)

    def test_positive_gamma_hint(self, target):
        """Test gamma errors include a usage hint."""
        with pytest.raises(ValueError, match="Use 1.0 for linear"):
            target.positive(0.0)

    def test_non_negative(self, target):
        """Test zero and None pass, negatives fail."""
        assert target.non_negative(0) == 0
        assert target.non_negative(None) is None
        with pytest.raises(ValueError, match="non-negative"):
            target.non_negative(-0.5)

    def test_finite_uses_index(self, target):
        """Test the parameter index selects the checked argument."""
        assert target.finite(float("nan"), 2.0) == 2.0
        with pytest.raises(ValueError, match="finite"):
            target.finite(0, float("inf"))


class TestTypeAndChoices:
    """Test type and choice validators."""

    def test_type_tuple(self, target):
        """Test tuple of accepted types."""
        assert target.typed(3) == 3
        assert target.typed("x") == "x"
        with pytest.raises(TypeError, match="key must be int or str, got float"):
            target.typed(1.5)

    def test_type_int_rules(self, target):
        """Test numpy integers count as int and bools do not."""
        assert target.typed(np.int64(4)) == 4
        with pytest.raises(TypeError, match="got bool"):
            target.typed(True)

    def test_choices(self, target):
        """Test choice validation lists the options."""
        assert target.choice("a") == "a"
        with pytest.raises(ValueError, match="Valid options are: a, b"):
            target.choice("c")

    def test_choices_normalized(self, target):
        """Test names are matched case-insensitively and passed on lower-cased."""
        assert target.choice(" B ") == "b"
        assert target.choice(mode="A") == "a"

    def test_choices_require_str(self, target):
        """Test non-string choices are a type error."""
        with pytest.raises(TypeError, match="Valid options are: a, b"):
            target.choice(1)

    def test_wraps_preserves_name(self, target):
        """Test decorated functions keep their metadata."""
        assert Target.choice.__name__ == "choice"
