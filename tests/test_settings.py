"""Test module for bezspline.settings and bezspline.common

The tests are run using pytest.
"""

import dataclasses

import pytest

from bezspline.common import Point, SplineError, ValidationError, clamp
from bezspline.settings import DEFAULT_SETTINGS, SplineSettings

###############################################################################
# Point Tests
###############################################################################


class TestPoint:
    """Test the Point value type."""

    def test_vector_arithmetic(self):
        """Test addition, subtraction and scaling."""
        a = Point(1.0, 2.0)
        b = Point(4.0, 6.0)

        assert a + b == Point(5.0, 8.0)
        assert b - a == Point(3.0, 4.0)
        assert a * 2.0 == Point(2.0, 4.0)
        assert 2.0 * a == Point(2.0, 4.0)
        assert b / 2.0 == Point(2.0, 3.0)

    def test_norm_and_cross(self):
        """Test euclidean norm and 2D cross product."""
        assert Point(3.0, 4.0).norm() == 5.0
        assert Point(1.0, 0.0).cross(Point(0.0, 1.0)) == 1.0
        assert Point(2.0, 2.0).cross(Point(1.0, 1.0)) == 0.0

    def test_as_tuple(self):
        """Test conversion to a tuple."""
        assert Point(1.5, -2.5).as_tuple() == (1.5, -2.5)

    def test_point_is_immutable(self):
        """Test coordinates cannot be reassigned."""
        p = Point(1.0, 2.0)

        with pytest.raises(dataclasses.FrozenInstanceError):
            p.x = 3.0  # type: ignore[misc]


class TestClamp:
    """Test the clamp helper."""

    def test_clamp(self):
        """Test values below, inside and above the interval."""
        assert clamp(-1.0, 0.0, 1.0) == 0.0
        assert clamp(0.25, 0.0, 1.0) == 0.25
        assert clamp(3.0, 0.0, 1.0) == 1.0


###############################################################################
# SplineSettings Tests
###############################################################################


class TestSplineSettings:
    """Test validation and conversion of spline settings."""

    def test_defaults(self):
        """Test the default values."""
        settings = SplineSettings()

        assert settings.tension == 0.5
        assert settings.quadrature_subdivisions == 10
        assert settings.bisection_tolerance == 1e-6
        assert settings.bisection_max_iterations == 50
        assert settings.max_knots is None
        assert settings == DEFAULT_SETTINGS

    @pytest.mark.parametrize(
        "kwargs, message",
        [
            ({"tension": 0.0}, "tension"),
            ({"tension": -1.0}, "tension"),
            ({"quadrature_subdivisions": 7}, "quadrature_subdivisions"),
            ({"quadrature_subdivisions": 0}, "quadrature_subdivisions"),
            ({"bisection_tolerance": 0.0}, "bisection_tolerance"),
            ({"bisection_max_iterations": 0}, "bisection_max_iterations"),
            ({"max_knots": 2}, "max_knots"),
        ],
    )
    def test_invalid_values(self, kwargs, message):
        """Test invalid settings raise ValidationError naming the field."""
        with pytest.raises(ValidationError, match=message):
            SplineSettings(**kwargs)

    def test_validation_error_hierarchy(self):
        """Test ValidationError is both a SplineError and a ValueError."""
        with pytest.raises(SplineError):
            SplineSettings(tension=0.0)
        with pytest.raises(ValueError):
            SplineSettings(tension=0.0)

    def test_dict_round_trip(self):
        """Test to_dict and from_dict preserve all values."""
        settings = SplineSettings(
            tension=0.4,
            quadrature_subdivisions=16,
            bisection_tolerance=1e-8,
            bisection_max_iterations=60,
            max_knots=8,
        )

        assert SplineSettings.from_dict(settings.to_dict()) == settings

    def test_from_dict_uses_defaults(self):
        """Test missing keys fall back to the defaults."""
        settings = SplineSettings.from_dict({"max_knots": 8})

        assert settings.max_knots == 8
        assert settings.tension == DEFAULT_SETTINGS.tension
        assert settings.quadrature_subdivisions == DEFAULT_SETTINGS.quadrature_subdivisions

    def test_settings_are_immutable(self):
        """Test settings cannot be changed after creation."""
        with pytest.raises(dataclasses.FrozenInstanceError):
            DEFAULT_SETTINGS.tension = 1.0  # type: ignore[misc]
