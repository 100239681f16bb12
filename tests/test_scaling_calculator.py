import math

import pytest

from ar_glb.models.scaling import Axis, ModelDimensions
from ar_glb.services.scaling_calculator import (
    AR_MAX_DIMENSION_METERS,
    calculate_scaling,
    format_dimensions,
    format_dimensions_header,
    format_scale_percentage,
    requires_scaling,
    scaling_with_factor,
)


def dims(width, height, depth):
    return ModelDimensions(width=width, height=height, depth=depth)


def test_building_is_scaled_to_two_meters():
    result = calculate_scaling(dims(50, 30, 20), 2.0)

    assert result.is_scaled is True
    assert result.scale_factor == pytest.approx(0.04)
    assert result.scaled_dimensions.width == pytest.approx(2.0)
    assert result.scaled_dimensions.height == pytest.approx(1.2)
    assert result.scaled_dimensions.depth == pytest.approx(0.8)
    assert result.largest_dimension == 50
    assert result.largest_axis == Axis.WIDTH


def test_default_max_dimension_is_two_meters():
    assert AR_MAX_DIMENSION_METERS == 2.0
    assert calculate_scaling(dims(50, 30, 20)).scale_factor == pytest.approx(0.04)


def test_model_within_bounds_is_untouched():
    result = calculate_scaling(dims(1, 1.5, 1), 2.0)

    assert result.scale_factor == 1.0
    assert result.is_scaled is False
    assert result.scaled_dimensions == result.original_dimensions
    assert result.largest_axis == Axis.HEIGHT


@pytest.mark.parametrize(
    "width,height,depth,max_dimension",
    [(2.0, 2.0, 2.0, 2.0), (0.1, 0.2, 0.3, 0.3), (99, 1, 1, 100), (0.5, 0, 0, 2)],
)
def test_no_scaling_up_to_the_limit(width, height, depth, max_dimension):
    result = calculate_scaling(dims(width, height, depth), max_dimension)

    assert result.scale_factor == 1.0
    assert result.is_scaled is False
    assert result.scaled_dimensions == result.original_dimensions


@pytest.mark.parametrize(
    "width,height,depth,max_dimension",
    [(3, 2, 1, 2.0), (0.1, 7.3, 12.9, 0.5), (1000, 1000, 1000, 1.0), (2.0001, 0, 0, 2)],
)
def test_scaling_is_uniform(width, height, depth, max_dimension):
    original = dims(width, height, depth)
    result = calculate_scaling(original, max_dimension)

    for axis in ("width", "height", "depth"):
        before = getattr(original, axis)
        after = getattr(result.scaled_dimensions, axis)
        if before:
            assert after / before == pytest.approx(result.scale_factor)
        else:
            assert after == 0
    assert max(result.scaled_dimensions.as_tuple()) == pytest.approx(max_dimension)


@pytest.mark.parametrize(
    "width,height,depth,expected",
    [
        (5, 5, 3, Axis.HEIGHT),
        (5, 3, 5, Axis.DEPTH),
        (5, 3, 3, Axis.WIDTH),
        (3, 5, 5, Axis.HEIGHT),
        (4, 4, 4, Axis.HEIGHT),
    ],
)
def test_largest_axis_tie_break(width, height, depth, expected):
    assert calculate_scaling(dims(width, height, depth)).largest_axis == expected


def test_zero_size_model_is_not_scaled():
    result = calculate_scaling(dims(0, 0, 0), 2.0)

    assert result.scale_factor == 1.0
    assert result.is_scaled is False
    assert not math.isnan(result.scaled_dimensions.width)
    assert result.largest_dimension == 0


@pytest.mark.parametrize("max_dimension", [0, -1, float("nan"), float("inf")])
def test_invalid_max_dimension_is_rejected(max_dimension):
    with pytest.raises(ValueError):
        calculate_scaling(dims(1, 1, 1), max_dimension)


def test_negative_dimensions_are_rejected():
    with pytest.raises(ValueError):
        dims(-1, 1, 1)


def test_explicit_factor():
    result = scaling_with_factor(dims(4, 2, 1), 0.5)
    assert result.is_scaled is True
    assert result.scaled_dimensions == dims(2, 1, 0.5)

    assert scaling_with_factor(dims(4, 2, 1), 1.0).is_scaled is False


def test_requires_scaling():
    assert requires_scaling(dims(2.5, 1, 1)) is True
    assert requires_scaling(dims(2.0, 1, 1)) is False
    assert requires_scaling(dims(2.0, 1, 1), max_dimension=1.5) is True


@pytest.mark.parametrize(
    "factor,expected",
    [(1.0, "100%"), (0.04, "4%"), (0.125, "13%"), (0.004, "0.4%")],
)
def test_format_scale_percentage(factor, expected):
    assert format_scale_percentage(factor) == expected


def test_format_dimensions():
    assert format_dimensions(dims(2.0, 1.2, 0.8)) == "2.0m × 1.2m × 80cm"
    assert format_dimensions(dims(50, 30, 20)) == "50.0m × 30.0m × 20.0m"


def test_format_dimensions_header():
    assert format_dimensions_header(dims(50, 30, 20)) == "50.000x30.000x20.000"
    assert format_dimensions_header(dims(2, 1.2, 0.8)) == "2.000x1.200x0.800"
