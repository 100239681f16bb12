"""
Display scaling for AR placement.

Large objects (buildings, monuments) are shrunk proportionally so their
largest side fits a practical AR viewing envelope. The factor is for
display only; stored record dimensions are never changed.

Browser preview code and the ``/api/ar-glb`` endpoint both go through
this module, so the preview always matches what the server serves.
"""
import math

from ar_glb.models.scaling import Axis, ModelDimensions, ScalingResult

# Largest side, in meters, a model may have when placed in AR.
AR_MAX_DIMENSION_METERS = 2.0


def _largest(dimensions: ModelDimensions) -> tuple[float, Axis]:
    width, height, depth = dimensions.as_tuple()
    largest_dimension = max(width, height, depth)

    # Height is checked first, so it wins ties against both other axes,
    # and depth wins ties against width only.
    if height >= width and height >= depth:
        largest_axis = Axis.HEIGHT
    elif depth >= width and depth >= height:
        largest_axis = Axis.DEPTH
    else:
        largest_axis = Axis.WIDTH
    return largest_dimension, largest_axis


def scaling_with_factor(
    dimensions: ModelDimensions, scale_factor: float
) -> ScalingResult:
    """Build a ScalingResult for an explicit scale factor."""
    if not math.isfinite(scale_factor) or scale_factor <= 0:
        raise ValueError(f"Scale factor must be a positive number, got {scale_factor}")

    largest_dimension, largest_axis = _largest(dimensions)
    return ScalingResult(
        scale_factor=scale_factor,
        is_scaled=scale_factor != 1.0,
        original_dimensions=dimensions,
        scaled_dimensions=dimensions.scaled(scale_factor),
        largest_dimension=largest_dimension,
        largest_axis=largest_axis,
    )


def calculate_scaling(
    dimensions: ModelDimensions, max_dimension: float = AR_MAX_DIMENSION_METERS
) -> ScalingResult:
    """
    Calculate the AR display scaling for a model.

    If the largest side exceeds ``max_dimension`` the model is scaled down
    uniformly so that side equals ``max_dimension``. A model exactly at the
    limit, or of zero size, is left alone.

    Example:
        A 50m x 30m x 20m building with the default 2m limit gets a factor
        of 0.04 and displays as 2m x 1.2m x 0.8m.
    """
    if not math.isfinite(max_dimension) or max_dimension <= 0:
        raise ValueError(f"max_dimension must be a positive number, got {max_dimension}")

    largest_dimension, _ = _largest(dimensions)
    if largest_dimension > max_dimension:
        scale_factor = max_dimension / largest_dimension
    else:
        scale_factor = 1.0
    return scaling_with_factor(dimensions, scale_factor)


def requires_scaling(
    dimensions: ModelDimensions, max_dimension: float = AR_MAX_DIMENSION_METERS
) -> bool:
    return max(dimensions.as_tuple()) > max_dimension


def format_scale_percentage(scale_factor: float) -> str:
    """Format a scale factor for display, e.g. 0.04 -> "4%", 0.004 -> "0.4%"."""
    percentage = scale_factor * 100
    if percentage >= 1:
        # Half-up rounding, matching what the browser shows
        return f"{math.floor(percentage + 0.5)}%"
    return f"{percentage:.1f}%"


def format_dimensions(dimensions: ModelDimensions) -> str:
    """Format dimensions for display, e.g. "2.0m × 1.2m × 80cm"."""

    def fmt(value: float) -> str:
        if value >= 1:
            return f"{value:.1f}m"
        return f"{value * 100:.0f}cm"

    return " × ".join(fmt(v) for v in dimensions.as_tuple())


def format_dimensions_header(dimensions: ModelDimensions) -> str:
    return "x".join(f"{v:.3f}" for v in dimensions.as_tuple())
