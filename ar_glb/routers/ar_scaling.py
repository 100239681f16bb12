import math

from fastapi import APIRouter, HTTPException, Query

from ar_glb.config import settings
from ar_glb.errors import InvalidRequestError
from ar_glb.models.scaling import ModelDimensions, ScalingPreviewResponse
from ar_glb.services.ar_scaling_service import validate_max_dimension
from ar_glb.services.scaling_calculator import (
    calculate_scaling,
    format_dimensions,
    format_scale_percentage,
)

router = APIRouter()


@router.get("/ar-scaling/preview", response_model=ScalingPreviewResponse)
async def preview_scaling(
    width: float = Query(..., ge=0),
    height: float = Query(..., ge=0),
    depth: float = Query(..., ge=0),
    max_dimension: float | None = Query(None, alias="maxDimension"),
):
    try:
        max_dim = validate_max_dimension(
            max_dimension
            if max_dimension is not None
            else settings.AR_MAX_DIMENSION_METERS,
            settings.AR_MAX_DIMENSION_LIMIT,
        )
    except InvalidRequestError as exc:
        raise HTTPException(status_code=exc.http_status, detail=exc.message)

    if not all(math.isfinite(v) for v in (width, height, depth)):
        raise HTTPException(status_code=400, detail="Dimensions must be finite numbers")

    dimensions = ModelDimensions(width=width, height=height, depth=depth)
    scaling = calculate_scaling(dimensions, max_dim)
    return ScalingPreviewResponse(
        scaling=scaling,
        scale_percentage=format_scale_percentage(scaling.scale_factor),
        original_dimensions_label=format_dimensions(scaling.original_dimensions),
        scaled_dimensions_label=format_dimensions(scaling.scaled_dimensions),
    )
