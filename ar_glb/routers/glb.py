import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response

from ar_glb.config import settings
from ar_glb.dependencies import get_ar_scaling_service, get_scaling_cache
from ar_glb.errors import ARScalingError, ForbiddenSourceError, InvalidRequestError
from ar_glb.models.scaling import CacheStatsResponse, ScalingOptions
from ar_glb.services.ar_scaling_service import (
    ARScalingService,
    validate_max_dimension,
    validate_scale_factor,
)
from ar_glb.services.scaling_cache import InMemoryScalingCache
from ar_glb.services.scaling_calculator import format_dimensions_header
from ar_glb.utils.url_utils import parse_decimal, parse_glb_url

logger = logging.getLogger(__name__)

router = APIRouter()

SCALING_HEADERS = [
    "X-AR-Scale-Factor",
    "X-AR-Was-Scaled",
    "X-AR-Original-Dimensions",
    "X-AR-Scaled-Dimensions",
]


def parse_scaling_options(
    max_dimension: str | None, force_scale: bool, scale_factor: str | None
) -> ScalingOptions:
    max_dim = parse_decimal(max_dimension, "maxDimension")
    if max_dim is None:
        max_dim = settings.AR_MAX_DIMENSION_METERS
    max_dim = validate_max_dimension(max_dim, settings.AR_MAX_DIMENSION_LIMIT)

    custom = parse_decimal(scale_factor, "scaleFactor")
    if custom is not None:
        custom = validate_scale_factor(custom)

    return ScalingOptions(
        max_dimension=max_dim, force_scale=force_scale, custom_scale_factor=custom
    )


@router.get("/ar-glb", response_class=Response)
async def get_ar_glb(
    url: str | None = Query(None),
    max_dimension: str | None = Query(None, alias="maxDimension"),
    force_scale: bool = Query(False, alias="forceScale"),
    scale_factor: str | None = Query(None, alias="scaleFactor"),
    service: ARScalingService = Depends(get_ar_scaling_service),
):
    """Serve a GLB scaled so its largest side fits the AR envelope."""
    try:
        source_url = parse_glb_url(url, settings.ALLOWED_GLB_DOMAINS)
        options = parse_scaling_options(max_dimension, force_scale, scale_factor)
        result = await service.scale_for_ar(source_url, options)
    except (InvalidRequestError, ForbiddenSourceError) as exc:
        raise HTTPException(status_code=exc.http_status, detail=exc.message)
    except ARScalingError as exc:
        logger.error("Error processing GLB %s: %s", url, exc.message)
        raise HTTPException(status_code=exc.http_status, detail=exc.message)

    scaling = result.scaling
    return Response(
        content=result.payload,
        media_type="model/gltf-binary",
        headers={
            "Content-Disposition": 'inline; filename="model-ar-scaled.glb"',
            "Cache-Control": f"public, max-age={int(settings.AR_CACHE_TTL_SECONDS)}",
            "X-AR-Scale-Factor": f"{scaling.scale_factor:.6f}",
            "X-AR-Was-Scaled": "true" if scaling.is_scaled else "false",
            "X-AR-Original-Dimensions": format_dimensions_header(
                scaling.original_dimensions
            ),
            "X-AR-Scaled-Dimensions": format_dimensions_header(
                scaling.scaled_dimensions
            ),
        },
    )


@router.get("/ar-glb/cache", response_model=CacheStatsResponse)
async def get_cache_stats(cache: InMemoryScalingCache = Depends(get_scaling_cache)):
    return CacheStatsResponse(size=cache.size, keys=[str(k) for k in cache.keys()])


@router.delete("/ar-glb/cache", status_code=204)
async def clear_cache(cache: InMemoryScalingCache = Depends(get_scaling_cache)):
    cache.clear()
    return Response(status_code=204)
