import asyncio
import logging
import math

import httpx

from ar_glb.errors import (
    ARScalingError,
    DecodeError,
    DownloadError,
    InternalError,
    InvalidRequestError,
)
from ar_glb.models.scaling import (
    ModelDimensions,
    ScaledAsset,
    ScalingOptions,
    ScalingResult,
)
from ar_glb.services.bounds import extract_bounds
from ar_glb.services.glb_rewriter import apply_scale, decode_glb, encode_glb
from ar_glb.services.scaling_cache import CacheKey, ScalingCache
from ar_glb.services.scaling_calculator import (
    AR_MAX_DIMENSION_METERS,
    calculate_scaling,
    format_dimensions,
    scaling_with_factor,
)
from ar_glb.utils.url_utils import validate_source_url

logger = logging.getLogger(__name__)

MAX_DIMENSION_LIMIT = 100.0


def validate_max_dimension(value: float, limit: float = MAX_DIMENSION_LIMIT) -> float:
    if not math.isfinite(value) or value <= 0 or value > limit:
        raise InvalidRequestError(
            f"maxDimension must be a positive number between 0 and {limit:g}"
        )
    return float(value)


def validate_scale_factor(value: float) -> float:
    if not math.isfinite(value) or value <= 0:
        raise InvalidRequestError("scaleFactor must be a positive number")
    return float(value)


class ARScalingService:
    """
    Fetches a GLB, scales it to fit the AR envelope and caches the result.

    Each call runs independently. Two concurrent first requests for the
    same key both run the pipeline, and the last one to finish wins the
    cache slot. Both produce the same bytes.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        cache: ScalingCache,
        default_max_dimension: float = AR_MAX_DIMENSION_METERS,
        max_dimension_limit: float = MAX_DIMENSION_LIMIT,
    ) -> None:
        self.http_client = http_client
        self.cache = cache
        self.default_max_dimension = default_max_dimension
        self.max_dimension_limit = max_dimension_limit

    async def scale_for_ar(
        self, source_url: str, options: ScalingOptions | None = None
    ) -> ScaledAsset:
        source_url = validate_source_url(source_url)
        options = options or ScalingOptions()
        max_dimension = validate_max_dimension(
            options.max_dimension
            if options.max_dimension is not None
            else self.default_max_dimension,
            self.max_dimension_limit,
        )
        custom = options.custom_scale_factor
        if custom is not None:
            custom = validate_scale_factor(custom)

        key = CacheKey.for_request(
            source_url,
            max_dimension,
            scale_override=custom,
            force_scale=options.force_scale and custom is None,
        )
        cached = self.cache.get(key)
        if cached is not None:
            logger.info("Cache hit for %s", key)
            return ScaledAsset(payload=cached.payload, scaling=cached.result)

        logger.info("Processing %s (max %.3fm)", source_url, max_dimension)
        original = await self.download(source_url)

        try:
            payload, scaling = await asyncio.to_thread(
                self._process, original, max_dimension, options.force_scale, custom
            )
        except ARScalingError:
            raise
        except Exception as exc:
            raise InternalError(f"Failed to process GLB: {exc}") from exc

        self.cache.put(key, payload, scaling)
        return ScaledAsset(payload=payload, scaling=scaling)

    async def download(self, url: str) -> bytes:
        try:
            response = await self.http_client.get(url)
        except httpx.HTTPError as exc:
            raise DownloadError(f"Failed to download GLB: {exc}") from exc

        if not response.is_success:
            raise DownloadError(
                f"Failed to download GLB: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )
        return response.content

    def _process(
        self,
        original: bytes,
        max_dimension: float,
        force_scale: bool,
        custom_scale_factor: float | None,
    ) -> tuple[bytes, ScalingResult]:
        gltf = decode_glb(original)
        try:
            dimensions = extract_bounds(gltf)
        except (IndexError, KeyError, TypeError, ValueError) as exc:
            raise DecodeError(f"GLB references missing data: {exc!r}") from exc
        scaling = self.decide_scaling(
            dimensions, max_dimension, force_scale, custom_scale_factor
        )

        if not scaling.is_scaled:
            return original, scaling

        try:
            apply_scale(gltf, scaling.scale_factor)
        except (IndexError, KeyError) as exc:
            raise DecodeError(f"GLB references missing data: {exc!r}") from exc
        logger.info(
            "Scaled by factor %.4f: %s -> %s",
            scaling.scale_factor,
            format_dimensions(scaling.original_dimensions),
            format_dimensions(scaling.scaled_dimensions),
        )
        return encode_glb(gltf), scaling

    @staticmethod
    def decide_scaling(
        dimensions: ModelDimensions,
        max_dimension: float,
        force_scale: bool = False,
        custom_scale_factor: float | None = None,
    ) -> ScalingResult:
        if custom_scale_factor is not None:
            return scaling_with_factor(dimensions, custom_scale_factor)

        largest = max(dimensions.as_tuple())
        if force_scale and largest > 0:
            return scaling_with_factor(dimensions, max_dimension / largest)
        return calculate_scaling(dimensions, max_dimension)
