from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Axis(str, Enum):
    WIDTH = "width"
    HEIGHT = "height"
    DEPTH = "depth"


class ModelDimensions(BaseModel):
    """Full extent of a model's bounding box per axis, in meters."""

    model_config = ConfigDict(frozen=True)

    width: float = Field(ge=0)
    height: float = Field(ge=0)
    depth: float = Field(ge=0)

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.width, self.height, self.depth)

    def scaled(self, factor: float) -> "ModelDimensions":
        return ModelDimensions(
            width=self.width * factor,
            height=self.height * factor,
            depth=self.depth * factor,
        )


class ScalingResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    scale_factor: float = Field(gt=0)
    is_scaled: bool
    original_dimensions: ModelDimensions
    scaled_dimensions: ModelDimensions
    largest_dimension: float
    largest_axis: Axis


class ScalingOptions(BaseModel):
    max_dimension: float | None = None
    force_scale: bool = False
    custom_scale_factor: float | None = None


@dataclass(frozen=True)
class ScaledAsset:
    """A GLB payload ready for AR, plus the scaling that produced it."""

    payload: bytes
    scaling: ScalingResult


class ScalingPreviewResponse(BaseModel):
    scaling: ScalingResult
    scale_percentage: str
    original_dimensions_label: str
    scaled_dimensions_label: str


class CacheStatsResponse(BaseModel):
    size: int
    keys: list[str]
