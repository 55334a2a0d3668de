"""Dimension model: original size plus the current source/destination rectangles."""

import math
from typing import Any

from loguru import logger
from pydantic import BaseModel, Field, model_validator

from ..common.schemas import PixelRect


def round_half_away(value: float) -> int:
    """Round to the nearest integer with .5 ties away from zero (50.5 -> 51)."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


class Dimensions(BaseModel):
    """Mutable resize plan for one loaded image.

    ``original_w``/``original_h`` describe the upright bitmap and are fixed
    once orientation correction has run. Every planner operation overwrites
    the source and destination rectangles; values stay fractional until
    ``to_pixel_rects`` quantizes them.
    """

    original_w: int = Field(..., gt=0, description="Width of the upright source bitmap")
    original_h: int = Field(..., gt=0, description="Height of the upright source bitmap")

    source_x: float = 0.0
    source_y: float = 0.0
    source_w: float = 0.0
    source_h: float = 0.0

    dest_x: float = 0.0
    dest_y: float = 0.0
    dest_w: float = 0.0
    dest_h: float = 0.0

    @model_validator(mode="before")
    @classmethod
    def fill_defaults(cls, data: Any) -> Any:
        """Default both rectangles to the full original size."""
        if not isinstance(data, dict):
            return data

        data = dict(data)
        for size_key, original_key in (
            ("source_w", "original_w"),
            ("source_h", "original_h"),
            ("dest_w", "original_w"),
            ("dest_h", "original_h"),
        ):
            if data.get(size_key) is None and data.get(original_key) is not None:
                data[size_key] = data[original_key]
        return data

    @property
    def aspect_ratio(self) -> float:
        return self.original_w / self.original_h

    def dest_size(self) -> tuple[int, int]:
        """Quantized destination size (the default output canvas size)."""
        dest, _ = self.to_pixel_rects()
        return dest.width, dest.height

    def to_pixel_rects(self) -> tuple[PixelRect, PixelRect]:
        """Quantize the plan to integer pixels for the resample step.

        This is the only place plan offsets and sizes are rounded. Destination
        width/height are at least one pixel; the source rectangle is clamped
        inside the original bitmap.
        """
        dest = PixelRect(
            x=round_half_away(self.dest_x),
            y=round_half_away(self.dest_y),
            width=max(1, round_half_away(self.dest_w)),
            height=max(1, round_half_away(self.dest_h)),
        )

        src_x = min(max(0, round_half_away(self.source_x)), self.original_w - 1)
        src_y = min(max(0, round_half_away(self.source_y)), self.original_h - 1)
        source = PixelRect(
            x=src_x,
            y=src_y,
            width=min(max(1, round_half_away(self.source_w)), self.original_w - src_x),
            height=min(max(1, round_half_away(self.source_h)), self.original_h - src_y),
        )

        logger.debug(f"Quantized plan: dest={tuple(dest)} source={tuple(source)}")
        return dest, source
