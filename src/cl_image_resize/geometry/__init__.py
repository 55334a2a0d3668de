"""Geometry planning - dimension model, planner, crop anchors and orientation."""

from .crop_anchor import CropAnchor, crop_offset
from .dimensions import Dimensions, round_half_away
from .orientation import (
    Orientation,
    OrientationCorrection,
    apply_orientation,
    resolve_orientation,
)
from .planner import (
    center_in_canvas,
    crop,
    freecrop,
    resize,
    resize_to_best_fit,
    resize_to_height,
    resize_to_long_side,
    resize_to_short_side,
    resize_to_width,
    scale,
)

__all__ = [
    "CropAnchor",
    "crop_offset",
    "Dimensions",
    "round_half_away",
    "Orientation",
    "OrientationCorrection",
    "apply_orientation",
    "resolve_orientation",
    "center_in_canvas",
    "crop",
    "freecrop",
    "resize",
    "resize_to_best_fit",
    "resize_to_height",
    "resize_to_long_side",
    "resize_to_short_side",
    "resize_to_width",
    "scale",
]
