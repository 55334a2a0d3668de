"""Pure geometry planning logic for resize, fit, scale and crop.

Every function mutates the given ``Dimensions`` and returns it so calls can be
chained. Each call derives its result from ``original_w``/``original_h`` only:
calls never compose, the last one wins.
"""

from loguru import logger

from .crop_anchor import CropAnchor, crop_offset
from .dimensions import Dimensions, round_half_away


def resize(
    dims: Dimensions,
    width: float,
    height: float,
    *,
    allow_enlarge: bool = False,
) -> Dimensions:
    """
    Plain (non-cropping) resize to ``width`` x ``height``.

    If enlargement is not allowed and either requested dimension exceeds the
    original, the request is dropped and the original size is used instead.

    Args:
        dims: Plan to update
        width: Target width in pixels
        height: Target height in pixels
        allow_enlarge: Permit output larger than the original

    Returns:
        The updated plan
    """
    if not allow_enlarge and (width > dims.original_w or height > dims.original_h):
        logger.debug(
            f"Resize to {width}x{height} would enlarge "
            f"{dims.original_w}x{dims.original_h}, keeping original size"
        )
        width = dims.original_w
        height = dims.original_h

    dims.source_x = 0
    dims.source_y = 0
    dims.source_w = dims.original_w
    dims.source_h = dims.original_h

    dims.dest_w = width
    dims.dest_h = height

    logger.debug(f"Resize plan: dest={width}x{height}")
    return dims


def resize_to_width(dims: Dimensions, width: float, *, allow_enlarge: bool = False) -> Dimensions:
    """Resize to ``width``, deriving the height from the original aspect ratio."""
    height = width * dims.original_h / dims.original_w
    return resize(dims, width, height, allow_enlarge=allow_enlarge)


def resize_to_height(dims: Dimensions, height: float, *, allow_enlarge: bool = False) -> Dimensions:
    """Resize to ``height``, deriving the width from the original aspect ratio."""
    width = height * dims.original_w / dims.original_h
    return resize(dims, width, height, allow_enlarge=allow_enlarge)


def resize_to_short_side(
    dims: Dimensions, max_short: float, *, allow_enlarge: bool = False
) -> Dimensions:
    """Resize so the shorter original side becomes ``max_short``."""
    if dims.original_h < dims.original_w:
        long = dims.original_w * max_short / dims.original_h
        return resize(dims, long, max_short, allow_enlarge=allow_enlarge)

    long = dims.original_h * max_short / dims.original_w
    return resize(dims, max_short, long, allow_enlarge=allow_enlarge)


def resize_to_long_side(
    dims: Dimensions, max_long: float, *, allow_enlarge: bool = False
) -> Dimensions:
    """Resize so the longer original side becomes ``max_long``."""
    if dims.original_h > dims.original_w:
        short = dims.original_w * max_long / dims.original_h
        return resize(dims, short, max_long, allow_enlarge=allow_enlarge)

    short = dims.original_h * max_long / dims.original_w
    return resize(dims, max_long, short, allow_enlarge=allow_enlarge)


def resize_to_best_fit(
    dims: Dimensions,
    max_width: float,
    max_height: float,
    *,
    allow_enlarge: bool = False,
) -> Dimensions:
    """
    Fit inside ``max_width`` x ``max_height`` keeping the aspect ratio.

    Scales to the width bound first and falls back to the height bound when
    that would overflow. Leaves the plan untouched when the original already
    fits and enlargement is not allowed.
    """
    if dims.original_w <= max_width and dims.original_h <= max_height and not allow_enlarge:
        return dims

    ratio = dims.original_h / dims.original_w
    width: float = max_width
    height: float = width * ratio

    if height > max_height:
        height = max_height
        width = round_half_away(height / ratio)

    return resize(dims, width, height, allow_enlarge=allow_enlarge)


def scale(dims: Dimensions, percent: float) -> Dimensions:
    """Scale both original dimensions by ``percent``; enlargement is always allowed."""
    if percent == 100:
        return dims

    width = dims.original_w * percent / 100
    height = dims.original_h * percent / 100
    return resize(dims, width, height, allow_enlarge=True)


def crop(
    dims: Dimensions,
    width: float,
    height: float,
    *,
    allow_enlarge: bool = False,
    anchor: CropAnchor | str = CropAnchor.CENTER,
) -> Dimensions:
    """
    Resize-and-crop to exactly ``width`` x ``height``.

    The original is scaled so the tighter axis matches, and the excess of the
    other axis is trimmed according to ``anchor``.

    Unlike ``resize``, the enlargement guard clamps each dimension on its own.

    Args:
        dims: Plan to update
        width: Output width in pixels
        height: Output height in pixels
        allow_enlarge: Permit output larger than the original
        anchor: Which part of the excess region to keep

    Returns:
        The updated plan
    """
    if not allow_enlarge:
        if width > dims.original_w:
            width = dims.original_w
        if height > dims.original_h:
            height = dims.original_h

    ratio_source = dims.original_w / dims.original_h
    ratio_dest = width / height

    if ratio_dest < ratio_source:
        resize_to_height(dims, height, allow_enlarge=allow_enlarge)
        excess_width = (dims.dest_w - width) / dims.dest_w * dims.original_w

        dims.source_w = dims.original_w - excess_width
        dims.source_x = crop_offset(excess_width, anchor)
        dims.dest_w = width
    else:
        resize_to_width(dims, width, allow_enlarge=allow_enlarge)
        excess_height = (dims.dest_h - height) / dims.dest_h * dims.original_h

        dims.source_h = dims.original_h - excess_height
        dims.source_y = crop_offset(excess_height, anchor)
        dims.dest_h = height

    logger.debug(
        f"Crop {width}x{height} ({anchor}): source=({dims.source_x}, {dims.source_y}, "
        f"{dims.source_w}, {dims.source_h})"
    )
    return dims


def freecrop(
    dims: Dimensions,
    width: float,
    height: float,
    x: float | None = None,
    y: float | None = None,
) -> Dimensions:
    """
    Crop a ``width`` x ``height`` window at an explicit ``(x, y)`` offset.

    Without both offsets this is a centered ``crop``. The source rectangle is
    clamped to the original; the destination keeps the requested size even
    when that stretches a clamped source at the image edge.
    """
    if x is None or y is None:
        return crop(dims, width, height)

    dims.source_x = x
    dims.source_y = y
    dims.source_w = min(width, dims.original_w - x)
    dims.source_h = min(height, dims.original_h - y)

    dims.dest_w = width
    dims.dest_h = height

    return dims


def center_in_canvas(dims: Dimensions, canvas_w: float, canvas_h: float) -> Dimensions:
    """
    Position the destination rectangle inside a fixed-size output canvas.

    Landscape originals are centered vertically, portrait originals
    horizontally. Square originals keep their current offsets.
    """
    if dims.original_h < dims.original_w:
        dims.dest_x = 0
        dims.dest_y = (canvas_h - dims.dest_h) / 2

    if dims.original_h > dims.original_w:
        dims.dest_x = (canvas_w - dims.dest_w) / 2
        dims.dest_y = 0

    return dims
