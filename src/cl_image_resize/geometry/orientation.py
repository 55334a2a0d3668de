"""EXIF orientation resolution and correction."""

from collections.abc import Callable
from dataclasses import dataclass
from enum import IntEnum

from loguru import logger
from PIL import Image

from ..codec.protocol import BitmapCodec, FlipAxis
from ..common.errors import OrientationError


class Orientation(IntEnum):
    """EXIF Orientation tag (0x0112) values."""

    TOP_LEFT = 1
    TOP_RIGHT = 2
    BOTTOM_RIGHT = 3
    BOTTOM_LEFT = 4
    LEFT_TOP = 5
    RIGHT_TOP = 6
    RIGHT_BOTTOM = 7
    LEFT_BOTTOM = 8


@dataclass(frozen=True)
class OrientationCorrection:
    """Rotation (degrees, counter-clockwise) followed by an optional flip."""

    rotation: int = 0
    flip: FlipAxis | None = None

    @property
    def is_identity(self) -> bool:
        return self.rotation == 0 and self.flip is None

    @property
    def swaps_dimensions(self) -> bool:
        return self.rotation in (90, 270)


IDENTITY = OrientationCorrection()

_CORRECTIONS: dict[Orientation, OrientationCorrection] = {
    Orientation.TOP_LEFT: IDENTITY,
    Orientation.TOP_RIGHT: OrientationCorrection(0, FlipAxis.HORIZONTAL),
    Orientation.BOTTOM_RIGHT: OrientationCorrection(180),
    Orientation.BOTTOM_LEFT: OrientationCorrection(180, FlipAxis.HORIZONTAL),
    Orientation.LEFT_TOP: OrientationCorrection(270, FlipAxis.HORIZONTAL),
    Orientation.RIGHT_TOP: OrientationCorrection(270),
    Orientation.RIGHT_BOTTOM: OrientationCorrection(90, FlipAxis.HORIZONTAL),
    Orientation.LEFT_BOTTOM: OrientationCorrection(90),
}


def resolve_orientation(tag: object) -> OrientationCorrection:
    """Map a raw EXIF orientation value to the correction that makes the bitmap upright.

    Missing, non-integer and out-of-range tags resolve to the identity.
    """
    if tag is None:
        return IDENTITY

    if isinstance(tag, bool) or not isinstance(tag, int):
        logger.debug(f"Ignoring non-integer EXIF orientation {tag!r}")
        return IDENTITY

    try:
        orientation = Orientation(tag)
    except ValueError:
        logger.debug(f"Ignoring out-of-range EXIF orientation {tag}")
        return IDENTITY

    return _CORRECTIONS[orientation]


def apply_orientation(
    codec: BitmapCodec, bitmap: Image.Image, tag: object
) -> tuple[Image.Image, int, int]:
    """
    Make a decoded bitmap upright according to its EXIF orientation.

    Args:
        codec: Codec providing the rotate/flip primitives
        bitmap: Decoded bitmap
        tag: Raw EXIF orientation value (may be None)

    Returns:
        (bitmap, width, height) of the corrected bitmap. Width and height are
        re-read after correction, so 90/270 rotations report swapped sizes.

    Raises:
        OrientationError: If the rotate or flip primitive fails. The bitmap
            has been released by then.
    """
    correction = resolve_orientation(tag)

    if correction.rotation:
        bitmap = _replace(codec, bitmap, "rotate", lambda b: codec.rotate(b, correction.rotation))

    if correction.flip is not None:
        axis = correction.flip
        bitmap = _replace(codec, bitmap, "flip", lambda b: codec.flip(b, axis))

    width, height = codec.size(bitmap)
    if not correction.is_identity:
        logger.debug(
            f"Applied orientation {tag}: rotate={correction.rotation} "
            f"flip={correction.flip} -> {width}x{height}"
        )
    return bitmap, width, height


def _replace(
    codec: BitmapCodec,
    bitmap: Image.Image,
    primitive: str,
    op: Callable[[Image.Image], Image.Image | None],
) -> Image.Image:
    try:
        result = op(bitmap)
    except (OSError, ValueError) as exc:
        logger.error(f"Orientation {primitive} failed: {exc}")
        codec.release(bitmap)
        raise OrientationError(f"{primitive.capitalize()} image failed: {exc}") from exc

    if result is None:
        codec.release(bitmap)
        raise OrientationError(f"{primitive.capitalize()} image failed")

    if result is not bitmap:
        codec.release(bitmap)
    return result
