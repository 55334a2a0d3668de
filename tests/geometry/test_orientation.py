"""Unit tests for EXIF orientation resolution and correction."""

from typing import TYPE_CHECKING

import pytest
from PIL import Image

from cl_image_resize.codec import FlipAxis
from cl_image_resize.common.errors import ImageLoadError, OrientationError
from cl_image_resize.geometry.orientation import (
    IDENTITY,
    Orientation,
    OrientationCorrection,
    apply_orientation,
    resolve_orientation,
)

if TYPE_CHECKING:
    from conftest import RecordingCodec

GREEN = (10, 200, 10)


def marked_bitmap(width: int = 100, height: int = 60) -> Image.Image:
    img = Image.new("RGB", (width, height), (200, 30, 30))
    img.paste(Image.new("RGB", (10, 10), GREEN), (0, 0))
    return img


def is_green(pixel: object) -> bool:
    assert isinstance(pixel, tuple)
    return abs(pixel[0] - GREEN[0]) < 30 and abs(pixel[1] - GREEN[1]) < 30


# ============================================================================
# resolve_orientation Tests
# ============================================================================


@pytest.mark.parametrize(
    ("tag", "rotation", "flip"),
    [
        (1, 0, None),
        (2, 0, FlipAxis.HORIZONTAL),
        (3, 180, None),
        (4, 180, FlipAxis.HORIZONTAL),
        (5, 270, FlipAxis.HORIZONTAL),
        (6, 270, None),
        (7, 90, FlipAxis.HORIZONTAL),
        (8, 90, None),
    ],
)
def test_resolve_orientation_table(tag: int, rotation: int, flip: FlipAxis | None):
    correction = resolve_orientation(tag)

    assert correction == OrientationCorrection(rotation, flip)


def test_resolve_orientation_accepts_enum():
    assert resolve_orientation(Orientation.RIGHT_TOP).rotation == 270


@pytest.mark.parametrize("tag", [None, 0, 9, -1, 255, "6", 6.0, True, b"\x06"])
def test_resolve_orientation_ignores_invalid_tags(tag: object):
    """Test missing and out-of-range tags mean no correction."""
    assert resolve_orientation(tag) == IDENTITY


def test_swaps_dimensions_only_for_quarter_turns():
    swapping = {tag for tag in Orientation if resolve_orientation(tag).swaps_dimensions}

    assert swapping == {5, 6, 7, 8}


# ============================================================================
# apply_orientation Tests
# ============================================================================


def test_tag_6_swaps_reported_dimensions(recording_codec: "RecordingCodec"):
    """Test a 1000x600 bitmap tagged 6 reports 600x1000 after correction."""
    bitmap, width, height = apply_orientation(recording_codec, marked_bitmap(1000, 600), 6)

    assert (width, height) == (600, 1000)
    assert bitmap.size == (600, 1000)
    # Top-left marker ends up top-right after a clockwise quarter turn
    assert is_green(bitmap.getpixel((595, 5)))


def test_tag_8_rotates_counter_clockwise(recording_codec: "RecordingCodec"):
    bitmap, width, height = apply_orientation(recording_codec, marked_bitmap(100, 60), 8)

    assert (width, height) == (60, 100)
    assert is_green(bitmap.getpixel((5, 95)))


def test_tag_2_mirrors(recording_codec: "RecordingCodec"):
    bitmap, width, height = apply_orientation(recording_codec, marked_bitmap(100, 60), 2)

    assert (width, height) == (100, 60)
    assert is_green(bitmap.getpixel((95, 5)))
    assert recording_codec.calls == ["flip"]


def test_tag_3_rotates_half_turn(recording_codec: "RecordingCodec"):
    bitmap, _, _ = apply_orientation(recording_codec, marked_bitmap(100, 60), 3)

    assert is_green(bitmap.getpixel((95, 55)))
    assert recording_codec.calls == ["rotate"]


def test_tag_5_rotates_then_flips(recording_codec: "RecordingCodec"):
    bitmap, width, height = apply_orientation(recording_codec, marked_bitmap(100, 60), 5)

    assert (width, height) == (60, 100)
    assert recording_codec.calls == ["rotate", "flip"]
    # Transpose keeps the top-left marker in place
    assert is_green(bitmap.getpixel((5, 5)))


def test_no_tag_is_noop(recording_codec: "RecordingCodec"):
    original = marked_bitmap()

    bitmap, width, height = apply_orientation(recording_codec, original, None)

    assert bitmap is original
    assert (width, height) == (100, 60)
    assert recording_codec.calls == []


def test_replaced_bitmaps_are_released(recording_codec: "RecordingCodec"):
    original = marked_bitmap()

    _ = apply_orientation(recording_codec, original, 7)

    assert original in recording_codec.released
    assert len(recording_codec.released) == 2


@pytest.mark.parametrize("primitive", ["rotate", "flip"])
def test_primitive_failure_raises_orientation_error(
    recording_codec: "RecordingCodec", primitive: str
):
    recording_codec.fail_on.add(primitive)

    with pytest.raises(OrientationError) as exc_info:
        _ = apply_orientation(recording_codec, marked_bitmap(), 5)

    assert isinstance(exc_info.value, ImageLoadError)
    assert primitive.capitalize() in str(exc_info.value)
    assert recording_codec.released, "bitmap must be released before raising"
