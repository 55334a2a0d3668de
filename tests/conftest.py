"""Test configuration and fixtures for cl_image_resize.

This module provides:
- Factories that synthesize images on disk (any format, optional EXIF orientation)
- A recording codec wrapper used to inject primitive failures
"""

from collections.abc import Callable
from io import BytesIO
from pathlib import Path
from typing import override

import pytest
from PIL import ExifTags, Image

from cl_image_resize.codec import FlipAxis, PillowCodec
from cl_image_resize.common.schemas import ImageFormat, PixelRect
from cl_image_resize.geometry.dimensions import Dimensions

ImageFactory = Callable[..., Path]


# ============================================================================
# Image helpers
# ============================================================================


def make_test_image(
    width: int,
    height: int,
    mode: str = "RGB",
    color: tuple[int, ...] = (200, 30, 30),
) -> Image.Image:
    """Solid image with a distinct top-left quadrant marker."""
    img = Image.new(mode, (width, height), color)
    marker = (10, 200, 10, 255) if mode == "RGBA" else (10, 200, 10)
    img.paste(Image.new(mode, (max(1, width // 4), max(1, height // 4)), marker), (0, 0))
    return img


def encode_test_image(
    img: Image.Image, image_format: str, orientation: int | None = None
) -> bytes:
    buffer = BytesIO()
    kwargs: dict[str, object] = {}
    if orientation is not None:
        exif = Image.Exif()
        exif[ExifTags.Base.Orientation] = orientation
        kwargs["exif"] = exif.tobytes()
    img.save(buffer, format=image_format, **kwargs)
    return buffer.getvalue()


@pytest.fixture
def image_factory(tmp_path: Path) -> ImageFactory:
    """Write a synthetic image to tmp_path and return its path."""

    def _make(
        width: int = 400,
        height: int = 300,
        image_format: str = "PNG",
        mode: str = "RGB",
        orientation: int | None = None,
        name: str | None = None,
    ) -> Path:
        if mode == "P":
            img = make_test_image(width, height).convert("P", palette=Image.Palette.ADAPTIVE)
        else:
            img = make_test_image(width, height, mode=mode)
        if image_format == "JPEG" and img.mode != "RGB":
            img = img.convert("RGB")
        path = tmp_path / (name or f"sample_{width}x{height}.{image_format.lower()}")
        _ = path.write_bytes(encode_test_image(img, image_format, orientation))
        return path

    return _make


@pytest.fixture
def dims_factory() -> Callable[[int, int], Dimensions]:
    def _make(width: int, height: int) -> Dimensions:
        return Dimensions(original_w=width, original_h=height)

    return _make


# ============================================================================
# Recording codec
# ============================================================================


class RecordingCodec(PillowCodec):
    """PillowCodec that records primitive calls and can be told to fail."""

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[str] = []
        self.released: list[Image.Image] = []
        self.fail_on: set[str] = set()
        self.resample_result: bool = True
        self.in_place_gamma: bool = False

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if name in self.fail_on:
            raise OSError(f"{name} primitive failed")

    @override
    def rotate(self, bitmap: Image.Image, degrees: int) -> Image.Image:
        self._record("rotate")
        return super().rotate(bitmap, degrees)

    @override
    def flip(self, bitmap: Image.Image, axis: FlipAxis) -> Image.Image:
        self._record("flip")
        return super().flip(bitmap, axis)

    @override
    def allocate_canvas(self, width: int, height: int, image_format: ImageFormat) -> Image.Image:
        self._record("allocate_canvas")
        return super().allocate_canvas(width, height, image_format)

    @override
    def resample(
        self,
        canvas: Image.Image,
        bitmap: Image.Image,
        dest: PixelRect,
        source: PixelRect,
    ) -> bool:
        self._record("resample")
        if not self.resample_result:
            return False
        return super().resample(canvas, bitmap, dest, source)

    @override
    def apply_gamma(
        self, bitmap: Image.Image, input_gamma: float, output_gamma: float
    ) -> Image.Image:
        self._record("apply_gamma")
        if self.in_place_gamma:
            return bitmap
        return super().apply_gamma(bitmap, input_gamma, output_gamma)

    @override
    def encode(
        self,
        canvas: Image.Image,
        image_format: ImageFormat,
        quality: int | None,
        *,
        interlace: bool = False,
        palette: bool = False,
    ) -> bytes:
        self._record("encode")
        return super().encode(
            canvas, image_format, quality, interlace=interlace, palette=palette
        )

    @override
    def write(self, data: bytes, path: str | Path, permissions: int | None = None) -> None:
        self._record("write")
        super().write(data, path, permissions)

    @override
    def release(self, bitmap: Image.Image) -> None:
        self.released.append(bitmap)
        super().release(bitmap)


@pytest.fixture
def recording_codec() -> RecordingCodec:
    return RecordingCodec()
