"""Bitmap codec protocol - the boundary between geometry planning and pixels."""

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Protocol, runtime_checkable

from PIL import Image

from ..common.schemas import ImageFormat, PixelRect


class FlipAxis(StrEnum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


@dataclass
class DecodedImage:
    """Result of ``BitmapCodec.decode``.

    Fields:
        bitmap: Decoded bitmap handle
        width: Width as stored in the file, px
        height: Height as stored in the file, px
        format: Detected container format
        orientation: Raw EXIF orientation tag, None when absent
        truecolor: False for palette and bilevel sources
    """

    bitmap: Image.Image
    width: int
    height: int
    format: ImageFormat
    orientation: int | None = None
    truecolor: bool = True


@runtime_checkable
class BitmapCodec(Protocol):
    """Primitives the resize session needs from a bitmap library.

    Implementations may raise ``OSError``/``ValueError`` from any primitive;
    the session wraps those into the typed errors of ``common.errors``.
    """

    def decode(self, source: bytes | str | Path) -> DecodedImage: ...

    def size(self, bitmap: Image.Image) -> tuple[int, int]: ...

    def rotate(self, bitmap: Image.Image, degrees: int) -> Image.Image: ...

    def flip(self, bitmap: Image.Image, axis: FlipAxis) -> Image.Image: ...

    def allocate_canvas(self, width: int, height: int, image_format: ImageFormat) -> Image.Image: ...

    def resample(
        self,
        canvas: Image.Image,
        bitmap: Image.Image,
        dest: PixelRect,
        source: PixelRect,
    ) -> bool: ...

    def apply_gamma(
        self, bitmap: Image.Image, input_gamma: float, output_gamma: float
    ) -> Image.Image: ...

    def encode(
        self,
        canvas: Image.Image,
        image_format: ImageFormat,
        quality: int | None,
        *,
        interlace: bool = False,
        palette: bool = False,
    ) -> bytes: ...

    def write(self, data: bytes, path: str | Path, permissions: int | None = None) -> None: ...

    def release(self, bitmap: Image.Image) -> None: ...
