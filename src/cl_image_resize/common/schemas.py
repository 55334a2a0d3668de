"""Pydantic schemas for image resize configuration."""

from enum import StrEnum
from typing import ClassVar, NamedTuple

from pydantic import BaseModel, ConfigDict, Field

# ─────────────────────────────────────────────────────────────
# Image formats
# ─────────────────────────────────────────────────────────────


class ImageFormat(StrEnum):
    GIF = "gif"
    JPEG = "jpeg"
    PNG = "png"
    WEBP = "webp"
    BMP = "bmp"

    @classmethod
    def from_pil(cls, pil_format: str | None) -> "ImageFormat | None":
        """Map a Pillow format name (e.g. "JPEG", "MPO") to an ImageFormat."""
        if not pil_format:
            return None
        name = pil_format.lower()
        # Multi-picture JPEGs from phone cameras decode as MPO
        if name in ("jpg", "mpo"):
            name = "jpeg"
        try:
            return cls(name)
        except ValueError:
            return None

    @property
    def pil_name(self) -> str:
        return self.value.upper()

    @property
    def mime_type(self) -> str:
        return f"image/{self.value}"


INPUT_FORMATS: frozenset[ImageFormat] = frozenset(ImageFormat)
OUTPUT_FORMATS: frozenset[ImageFormat] = frozenset(
    {ImageFormat.GIF, ImageFormat.JPEG, ImageFormat.PNG, ImageFormat.WEBP}
)


# ─────────────────────────────────────────────────────────────
# Integer pixel rectangles
# ─────────────────────────────────────────────────────────────


class PixelRect(NamedTuple):
    """Integer rectangle handed to the resample primitive."""

    x: int
    y: int
    width: int
    height: int

    @property
    def box(self) -> tuple[int, int, int, int]:
        """(left, upper, right, lower) box as Pillow expects it."""
        return (self.x, self.y, self.x + self.width, self.y + self.height)


# ─────────────────────────────────────────────────────────────
# Output configuration
# ─────────────────────────────────────────────────────────────


class ImageResizeConfig(BaseModel):
    """Encoder settings for a resize session.

    Attributes:
        quality_jpg: JPEG quality (0-100)
        quality_webp: WEBP quality (0-100)
        quality_png: PNG compression level (0-9)
        quality_truecolor: If False, palette sources are written as palette PNGs
        gamma_correction: Resample in linear light (2.2 -> 1.0 -> 2.2)
        interlace: Interlace/progressive flag handed to the encoder
    """

    quality_jpg: int = Field(default=85, ge=0, le=100, description="JPEG output quality")
    quality_webp: int = Field(default=85, ge=0, le=100, description="WEBP output quality")
    quality_png: int = Field(default=6, ge=0, le=9, description="PNG compression level")
    quality_truecolor: bool = Field(
        default=True, description="Always write truecolor PNGs, even for palette sources"
    )
    gamma_correction: bool = Field(default=False, description="Gamma-correct around resample")
    interlace: int = Field(default=1, ge=0, description="Interlace flag passed to the encoder")

    model_config: ClassVar[ConfigDict] = {
        "validate_assignment": True,
    }

    def resolve_quality(self, image_format: ImageFormat, quality: int | None) -> int | None:
        """Pick the effective encoder quality for a save call.

        Out-of-range or missing values fall back to the configured default.
        GIF and BMP have no quality setting and always return None.
        """
        if quality is not None:
            quality = abs(int(quality))

        if image_format == ImageFormat.JPEG:
            if quality is None or quality > 100:
                return self.quality_jpg
            return quality

        if image_format == ImageFormat.WEBP:
            if quality is None:
                return self.quality_webp
            return min(quality, 100)

        if image_format == ImageFormat.PNG:
            if quality is None or quality > 9:
                return self.quality_png
            return quality

        return None


DEFAULT_CONFIG = ImageResizeConfig()
