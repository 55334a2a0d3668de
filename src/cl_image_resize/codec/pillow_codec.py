"""Pillow implementation of the bitmap codec protocol."""

import os
from io import BytesIO
from pathlib import Path

import numpy as np
from loguru import logger
from PIL import ExifTags, Image, ImageOps, UnidentifiedImageError

from ..common.errors import DecodeError, EncodeError, UnsupportedFormatError
from ..common.schemas import INPUT_FORMATS, OUTPUT_FORMATS, ImageFormat, PixelRect
from .protocol import DecodedImage, FlipAxis

# Modes Pillow can resample directly
_WORKING_MODES = ("RGB", "RGBA")
_NON_TRUECOLOR_MODES = ("1", "P", "PA")

# Background fill per output format: (mode, color)
_CANVAS_BACKGROUND: dict[ImageFormat, tuple[str, tuple[int, ...]]] = {
    ImageFormat.GIF: ("RGBA", (255, 255, 255, 0)),
    ImageFormat.JPEG: ("RGB", (255, 255, 255)),
    ImageFormat.WEBP: ("RGBA", (255, 255, 255, 255)),
    ImageFormat.PNG: ("RGBA", (255, 255, 255, 0)),
}


class PillowCodec:
    """Bitmap codec backed by Pillow.

    Bitmaps are ``PIL.Image.Image`` instances normalized to RGB or RGBA on
    decode, so every later primitive works on a truecolor buffer.
    """

    def __init__(self, resample: Image.Resampling = Image.Resampling.LANCZOS) -> None:
        self.resample_filter: Image.Resampling = resample

    def decode(self, source: bytes | str | Path) -> DecodedImage:
        fp = BytesIO(source) if isinstance(source, (bytes, bytearray)) else Path(source)

        try:
            img = Image.open(fp)
        except UnidentifiedImageError as exc:
            raise DecodeError(f"Could not identify image data: {exc}") from exc
        except (OSError, ValueError) as exc:
            raise DecodeError(f"Decoding image failed: {exc}") from exc

        try:
            img.load()
        except (OSError, ValueError) as exc:
            img.close()
            raise DecodeError(f"Decoding image failed: {exc}") from exc

        image_format = ImageFormat.from_pil(img.format)
        if image_format is None or image_format not in INPUT_FORMATS:
            pil_format = img.format
            img.close()
            raise UnsupportedFormatError(f"Unsupported image type: {pil_format}")

        orientation: int | None = None
        if image_format == ImageFormat.JPEG:
            tag = img.getexif().get(ExifTags.Base.Orientation)
            orientation = tag if isinstance(tag, int) else None

        source_mode = img.mode
        truecolor = source_mode not in _NON_TRUECOLOR_MODES
        bitmap = self._normalize_mode(img)

        logger.debug(
            f"Decoded {image_format.value} {bitmap.width}x{bitmap.height} "
            f"(mode={source_mode}, orientation={orientation})"
        )

        return DecodedImage(
            bitmap=bitmap,
            width=bitmap.width,
            height=bitmap.height,
            format=image_format,
            orientation=orientation,
            truecolor=truecolor,
        )

    def size(self, bitmap: Image.Image) -> tuple[int, int]:
        return bitmap.size

    def rotate(self, bitmap: Image.Image, degrees: int) -> Image.Image:
        """Rotate counter-clockwise, growing the canvas to fit."""
        return bitmap.rotate(degrees, expand=True)

    def flip(self, bitmap: Image.Image, axis: FlipAxis) -> Image.Image:
        if axis == FlipAxis.HORIZONTAL:
            return ImageOps.mirror(bitmap)
        if axis == FlipAxis.VERTICAL:
            return ImageOps.flip(bitmap)
        raise ValueError(f"Unknown flip axis: {axis}")

    def allocate_canvas(self, width: int, height: int, image_format: ImageFormat) -> Image.Image:
        if width < 1 or height < 1:
            raise ValueError(f"Canvas size must be positive, got {width}x{height}")
        if image_format not in _CANVAS_BACKGROUND:
            raise ValueError(f"No canvas preparation for {image_format.value}")

        mode, color = _CANVAS_BACKGROUND[image_format]
        return Image.new(mode, (width, height), color)

    def resample(
        self,
        canvas: Image.Image,
        bitmap: Image.Image,
        dest: PixelRect,
        source: PixelRect,
    ) -> bool:
        """Scale the ``source`` region of ``bitmap`` into ``dest`` on ``canvas``.

        Opaque canvases blend a transparent source over the background; canvases
        with an alpha channel take the source pixels (alpha included) verbatim.
        """
        if dest.width < 1 or dest.height < 1 or source.width < 1 or source.height < 1:
            return False

        region = bitmap.resize(
            (dest.width, dest.height),
            self.resample_filter,
            box=source.box,
        )

        if "A" in region.getbands() and "A" not in canvas.getbands():
            canvas.paste(region, (dest.x, dest.y), mask=region.getchannel("A"))
        else:
            if region.mode != canvas.mode:
                region = region.convert(canvas.mode)
            canvas.paste(region, (dest.x, dest.y))
        return True

    def apply_gamma(
        self, bitmap: Image.Image, input_gamma: float, output_gamma: float
    ) -> Image.Image:
        """Apply ``out = 255 * (in / 255) ** (input_gamma / output_gamma)`` to color bands."""
        exponent = input_gamma / output_gamma
        lut = np.clip(np.rint(255.0 * np.power(np.arange(256) / 255.0, exponent)), 0, 255)
        table = lut.astype(np.uint8).tolist()

        bands = bitmap.getbands()
        # Alpha is not a light intensity, leave it linear
        identity = list(range(256))
        full_table: list[int] = []
        for band in bands:
            full_table.extend(identity if band == "A" else table)

        return bitmap.point(full_table)

    def encode(
        self,
        canvas: Image.Image,
        image_format: ImageFormat,
        quality: int | None,
        *,
        interlace: bool = False,
        palette: bool = False,
    ) -> bytes:
        if image_format not in OUTPUT_FORMATS:
            raise EncodeError(f"Unsupported output format: {image_format.value}")

        save_kwargs: dict[str, object] = {}
        image = canvas

        if image_format in (ImageFormat.JPEG, ImageFormat.WEBP) and quality is not None:
            save_kwargs["quality"] = quality

        if image_format == ImageFormat.JPEG:
            if image.mode != "RGB":
                image = image.convert("RGB")
            save_kwargs["progressive"] = interlace

        elif image_format == ImageFormat.PNG:
            if quality is not None:
                save_kwargs["compress_level"] = quality
            if palette:
                image = image.quantize(method=Image.Quantize.FASTOCTREE)

        elif image_format == ImageFormat.GIF:
            save_kwargs["interlace"] = interlace

        buffer = BytesIO()
        try:
            image.save(buffer, format=image_format.pil_name, **save_kwargs)
        finally:
            if image is not canvas:
                image.close()

        return buffer.getvalue()

    def write(self, data: bytes, path: str | Path, permissions: int | None = None) -> None:
        target = Path(path)
        _ = target.write_bytes(data)
        if permissions:
            os.chmod(target, permissions)

    def release(self, bitmap: Image.Image) -> None:
        bitmap.close()

    def _normalize_mode(self, img: Image.Image) -> Image.Image:
        if img.mode in _WORKING_MODES:
            return img

        has_alpha = "A" in img.getbands() or "transparency" in img.info
        converted = img.convert("RGBA" if has_alpha else "RGB")
        img.close()
        return converted
