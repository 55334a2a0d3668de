"""Image resize session: load, plan geometry, resample and save."""

from pathlib import Path
from types import TracebackType
from typing import Self

from loguru import logger
from PIL import Image
from pydantic import ValidationError

from .codec import BitmapCodec, PillowCodec
from .common.errors import (
    CanvasError,
    ConfigError,
    EncodeError,
    ImageLoadError,
    ImageResizeError,
    ResampleError,
    WriteError,
)
from .common.schemas import DEFAULT_CONFIG, OUTPUT_FORMATS, ImageFormat, ImageResizeConfig
from .filters import FilterKind, FilterPipeline, PixelFilter
from .geometry import planner
from .geometry.crop_anchor import CropAnchor
from .geometry.dimensions import Dimensions
from .geometry.orientation import apply_orientation
from .utils.profiling import timed

# Gamma of sRGB-ish sources; resampling happens in linear light when enabled
SOURCE_GAMMA = 2.2
LINEAR_GAMMA = 1.0


class ImageResize:
    """One loaded image and its current resize plan.

    Geometry calls are chainable and each one replaces the previous plan:

        ImageResize.from_file("photo.jpg").resize_to_best_fit(800, 800).save("out.jpg")

    Args:
        source: Path to an image file, or the raw encoded bytes
        codec: Bitmap codec to use (defaults to ``PillowCodec``)
        config: Encoder settings; copied, never mutated

    Raises:
        ImageLoadError: Missing filename, not a file, empty data, decode or
            orientation failure
    """

    def __init__(
        self,
        source: str | Path | bytes,
        *,
        codec: BitmapCodec | None = None,
        config: ImageResizeConfig | None = None,
    ) -> None:
        self.codec: BitmapCodec = codec if codec is not None else PillowCodec()
        self.config: ImageResizeConfig = (config or DEFAULT_CONFIG).model_copy()
        self.filters: FilterPipeline = FilterPipeline()
        self._closed: bool = False

        if isinstance(source, (bytes, bytearray)):
            if not source:
                raise ImageLoadError("image_data must not be empty")
            label = f"<{len(source)} bytes>"
        else:
            if not source:
                raise ImageLoadError("No filename given")
            source = Path(source)
            if not source.is_file():
                raise ImageLoadError(f"Not a file or valid datastream: {source}")
            label = str(source)

        try:
            decoded = self.codec.decode(source)
        except ImageResizeError:
            raise
        except (OSError, ValueError) as exc:
            logger.error(f"Could not read {label}: {exc}")
            raise ImageLoadError(f"Could not read file: {exc}") from exc

        bitmap, width, height = apply_orientation(self.codec, decoded.bitmap, decoded.orientation)

        self._bitmap: Image.Image = bitmap
        self.source_format: ImageFormat = decoded.format
        self.source_truecolor: bool = decoded.truecolor
        self._dims: Dimensions = Dimensions(original_w=width, original_h=height)

        logger.info(f"Loaded {label}: {decoded.format.value} {width}x{height}")

    @classmethod
    def from_file(
        cls,
        filename: str | Path,
        *,
        codec: BitmapCodec | None = None,
        config: ImageResizeConfig | None = None,
    ) -> Self:
        return cls(filename, codec=codec, config=config)

    @classmethod
    def from_bytes(
        cls,
        image_data: bytes,
        *,
        codec: BitmapCodec | None = None,
        config: ImageResizeConfig | None = None,
    ) -> Self:
        if not image_data:
            raise ImageLoadError("image_data must not be empty")
        return cls(bytes(image_data), codec=codec, config=config)

    # ─────────────────────────────────────────────────────────────
    # Plan inspection
    # ─────────────────────────────────────────────────────────────

    @property
    def dimensions(self) -> Dimensions:
        """Snapshot of the current plan."""
        return self._dims.model_copy()

    @property
    def original_width(self) -> int:
        return self._dims.original_w

    @property
    def original_height(self) -> int:
        return self._dims.original_h

    @property
    def dest_width(self) -> float:
        return self._dims.dest_w

    @property
    def dest_height(self) -> float:
        return self._dims.dest_h

    # ─────────────────────────────────────────────────────────────
    # Geometry (chainable, last call wins)
    # ─────────────────────────────────────────────────────────────

    def resize(self, width: float, height: float, allow_enlarge: bool = False) -> Self:
        _ = planner.resize(self._dims, width, height, allow_enlarge=allow_enlarge)
        return self

    def resize_to_width(self, width: float, allow_enlarge: bool = False) -> Self:
        _ = planner.resize_to_width(self._dims, width, allow_enlarge=allow_enlarge)
        return self

    def resize_to_height(self, height: float, allow_enlarge: bool = False) -> Self:
        _ = planner.resize_to_height(self._dims, height, allow_enlarge=allow_enlarge)
        return self

    def resize_to_short_side(self, max_short: float, allow_enlarge: bool = False) -> Self:
        _ = planner.resize_to_short_side(self._dims, max_short, allow_enlarge=allow_enlarge)
        return self

    def resize_to_long_side(self, max_long: float, allow_enlarge: bool = False) -> Self:
        _ = planner.resize_to_long_side(self._dims, max_long, allow_enlarge=allow_enlarge)
        return self

    def resize_to_best_fit(
        self, max_width: float, max_height: float, allow_enlarge: bool = False
    ) -> Self:
        _ = planner.resize_to_best_fit(
            self._dims, max_width, max_height, allow_enlarge=allow_enlarge
        )
        return self

    def scale(self, percent: float) -> Self:
        _ = planner.scale(self._dims, percent)
        return self

    def crop(
        self,
        width: float,
        height: float,
        allow_enlarge: bool = False,
        anchor: CropAnchor | str = CropAnchor.CENTER,
    ) -> Self:
        _ = planner.crop(self._dims, width, height, allow_enlarge=allow_enlarge, anchor=anchor)
        return self

    def freecrop(
        self, width: float, height: float, x: float | None = None, y: float | None = None
    ) -> Self:
        _ = planner.freecrop(self._dims, width, height, x, y)
        return self

    # ─────────────────────────────────────────────────────────────
    # Settings
    # ─────────────────────────────────────────────────────────────

    def add_filter(
        self, pixel_filter: PixelFilter, kind: FilterKind | str = FilterKind.NEGATE
    ) -> Self:
        self.filters.add(pixel_filter, kind)
        return self

    def gamma(self, enable: bool = True) -> Self:
        self.config.gamma_correction = enable
        return self

    def set_quality_jpeg(self, quality: int | None) -> Self:
        return self._set_quality("quality_jpg", quality)

    def set_quality_png(self, quality: int | None) -> Self:
        return self._set_quality("quality_png", quality)

    def set_quality_webp(self, quality: int | None) -> Self:
        return self._set_quality("quality_webp", quality)

    def _set_quality(self, field: str, quality: int | None) -> Self:
        """Store a quality setting; falsy values keep the current one.

        Raises:
            ConfigError: If the value is outside the range allowed for ``field``
        """
        if not quality:
            return self
        try:
            setattr(self.config, field, quality)
        except ValidationError as exc:
            raise ConfigError(f"Invalid {field} {quality!r}: {exc.errors()[0]['msg']}") from exc
        return self

    # ─────────────────────────────────────────────────────────────
    # Output
    # ─────────────────────────────────────────────────────────────

    @timed
    def save(
        self,
        filename: str | Path,
        image_type: ImageFormat | str | None = None,
        quality: int | None = None,
        permissions: int | None = None,
        exact_size: tuple[int, int] | None = None,
    ) -> Self:
        """
        Render the current plan and write it to ``filename``.

        Args:
            filename: Destination path
            image_type: Output format (defaults to the source format)
            quality: Encoder quality; out-of-range values use the configured default
            permissions: Optional file mode applied after writing (e.g. 0o644)
            exact_size: Fixed (width, height) canvas; the resized image is
                centered inside it

        Returns:
            self

        Raises:
            CanvasError, ResampleError, EncodeError, WriteError
        """
        data = self._render(image_type, quality, exact_size)

        try:
            self.codec.write(data, filename, permissions)
        except OSError as exc:
            logger.error(f"Writing {filename} failed: {exc}")
            raise WriteError(f"Storing image to {filename} failed: {exc}") from exc

        logger.info(f"Saved {filename} ({len(data)} bytes)")
        return self

    def get_image_as_bytes(
        self, image_type: ImageFormat | str | None = None, quality: int | None = None
    ) -> bytes:
        return self._render(image_type, quality, None)

    def __bytes__(self) -> bytes:
        return self.get_image_as_bytes()

    def close(self) -> None:
        if not self._closed:
            self.codec.release(self._bitmap)
            self._closed = True

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"ImageResize(format={self.source_format.value}, "
            f"original={self.original_width}x{self.original_height}, "
            f"dest={self.dest_width}x{self.dest_height})"
        )

    def _output_format(self, image_type: ImageFormat | str | None) -> ImageFormat:
        if not image_type:
            image_format = self.source_format
        else:
            resolved = ImageFormat.from_pil(str(image_type))
            if resolved is None:
                raise EncodeError(f"Unknown output format: {image_type}")
            image_format = resolved

        if image_format not in OUTPUT_FORMATS:
            raise EncodeError(f"Unsupported output format: {image_format.value}")
        return image_format

    def _render(
        self,
        image_type: ImageFormat | str | None,
        quality: int | None,
        exact_size: tuple[int, int] | None,
    ) -> bytes:
        if self._closed:
            raise ImageResizeError("Image has been closed")

        image_format = self._output_format(image_type)
        effective_quality = self.config.resolve_quality(image_format, quality)

        # Centering offsets only apply to this render, not to the session plan
        dims = self._dims.model_copy()
        if exact_size:
            canvas_w, canvas_h = int(exact_size[0]), int(exact_size[1])
            _ = planner.center_in_canvas(dims, canvas_w, canvas_h)
        else:
            canvas_w, canvas_h = dims.dest_size()
        dest, source = dims.to_pixel_rects()

        palette = (
            image_format == ImageFormat.PNG
            and not self.config.quality_truecolor
            and not self.source_truecolor
        )

        try:
            canvas = self.codec.allocate_canvas(canvas_w, canvas_h, image_format)
        except (OSError, ValueError) as exc:
            logger.error(f"Canvas allocation failed: {exc}")
            raise CanvasError(
                f"Error creating {image_format.mime_type} resource {canvas_w}x{canvas_h}: {exc}"
            ) from exc

        linear: Image.Image | None = None
        filtered: Image.Image | None = None
        try:
            bitmap = self._bitmap
            if self.config.gamma_correction:
                bitmap = self._gamma(bitmap, SOURCE_GAMMA, LINEAR_GAMMA)
                # In-place codecs return the session bitmap itself
                if bitmap is not self._bitmap:
                    linear = bitmap

            try:
                resampled = self.codec.resample(canvas, bitmap, dest, source)
            except (OSError, ValueError) as exc:
                logger.error(f"Resample failed: {exc}")
                raise ResampleError(f"Resample image failed: {exc}") from exc
            if not resampled:
                raise ResampleError("Resample image failed")

            if self.config.gamma_correction:
                corrected = self._gamma(canvas, LINEAR_GAMMA, SOURCE_GAMMA)
                if corrected is not canvas:
                    self.codec.release(canvas)
                    canvas = corrected

            filtered = self.filters.run(canvas, release=self.codec.release)

            try:
                return self.codec.encode(
                    filtered,
                    image_format,
                    effective_quality,
                    interlace=bool(self.config.interlace),
                    palette=palette,
                )
            except ImageResizeError:
                raise
            except (OSError, ValueError) as exc:
                logger.error(f"Encoding {image_format.value} failed: {exc}")
                raise EncodeError(f"Storing {image_format.value} image failed: {exc}") from exc
        finally:
            if filtered is not None and filtered is not canvas:
                self.codec.release(filtered)
            self.codec.release(canvas)
            if linear is not None:
                self.codec.release(linear)

    def _gamma(self, bitmap: Image.Image, input_gamma: float, output_gamma: float) -> Image.Image:
        try:
            return self.codec.apply_gamma(bitmap, input_gamma, output_gamma)
        except (OSError, ValueError) as exc:
            raise ResampleError(
                f"Image gamma correction ({input_gamma} -> {output_gamma}) failed: {exc}"
            ) from exc
