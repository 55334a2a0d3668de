"""cl_image_resize - Resize, fit, scale and crop images with EXIF orientation correction."""

from .codec import BitmapCodec, DecodedImage, FlipAxis, PillowCodec
from .common.errors import (
    CanvasError,
    ConfigError,
    DecodeError,
    EncodeError,
    ImageLoadError,
    ImageResizeError,
    OrientationError,
    ResampleError,
    UnsupportedFormatError,
    WriteError,
)
from .common.schemas import DEFAULT_CONFIG, ImageFormat, ImageResizeConfig, PixelRect
from .filters import EffectFilter, FilterKind, FilterPipeline, PixelFilter
from .geometry import CropAnchor, Dimensions, Orientation, crop_offset, resolve_orientation
from .image_resize import ImageResize

__version__ = "0.1.0"

__all__ = [
    "ImageResize",
    "Dimensions",
    "CropAnchor",
    "crop_offset",
    "Orientation",
    "resolve_orientation",
    "BitmapCodec",
    "DecodedImage",
    "FlipAxis",
    "PillowCodec",
    "EffectFilter",
    "FilterKind",
    "FilterPipeline",
    "PixelFilter",
    "DEFAULT_CONFIG",
    "ImageFormat",
    "ImageResizeConfig",
    "PixelRect",
    "ImageResizeError",
    "ImageLoadError",
    "DecodeError",
    "UnsupportedFormatError",
    "OrientationError",
    "CanvasError",
    "ConfigError",
    "ResampleError",
    "EncodeError",
    "WriteError",
    "__version__",
]
