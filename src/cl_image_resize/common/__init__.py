"""Common module - errors and configuration schemas."""

from .errors import (
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
from .schemas import (
    DEFAULT_CONFIG,
    INPUT_FORMATS,
    OUTPUT_FORMATS,
    ImageFormat,
    ImageResizeConfig,
    PixelRect,
)

__all__ = [
    "CanvasError",
    "ConfigError",
    "DecodeError",
    "EncodeError",
    "ImageLoadError",
    "ImageResizeError",
    "OrientationError",
    "ResampleError",
    "UnsupportedFormatError",
    "WriteError",
    "DEFAULT_CONFIG",
    "INPUT_FORMATS",
    "OUTPUT_FORMATS",
    "ImageFormat",
    "ImageResizeConfig",
    "PixelRect",
]
