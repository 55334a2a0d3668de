from typing import override


class ImageResizeError(Exception):
    """
    Base class for every failure raised by cl_image_resize.

    All errors are fatal to the current call chain. The message names the
    primitive that failed.
    """

    def __init__(self, message: str = "An unknown image resize error occurred."):
        self.message: str = message
        super().__init__(self.message)

    @override
    def __str__(self):
        return f"{type(self).__name__}: {self.message}"


class ImageLoadError(ImageResizeError):
    """Missing filename, unreadable file or empty data."""


class DecodeError(ImageLoadError):
    """The codec could not decode the input."""


class UnsupportedFormatError(ImageLoadError):
    """The input decoded, but its format is not one we accept."""


class OrientationError(ImageLoadError):
    """Rotating or flipping the decoded bitmap failed."""


class CanvasError(ImageResizeError):
    """Destination canvas allocation or background fill failed."""


class ResampleError(ImageResizeError):
    """Resampling (or the gamma pass around it) failed."""


class EncodeError(ImageResizeError):
    """Encoding the canvas to the output format failed."""


class WriteError(ImageResizeError):
    """Persisting the encoded bytes or setting permissions failed."""


class ConfigError(ImageResizeError, ValueError):
    """A session setting was given a value outside its allowed range."""
