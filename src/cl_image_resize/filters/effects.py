"""Built-in pixel filters implemented with Pillow."""

from collections.abc import Callable

from PIL import Image, ImageFilter, ImageOps

from .pipeline import FilterKind

_MEAN_REMOVAL = ImageFilter.Kernel((3, 3), [-1, -1, -1, -1, 9, -1, -1, -1, -1], scale=1)


class EffectFilter:
    """PixelFilter covering every FilterKind.

    The color bands are filtered; an alpha channel is carried over untouched.
    """

    def __init__(self, blur_radius: float = 1.0) -> None:
        self.blur_radius: float = blur_radius
        self._ops: dict[FilterKind, Callable[[Image.Image], Image.Image]] = {
            FilterKind.NEGATE: ImageOps.invert,
            FilterKind.GRAYSCALE: lambda img: ImageOps.grayscale(img).convert("RGB"),
            FilterKind.EDGE_DETECT: lambda img: img.filter(ImageFilter.FIND_EDGES),
            FilterKind.EMBOSS: lambda img: img.filter(ImageFilter.EMBOSS),
            FilterKind.GAUSSIAN_BLUR: lambda img: img.filter(
                ImageFilter.GaussianBlur(self.blur_radius)
            ),
            FilterKind.SMOOTH: lambda img: img.filter(ImageFilter.SMOOTH),
            FilterKind.MEAN_REMOVAL: lambda img: img.filter(_MEAN_REMOVAL),
        }

    def apply(self, canvas: Image.Image, kind: FilterKind) -> Image.Image:
        op = self._ops.get(FilterKind(kind))
        if op is None:
            raise ValueError(f"Unsupported filter kind: {kind}")

        alpha = canvas.getchannel("A") if "A" in canvas.getbands() else None
        rgb = canvas if canvas.mode == "RGB" else canvas.convert("RGB")

        result = op(rgb)
        if result.mode != "RGB":
            result = result.convert("RGB")

        if alpha is not None:
            result.putalpha(alpha)
        elif canvas.mode != "RGB":
            result = result.convert(canvas.mode)
        return result
