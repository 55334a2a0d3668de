from .pillow_codec import PillowCodec
from .protocol import BitmapCodec, DecodedImage, FlipAxis

__all__ = ["BitmapCodec", "DecodedImage", "FlipAxis", "PillowCodec"]
