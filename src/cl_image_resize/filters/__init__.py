from .effects import EffectFilter
from .pipeline import FilterEntry, FilterKind, FilterPipeline, PixelFilter

__all__ = ["EffectFilter", "FilterEntry", "FilterKind", "FilterPipeline", "PixelFilter"]
