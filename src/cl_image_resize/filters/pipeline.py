"""Ordered pixel filter pipeline applied to the destination canvas."""

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol, runtime_checkable

from loguru import logger
from PIL import Image


class FilterKind(StrEnum):
    NEGATE = "negate"
    GRAYSCALE = "grayscale"
    EDGE_DETECT = "edge_detect"
    EMBOSS = "emboss"
    GAUSSIAN_BLUR = "gaussian_blur"
    SMOOTH = "smooth"
    MEAN_REMOVAL = "mean_removal"


@runtime_checkable
class PixelFilter(Protocol):
    def apply(self, canvas: Image.Image, kind: FilterKind) -> Image.Image: ...


@dataclass(frozen=True)
class FilterEntry:
    filter: PixelFilter
    kind: FilterKind = FilterKind.NEGATE


class FilterPipeline:
    """Filters run once per save, in registration order, each with the kind
    it was registered with. A failing filter aborts the run."""

    def __init__(self) -> None:
        self._entries: list[FilterEntry] = []

    def add(self, pixel_filter: PixelFilter, kind: FilterKind | str = FilterKind.NEGATE) -> None:
        if not isinstance(pixel_filter, PixelFilter):
            raise TypeError(f"{pixel_filter!r} does not implement PixelFilter.apply()")
        self._entries.append(FilterEntry(pixel_filter, FilterKind(kind)))

    @property
    def entries(self) -> list[FilterEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def run(
        self,
        canvas: Image.Image,
        release: Callable[[Image.Image], None] | None = None,
    ) -> Image.Image:
        """Apply every registered filter to ``canvas``.

        When a filter returns a new bitmap, the one it replaced is handed to
        ``release``. If a filter raises, intermediate bitmaps are released and
        the exception propagates; ``canvas`` itself stays owned by the caller.
        """
        current = canvas
        for entry in self._entries:
            try:
                result = entry.filter.apply(current, entry.kind)
            except Exception:
                if current is not canvas and release is not None:
                    release(current)
                raise

            logger.debug(f"Applied filter {type(entry.filter).__name__} ({entry.kind})")
            if result is not current and current is not canvas and release is not None:
                release(current)
            current = result
        return current
