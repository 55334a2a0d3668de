"""Crop anchors and the offset they select inside the excess region."""

from enum import StrEnum

from loguru import logger


class CropAnchor(StrEnum):
    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"
    CENTER_TOP = "center-top"

    @classmethod
    def _missing_(cls, value: object) -> "CropAnchor | None":
        if isinstance(value, str):
            normalized = value.strip().lower().replace("_", "-")
            if normalized == "centre":
                return cls.CENTER
            if normalized in ("centre-top", "top-center", "top-centre"):
                return cls.CENTER_TOP
            for member in cls:
                if member.value == normalized:
                    return member
        return None


def crop_offset(excess: float, anchor: CropAnchor | str = CropAnchor.CENTER) -> float:
    """
    Offset into the source axis for a crop window.

    Args:
        excess: Length of the source axis that will be trimmed away
        anchor: Which part of the axis to keep

    Returns:
        ``excess`` for bottom/right, half of it for center, a quarter for
        center-top (slightly above center), and 0 for top/left or any
        unrecognized anchor.
    """
    try:
        resolved = CropAnchor(anchor)
    except ValueError:
        logger.debug(f"Unknown crop anchor {anchor!r}, keeping the leading edge")
        return 0

    if resolved in (CropAnchor.BOTTOM, CropAnchor.RIGHT):
        return excess
    if resolved == CropAnchor.CENTER:
        return excess / 2
    if resolved == CropAnchor.CENTER_TOP:
        return excess / 4
    return 0
