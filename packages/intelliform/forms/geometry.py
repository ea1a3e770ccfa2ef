"""Map caller placement coordinates into a page's native coordinate space."""

from __future__ import annotations

from ..core.exceptions import MalformedStructureError
from ..core.model import PageInfo, Rect

__all__ = ["transform_point", "rotate_quarter", "transform_rect"]


def transform_point(rotation: int, x: float, y: float, width: float, height: float) -> tuple[float, float]:
    """Transform ``(x, y)`` given against the unrotated ``width`` x ``height`` box."""

    if rotation == 0:
        return x, y
    if rotation == 90:
        return y, width - x
    if rotation == 180:
        return width - x, height - y
    if rotation == 270:
        return height - y, x
    raise MalformedStructureError(f"Unsupported page rotation: {rotation}")


def rotate_quarter(x: float, y: float, width: float, height: float) -> tuple[float, float, float, float]:
    """Apply one 90 degree step and return the point plus the rotated box size.

    Four consecutive steps return the original point and box.
    """

    new_x, new_y = transform_point(90, x, y, width, height)
    return new_x, new_y, height, width


def transform_rect(page: PageInfo, rect: Rect) -> Rect:
    x, y = transform_point(page.rotation, rect.x, rect.y, page.width, page.height)
    return Rect.from_placement(x, y, rect.width, rect.height)
