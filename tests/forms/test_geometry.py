from __future__ import annotations

import pytest

from intelliform.core.exceptions import MalformedStructureError
from intelliform.core.model import PageInfo, Rect
from intelliform.forms.geometry import rotate_quarter, transform_point, transform_rect


@pytest.mark.parametrize(
    ("rotation", "expected"),
    [(0, (100, 200)), (90, (200, 512)), (180, (512, 592)), (270, (592, 100))],
)
def test_transform_point_on_letter_page(rotation, expected) -> None:
    assert transform_point(rotation, 100, 200, 612, 792) == expected


def test_four_quarter_turns_return_to_start() -> None:
    for x, y, width, height in [(0, 0, 612, 792), (100, 200, 612, 792), (37.5, 12.25, 300, 150)]:
        state = (x, y, width, height)
        for _ in range(4):
            state = rotate_quarter(*state)
        assert state == pytest.approx((x, y, width, height))


def test_unknown_rotation_is_rejected() -> None:
    with pytest.raises(MalformedStructureError):
        transform_point(45, 0, 0, 10, 10)


def test_transform_rect_keeps_size() -> None:
    page = PageInfo(index=0, width=612, height=792, rotation=90)
    rect = transform_rect(page, Rect.from_placement(100, 200, 150, 20))

    assert (rect.x, rect.y) == (200, 512)
    assert (rect.width, rect.height) == (150, 20)


def test_transform_rect_identity_without_rotation() -> None:
    page = PageInfo(index=0, width=612, height=792)
    original = Rect(10, 20, 30, 40)

    assert transform_rect(page, original) == original
