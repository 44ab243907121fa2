"""
Slice one tall rendered bitmap into fixed-size output pages.

`paginate` is pure arithmetic over four dimensions. `crop_page_slices` is the
separate step that cuts the actual pixels for each descriptor.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from fractions import Fraction
from typing import Iterator, Union

from PIL import Image

Dimension = Union[int, float, Decimal, Fraction]


class InvalidDimensions(ValueError):
    """Raised when a source or page dimension is not strictly positive."""

    def __init__(self, name: str, value: object) -> None:
        super().__init__(f"{name} must be greater than zero (got {value!r})")
        self.name = name
        self.value = value


@dataclass(frozen=True)
class PageDescriptor:
    page_number: int
    source_offset: int
    slice_height: int
    target_width: float
    target_height: float
    scale: float

    @property
    def source_end(self) -> int:
        return self.source_offset + self.slice_height


def _check_dimension(name: str, value: Dimension) -> Fraction:
    if isinstance(value, bool):
        raise InvalidDimensions(name, value)
    try:
        exact = Fraction(value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise InvalidDimensions(name, value) from exc
    if exact <= 0:
        raise InvalidDimensions(name, value)
    return exact


def paginate(
    source_width: Dimension,
    source_height: Dimension,
    page_width: Dimension,
    page_height: Dimension,
) -> list[PageDescriptor]:
    """
    Plan the pages for a `source_width` x `source_height` bitmap.

    The source is scaled uniformly so its width fills `page_width`. If the scaled
    height fits within `page_height` a single page is produced; otherwise the source
    is walked top to bottom in slices of `floor(page_height / scale)` rows, the last
    slice taking whatever remains. When a page cannot hold even one scaled row, the
    whole source goes on one oversized page.

    Raises:
        InvalidDimensions: If any dimension is not strictly positive.
    """
    src_w = _check_dimension("source_width", source_width)
    src_h = _check_dimension("source_height", source_height)
    page_w = _check_dimension("page_width", page_width)
    page_h = _check_dimension("page_height", page_height)

    scale = page_w / src_w
    total_rows = math.ceil(src_h)

    if src_h * scale <= page_h:
        return [
            PageDescriptor(
                page_number=1,
                source_offset=0,
                slice_height=total_rows,
                target_width=float(page_w),
                target_height=float(total_rows * scale),
                scale=float(scale),
            )
        ]

    slice_px = math.floor(page_h / scale)
    if slice_px <= 0:
        slice_px = total_rows

    return list(_walk_slices(total_rows, slice_px, scale, page_w))


def _walk_slices(total_rows: int, slice_px: int, scale: Fraction, page_w: Fraction) -> Iterator[PageDescriptor]:
    offset = 0
    page_number = 1
    while offset < total_rows:
        height = min(slice_px, total_rows - offset)
        yield PageDescriptor(
            page_number=page_number,
            source_offset=offset,
            slice_height=height,
            target_width=float(page_w),
            target_height=float(height * scale),
            scale=float(scale),
        )
        offset += height
        page_number += 1


def crop_page_slices(image: Image.Image, pages: list[PageDescriptor]) -> Iterator[Image.Image]:
    """Yield the full-width pixel slice of `image` for each descriptor, in page order."""
    for page in pages:
        yield image.crop((0, page.source_offset, image.width, page.source_end))
