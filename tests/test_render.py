from dataclasses import replace
from unittest.mock import patch

import pytest

from paystub_generator.core import StubDocument, compute_totals
from paystub_generator.render import BASE_WIDTH, draw_stub, rasterize_document, _table_rows
from paystub_generator.settings import DEFAULT_SETTINGS


@pytest.mark.integration
def test_rasterize_uses_scale_and_background(small_document):
    result = rasterize_document(small_document, scale=1.5)
    assert result.ok
    assert result.image is not None
    assert result.image.width == int(BASE_WIDTH * 1.5)
    assert result.image.getpixel((0, 0)) == (255, 255, 255)


@pytest.mark.integration
def test_height_grows_with_items(small_document, long_document):
    short = rasterize_document(small_document).image
    tall = rasterize_document(long_document).image
    assert short is not None and tall is not None
    assert short.width == tall.width == BASE_WIDTH * 2
    assert tall.height > short.height


@pytest.mark.integration
def test_empty_document_renders():
    result = rasterize_document(StubDocument())
    assert result.ok


@pytest.mark.unit
def test_mileage_sub_row_only_for_eligible_items_with_miles(small_document):
    rows = _table_rows(small_document, DEFAULT_SETTINGS)
    mileage_rows = [row for row in rows if row[5]]
    assert len(rows) == len(small_document.items) + 1
    assert mileage_rows == [("Mileage (Photo Capture)", "", "62", "$0.20/mi", "$12.40", True)]


@pytest.mark.unit
def test_rasterizer_failure_becomes_result(small_document):
    with patch("paystub_generator.render.draw_stub", side_effect=MemoryError("out of memory")):
        result = rasterize_document(small_document)
    assert not result.ok
    assert result.reason == "Failed to render document: out of memory"


@pytest.mark.integration
def test_custom_background_and_no_contact_lines(small_document):
    settings = replace(DEFAULT_SETTINGS, background_color="#000000", company_contact_lines=())
    image = draw_stub(small_document, compute_totals(small_document.items), settings=settings, scale=1)
    assert image.getpixel((0, 0)) == (0, 0, 0)
    assert image.height < rasterize_document(small_document, scale=1).image.height
