from __future__ import annotations

import io
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

import pypdfium2 as pdfium
from PIL import Image

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageImage:
    png_bytes: bytes
    target_width: float
    target_height: float


def encode_png(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def _place_image(pdf: pdfium.PdfDocument, page: pdfium.PdfPage, page_image: PageImage, page_height: float) -> None:
    with Image.open(io.BytesIO(page_image.png_bytes)) as pil_image:
        bitmap = pdfium.PdfBitmap.from_pil(pil_image.convert("RGB"))
    image_obj = pdfium.PdfImage.new(pdf)
    try:
        image_obj.set_bitmap(bitmap)
    finally:
        bitmap.close()
    # PDF space has its origin bottom-left; pin the slice to the top edge.
    matrix = pdfium.PdfMatrix().scale(page_image.target_width, page_image.target_height)
    matrix = matrix.translate(0, page_height - page_image.target_height)
    image_obj.set_matrix(matrix)
    page.insert_obj(image_obj)
    page.gen_content()


def write_paginated_pdf(
    pages: Iterable[PageImage],
    output_path: Path,
    page_width: float,
    page_height: float,
) -> int:
    """
    Write one fixed-size PDF page per PageImage, in the given order.

    Returns the number of pages written. The document is saved to a temporary
    file beside `output_path` and moved into place only once it is complete,
    so a failure leaves any existing file at `output_path` as it was.
    """
    pdf = pdfium.PdfDocument.new()
    count = 0
    temp_path: Path | None = None
    try:
        for page_image in pages:
            page = pdf.new_page(page_width, page_height)
            try:
                _place_image(pdf, page, page_image, page_height)
            finally:
                page.close()
            count += 1
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            dir=output_path.parent, prefix=f".{output_path.name}.", suffix=".tmp", delete=False
        ) as temp_file:
            temp_path = Path(temp_file.name)
            pdf.save(temp_file)
        os.replace(temp_path, output_path)
        temp_path = None
    finally:
        pdf.close()
        if temp_path is not None:
            temp_path.unlink(missing_ok=True)
    logger.debug("Wrote %d page(s) to %s", count, output_path)
    return count
