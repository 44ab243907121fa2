"""
Export a stub document to a paginated PDF.

The sequence is: take an immutable snapshot of the document, compute totals,
rasterize, plan pages, crop each slice, write the PDF, then name and persist it.
Only one export may run per exporter at a time; a request that arrives while
another is in flight is rejected, not queued.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from PIL import Image

from paystub_generator.core import StubDocument, Totals, compute_totals, document_filename
from paystub_generator.pagination import InvalidDimensions, PageDescriptor, crop_page_slices, paginate
from paystub_generator.pdf_writer import PageImage, encode_png, write_paginated_pdf
from paystub_generator.render import RasterResult, rasterize_document
from paystub_generator.settings import DEFAULT_SETTINGS, StubSettings

logger = logging.getLogger(__name__)

STATUS_OK = "ok"
STATUS_BUSY = "busy"
STATUS_FAILED = "failed"

Rasterizer = Callable[[StubDocument, StubSettings, Totals], RasterResult]
DocumentWriter = Callable[[list[PageImage], Path, float, float], int]


@dataclass
class ExportOutcome:
    status: str
    message: str = ""
    path: Path | None = None
    totals: Totals | None = None
    pages: list[PageDescriptor] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status == STATUS_OK


def _default_rasterizer(document: StubDocument, settings: StubSettings, totals: Totals) -> RasterResult:
    return rasterize_document(document, settings=settings, totals=totals)


class StubExporter:
    def __init__(
        self,
        settings: StubSettings = DEFAULT_SETTINGS,
        rasterizer: Rasterizer = _default_rasterizer,
        writer: DocumentWriter = write_paginated_pdf,
    ) -> None:
        self.settings = settings
        self.rasterizer = rasterizer
        self.writer = writer
        self._in_flight = threading.Lock()

    @property
    def busy(self) -> bool:
        return self._in_flight.locked()

    def export(self, document: StubDocument, output_dir: Path) -> ExportOutcome:
        if not self._in_flight.acquire(blocking=False):
            logger.warning("Export requested while another export is running; ignoring request.")
            return ExportOutcome(status=STATUS_BUSY, message="An export is already in progress.")
        try:
            return self._run(document, output_dir)
        finally:
            self._in_flight.release()

    def _run(self, document: StubDocument, output_dir: Path) -> ExportOutcome:
        # StubDocument is frozen, so holding the reference is the snapshot.
        snapshot = document
        settings = self.settings
        totals = compute_totals(
            snapshot.items, mile_rate=settings.mile_rate, mileage_category=settings.mileage_category
        )
        output_path = output_dir / document_filename(snapshot)
        logger.info("Exporting %d item(s) to %s", len(snapshot.items), output_path)

        source: Image.Image | None = None
        try:
            raster = self.rasterizer(snapshot, settings, totals)
            if not raster.ok or raster.image is None:
                reason = raster.reason or "rasterizer returned no image"
                logger.error("Export failed: %s", reason)
                return ExportOutcome(status=STATUS_FAILED, message=f"Export failed: {reason}", totals=totals)
            source = raster.image

            pages = paginate(source.width, source.height, settings.page_width, settings.page_height)
            logger.info("Paginated %dx%d bitmap into %d page(s)", source.width, source.height, len(pages))

            page_images = []
            for descriptor, slice_image in zip(pages, crop_page_slices(source, pages)):
                try:
                    page_images.append(
                        PageImage(
                            png_bytes=encode_png(slice_image),
                            target_width=descriptor.target_width,
                            target_height=descriptor.target_height,
                        )
                    )
                finally:
                    slice_image.close()

            self.writer(page_images, output_path, settings.page_width, settings.page_height)
        except InvalidDimensions as exc:
            logger.error("Export failed: %s", exc)
            return ExportOutcome(status=STATUS_FAILED, message=f"Export failed: {exc}", totals=totals)
        except Exception as exc:
            logger.exception("Export to %s failed", output_path)
            return ExportOutcome(status=STATUS_FAILED, message=f"Export failed: {exc}", totals=totals)
        finally:
            if source is not None:
                source.close()

        return ExportOutcome(
            status=STATUS_OK,
            message=f"Saved {len(pages)} page(s) to {output_path}",
            path=output_path,
            totals=totals,
            pages=pages,
        )
