from paystub_generator.core import (
    CATEGORIES,
    MILE_RATE,
    MILEAGE_CATEGORY,
    Contractor,
    LineItem,
    PayPeriod,
    StubDocument,
    Totals,
    add_item,
    build_stub_filename,
    coerce_amount,
    compute_totals,
    document_filename,
    format_money,
    is_mileage_eligible,
    new_line_item,
    remove_item,
    update_item,
)
from paystub_generator.pagination import InvalidDimensions, PageDescriptor, crop_page_slices, paginate

__version__ = "0.1.0"

__all__ = [
    "CATEGORIES",
    "Contractor",
    "InvalidDimensions",
    "LineItem",
    "MILEAGE_CATEGORY",
    "MILE_RATE",
    "PageDescriptor",
    "PayPeriod",
    "StubDocument",
    "Totals",
    "add_item",
    "build_stub_filename",
    "coerce_amount",
    "compute_totals",
    "crop_page_slices",
    "document_filename",
    "format_money",
    "is_mileage_eligible",
    "new_line_item",
    "paginate",
    "remove_item",
    "update_item",
]
