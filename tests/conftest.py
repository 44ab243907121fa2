import pytest
from typing import Any

from paystub_generator.core import Contractor, LineItem, PayPeriod, StubDocument
from paystub_generator.testing.fixtures import sample_document


@pytest.fixture
def small_document() -> StubDocument:
    """Four items, one of them mileage-eligible."""
    return sample_document(4)


@pytest.fixture
def long_document() -> StubDocument:
    """Enough items that the rendered stub spans several A4 pages."""
    return sample_document(80)


@pytest.fixture
def blank_document() -> StubDocument:
    return StubDocument(
        contractor=Contractor(name="  Jane   Doe!! "),
        period=PayPeriod(end="2024-05-31"),
        items=(LineItem(item_id="a", category="Others", quantity="", rate="", miles=""),),
    )


@pytest.fixture
def legacy_payload() -> dict[str, Any]:
    """The web form's original state shape, before schema_version existed."""
    return {
        "contractor": {"name": "Jane Doe", "email": "jane@example.com", "id": "C-1001"},
        "period": {"start": "2024-05-16", "end": "2024-05-31", "payDate": "2024-06-05"},
        "paidVia": "Venmo",
        "items": [
            {"id": "k1", "category": "Photo Capture", "qty": "1", "rate": "5", "miles": "30", "note": ""},
            {"id": "k2", "category": "Bookkeeping", "qty": 2, "rate": 10, "miles": 50, "note": "Ledger"},
        ],
    }


@pytest.fixture
def current_payload() -> dict[str, Any]:
    return {
        "schema_version": "1.0.0",
        "contractor": {"name": "Jane Doe", "email": "", "contractor_id": ""},
        "period": {"start": "", "end": "2024-05-31", "pay_date": ""},
        "paid_via": "Check",
        "items": [
            {"id": "x1", "category": "Photo Capture", "quantity": 1, "rate": 5, "miles": 30, "note": "", "date": None},
        ],
    }
