#!/usr/bin/env python3
"""
Generates sample stub document JSON fixtures for manual and E2E testing.
"""

import sys
from decimal import Decimal
from pathlib import Path

from paystub_generator.core import Contractor, LineItem, PayPeriod, StubDocument
from paystub_generator.payload import write_document


def sample_document(item_count: int = 4) -> StubDocument:
    """A small stub with one mileage-eligible item; extra items are office administration lines."""
    items = [
        LineItem(
            item_id="fx-photo",
            category="Photo Capture",
            quantity=3,
            rate=Decimal("45.00"),
            miles=62,
            note="Three claims, Louisville",
        ),
        LineItem(item_id="fx-estimate", category="Estimate Writing", quantity=2, rate=Decimal("60.00"), note="Auto estimates"),
        LineItem(item_id="fx-nada", category="NADA Research", quantity=1, rate=Decimal("15.50")),
        # Miles on a non-eligible category must not be reimbursed.
        LineItem(item_id="fx-books", category="Bookkeeping", quantity=Decimal("1.5"), rate=Decimal("20.00"), miles=40),
    ]
    for index in range(len(items), item_count):
        items.append(
            LineItem(
                item_id=f"fx-extra-{index}",
                category="Office Administration",
                quantity=1,
                rate=Decimal("10.00"),
                note=f"Entry {index}",
            )
        )
    return StubDocument(
        contractor=Contractor(name="Jane Doe", email="jane@example.com", contractor_id="C-1001"),
        period=PayPeriod(start="2024-05-16", end="2024-05-31", pay_date="2024-06-05"),
        paid_via="Zelle",
        items=tuple(items[:item_count]),
    )


def main_gen(output_dir: Path) -> list[Path]:
    output_dir.mkdir(parents=True, exist_ok=True)

    written = []
    # 1. Single-page stub
    # 2. Stub long enough to spill onto several pages
    for name, count in [("stub_small.json", 4), ("stub_multipage.json", 80)]:
        path = output_dir / name
        write_document(path, sample_document(count))
        print(f"Generated stub document: {path}")
        written.append(path)
    return written


def main() -> None:
    out = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("stub_fixtures")
    main_gen(out)


if __name__ == "__main__":
    main()
