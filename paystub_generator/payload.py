from __future__ import annotations

import json
import re
from decimal import Decimal
from pathlib import Path
from typing import Any

from paystub_generator.core import (
    CATEGORIES,
    Contractor,
    LineItem,
    PayPeriod,
    StubDocument,
    Totals,
    as_float,
    new_item_id,
)
from paystub_generator.utils.contracts import ContractError, validate_output
from paystub_generator.utils.migration import CURRENT_SCHEMA_VERSION, migrate_stub_document

DECIMAL_LITERAL_RE = re.compile(r"^-?\d+(\.\d+)?$")


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _raw_number(value: Any) -> Any:
    # Plain decimal text becomes Decimal; anything else stays as typed for coerce_amount.
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, str) and DECIMAL_LITERAL_RE.match(value.strip()):
        return Decimal(value.strip())
    return value


def item_from_payload(row: dict[str, Any]) -> LineItem:
    return LineItem(
        item_id=_text(row.get("id")) or new_item_id(),
        category=_text(row.get("category")) or CATEGORIES[0],
        quantity=_raw_number(row.get("quantity", 0)),
        rate=_raw_number(row.get("rate", 0)),
        miles=_raw_number(row.get("miles", 0)),
        note=_text(row.get("note")),
        date=row.get("date") or None,
    )


def document_from_payload(payload: dict[str, Any], mode: str = "FILING") -> StubDocument:
    """
    Build a StubDocument from a JSON payload, upgrading legacy shapes first.

    Raises:
        ContractError: If the migrated payload violates `stub_document.json` (FILING mode).
    """
    if not isinstance(payload, dict):
        raise ContractError("Data Contract Violation (stub_document): payload must be a JSON object")
    migrated = migrate_stub_document(payload)
    validate_output(migrated, "stub_document", mode=mode)

    contractor = migrated.get("contractor") or {}
    period = migrated.get("period") or {}
    return StubDocument(
        contractor=Contractor(
            name=_text(contractor.get("name")),
            email=_text(contractor.get("email")),
            contractor_id=_text(contractor.get("contractor_id")),
        ),
        period=PayPeriod(
            start=_text(period.get("start")),
            end=_text(period.get("end")),
            pay_date=_text(period.get("pay_date")),
        ),
        paid_via=_text(migrated.get("paid_via")),
        items=tuple(item_from_payload(row) for row in migrated.get("items") or []),
    )


def _number_to_json(value: Any) -> Any:
    # Decimals are written as strings so no digits are lost to float.
    if isinstance(value, Decimal):
        return str(value)
    return value


def document_to_payload(document: StubDocument) -> dict[str, Any]:
    return {
        "schema_version": CURRENT_SCHEMA_VERSION,
        "contractor": {
            "name": document.contractor.name,
            "email": document.contractor.email,
            "contractor_id": document.contractor.contractor_id,
        },
        "period": {
            "start": document.period.start,
            "end": document.period.end,
            "pay_date": document.period.pay_date,
        },
        "paid_via": document.paid_via,
        "items": [
            {
                "id": item.item_id,
                "category": item.category,
                "quantity": _number_to_json(item.quantity),
                "rate": _number_to_json(item.rate),
                "miles": _number_to_json(item.miles),
                "note": item.note,
                "date": item.date,
            }
            for item in document.items
        ],
    }


def totals_to_json(totals: Totals) -> dict[str, Any]:
    return {
        "earnings": as_float(totals.earnings),
        "mileage": as_float(totals.mileage),
        "net": as_float(totals.net),
    }


def read_document(path: Path) -> StubDocument:
    with path.open("r", encoding="utf-8") as handle:
        data: dict[str, Any] = json.load(handle)
    return document_from_payload(data)


def write_document(path: Path, document: StubDocument) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(document_to_payload(document), indent=2), encoding="utf-8")
