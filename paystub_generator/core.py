#!/usr/bin/env python3

from __future__ import annotations

import itertools
import random
import re
import time
from dataclasses import dataclass, field, replace
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Union

MILE_RATE = Decimal("0.20")
MILEAGE_CATEGORY = "Photo Capture"
CATEGORIES: tuple[str, ...] = (
    "Photo Capture",
    "Estimate Writing",
    "NADA Research",
    "Salvage Bid",
    "CCC Profile",
    "Photo Renaming",
    "Bookkeeping",
    "Office Administration",
    "Others",
)
PAYMENT_METHODS: tuple[str, ...] = ("Check", "Venmo", "Zelle", "Lemfi")
DOCUMENT_EXTENSION = "pdf"
ZERO = Decimal("0")
CENTS = Decimal("0.01")

UNSAFE_FILENAME_CHARS_RE = re.compile(r"[^A-Za-z0-9._-]")
WHITESPACE_RUN_RE = re.compile(r"\s+")
NUMERIC_NOISE_RE = re.compile(r"[,$\s]")
BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"
_ID_SEQUENCE = itertools.count()

# Raw field values as typed by the operator; blank strings are expected mid-edit.
NumericInput = Union[Decimal, int, float, str, None]


@dataclass(frozen=True)
class LineItem:
    item_id: str
    category: str = CATEGORIES[0]
    quantity: NumericInput = 0
    rate: NumericInput = 0
    miles: NumericInput = 0
    note: str = ""
    date: str | None = None


@dataclass(frozen=True)
class Contractor:
    name: str = ""
    email: str = ""
    contractor_id: str = ""


@dataclass(frozen=True)
class PayPeriod:
    start: str = ""
    end: str = ""
    pay_date: str = ""


@dataclass(frozen=True)
class StubDocument:
    contractor: Contractor = field(default_factory=Contractor)
    period: PayPeriod = field(default_factory=PayPeriod)
    paid_via: str = ""
    items: tuple[LineItem, ...] = ()


@dataclass(frozen=True)
class Totals:
    earnings: Decimal
    mileage: Decimal
    net: Decimal


def coerce_amount(value: Any) -> Decimal:
    """Turn a raw form value into a Decimal, degrading anything unusable to zero."""
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        return value if value.is_finite() else ZERO
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        # str() keeps the value the operator typed (0.1 stays 0.1)
        parsed = Decimal(str(value))
        return parsed if parsed.is_finite() else ZERO
    clean = NUMERIC_NOISE_RE.sub("", str(value))
    if not clean:
        return ZERO
    try:
        parsed = Decimal(clean)
    except InvalidOperation:
        return ZERO
    return parsed if parsed.is_finite() else ZERO


def is_mileage_eligible(category: str, mileage_category: str = MILEAGE_CATEGORY) -> bool:
    return category == mileage_category


def line_amount(item: LineItem) -> Decimal:
    return coerce_amount(item.quantity) * coerce_amount(item.rate)


def line_mileage(
    item: LineItem,
    mile_rate: Decimal = MILE_RATE,
    mileage_category: str = MILEAGE_CATEGORY,
) -> Decimal:
    if not is_mileage_eligible(item.category, mileage_category):
        return ZERO
    return coerce_amount(item.miles) * mile_rate


def compute_totals(
    items: Iterable[LineItem],
    mile_rate: Decimal = MILE_RATE,
    mileage_category: str = MILEAGE_CATEGORY,
) -> Totals:
    """
    Aggregate gross earnings, mileage reimbursement and net pay.

    Values are exact Decimals; rounding to cents is left to the caller
    (see `format_money`).
    """
    earnings = ZERO
    mileage = ZERO
    for item in items:
        earnings += line_amount(item)
        mileage += line_mileage(item, mile_rate=mile_rate, mileage_category=mileage_category)
    return Totals(earnings=earnings, mileage=mileage, net=earnings + mileage)


def new_item_id() -> str:
    # Millisecond clock, process sequence and a random suffix, rendered in base 36.
    sequence = next(_ID_SEQUENCE) % 1000
    value = (int(time.time() * 1000) * 1000 + sequence) * 1000 + random.randrange(1000)
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(BASE36_DIGITS[remainder])
    return "".join(reversed(digits)) or "0"


def new_line_item(category: str | None = None) -> LineItem:
    return LineItem(
        item_id=new_item_id(),
        category=category or CATEGORIES[0],
        quantity=1,
        rate=0,
        miles=0,
        note="",
    )


def add_item(items: Iterable[LineItem], item: LineItem | None = None) -> tuple[LineItem, ...]:
    return (*items, item if item is not None else new_line_item())


def update_item(items: Iterable[LineItem], item_id: str, **changes: Any) -> tuple[LineItem, ...]:
    if "item_id" in changes:
        raise TypeError("item_id cannot be changed")
    return tuple(replace(item, **changes) if item.item_id == item_id else item for item in items)


def remove_item(items: Iterable[LineItem], item_id: str) -> tuple[LineItem, ...]:
    return tuple(item for item in items if item.item_id != item_id)


def format_money(value: Decimal | None) -> str:
    if value is None:
        return "n/a"
    return f"${value.quantize(CENTS):,.2f}"


def as_float(value: Decimal | None) -> float | None:
    if value is None:
        return None
    return float(value.quantize(CENTS))


def format_quantity(value: NumericInput) -> str:
    amount = coerce_amount(value)
    if amount == amount.to_integral_value():
        return str(amount.quantize(Decimal("1")))
    return str(amount.normalize())


def sanitize_filename_part(text: str) -> str:
    collapsed = WHITESPACE_RUN_RE.sub("_", text.strip())
    return UNSAFE_FILENAME_CHARS_RE.sub("", collapsed)


def build_stub_filename(
    contractor_name: str,
    period_end: str = "",
    pay_date: str = "",
    extension: str = DOCUMENT_EXTENSION,
) -> str:
    """
    Derive `{name}_stub_{period end or pay date}.{ext}`.

    Whitespace runs become a single underscore and anything outside
    `[A-Za-z0-9._-]` is dropped.
    """
    name = sanitize_filename_part(contractor_name or "") or "contractor"
    suffix = sanitize_filename_part(period_end or "") or sanitize_filename_part(pay_date or "") or "pay"
    return f"{name}_stub_{suffix}.{extension}"


def document_filename(document: StubDocument, extension: str = DOCUMENT_EXTENSION) -> str:
    return build_stub_filename(
        document.contractor.name,
        period_end=document.period.end,
        pay_date=document.period.pay_date,
        extension=extension,
    )
