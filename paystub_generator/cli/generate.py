"""
CLI Entry Point: paystub-generate

Computes totals for a contractor stub document and exports it as a paginated PDF.
"""

from __future__ import annotations

import argparse
import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any

from paystub_generator.core import (
    StubDocument,
    Totals,
    coerce_amount,
    compute_totals,
    document_filename,
    format_money,
    format_quantity,
    line_amount,
    line_mileage,
)
from paystub_generator.export import StubExporter
from paystub_generator.payload import read_document, totals_to_json
from paystub_generator.settings import SettingsError, StubSettings, load_settings
from paystub_generator.utils import console
from paystub_generator.utils.contracts import ContractError


def item_rows(document: StubDocument, settings: StubSettings) -> list[list[str]]:
    rows = []
    for item in document.items:
        mileage = line_mileage(item, mile_rate=settings.mile_rate, mileage_category=settings.mileage_category)
        rows.append(
            [
                item.category,
                item.note or "-",
                format_quantity(item.quantity),
                format_money(coerce_amount(item.rate)),
                format_money(line_amount(item)),
                format_money(mileage),
            ]
        )
    return rows


def output_human(document: StubDocument, totals: Totals, settings: StubSettings) -> None:
    console.print_step(f"Pay Stub for {document.contractor.name or 'contractor'}")
    console.print_table(
        "Line Items",
        ["Category", "Notes", "Qty", "Rate", "Amount", "Mileage"],
        item_rows(document, settings),
        right_align=4,
    )
    print(f"Gross Earnings: {format_money(totals.earnings)}")
    print(f"+ Mileage: {format_money(totals.mileage)}")
    print(f"Net Pay: {format_money(totals.net)}")


def build_summary(document: StubDocument, totals: Totals) -> dict[str, Any]:
    return {
        "contractor": document.contractor.name,
        "period_end": document.period.end,
        "pay_date": document.period.pay_date,
        "item_count": len(document.items),
        "totals": totals_to_json(totals),
        "file_name": document_filename(document),
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Compute contractor pay stub totals and export a paginated PDF.")
    parser.add_argument("document", help="Stub document JSON file.")
    parser.add_argument("--config", type=Path, help="Settings JSON overriding mileage rate, page size, etc.")
    parser.add_argument("--out-dir", type=Path, help="Export the PDF into this directory.")
    parser.add_argument("--render-scale", type=float, help="Rasterization scale (default from settings: 2.0).")
    parser.add_argument("--force", action="store_true", help="Overwrite an existing PDF without asking.")
    parser.add_argument("--json", action="store_true", help="Output machine-readable JSON.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging.")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    document_path = Path(args.document).expanduser()
    if not document_path.exists():
        raise SystemExit(f"File not found: {document_path}")

    try:
        settings = load_settings(args.config)
    except SettingsError as exc:
        raise SystemExit(str(exc))
    if args.render_scale is not None:
        if args.render_scale <= 0:
            raise SystemExit("--render-scale must be greater than zero.")
        settings = replace(settings, render_scale=args.render_scale)

    try:
        document = read_document(document_path)
    except (ContractError, json.JSONDecodeError) as exc:
        raise SystemExit(f"Invalid stub document {document_path}: {exc}")

    totals = compute_totals(document.items, mile_rate=settings.mile_rate, mileage_category=settings.mileage_category)
    summary = build_summary(document, totals)

    if args.out_dir is not None:
        target = args.out_dir / document_filename(document)
        if target.exists() and not args.force:
            if not console.ask_confirm(f"{target} exists. Overwrite?", default=False):
                raise SystemExit(f"Refusing to overwrite {target} (use --force).")
        outcome = StubExporter(settings=settings).export(document, args.out_dir)
        if not outcome.ok:
            console.print_error(outcome.message, exit_code=1)
        summary["pdf"] = str(outcome.path)
        summary["page_count"] = len(outcome.pages)

    if args.json:
        print(json.dumps(summary, indent=2))
        return

    output_human(document, totals, settings)
    if "pdf" in summary:
        console.print_success(f"Saved {summary['page_count']} page(s) to {summary['pdf']}")


if __name__ == "__main__":
    main()
