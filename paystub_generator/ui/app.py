#!/usr/bin/env python3

from __future__ import annotations

import tempfile
from dataclasses import replace
from pathlib import Path

import streamlit as st

from paystub_generator.core import (
    Contractor,
    LineItem,
    PayPeriod,
    StubDocument,
    add_item,
    coerce_amount,
    compute_totals,
    format_money,
    is_mileage_eligible,
    line_amount,
    line_mileage,
    remove_item,
    update_item,
)
from paystub_generator.export import StubExporter
from paystub_generator.settings import DEFAULT_SETTINGS

APP_SESSION_SCHEMA_VERSION = "2026-10-stub-editor-v1"


def apply_theme() -> None:
    st.markdown(
        """
<style>
:root {
  --bg-surface: #f8f9fa;
  --border-subtle: #dee2e6;
  --text-tertiary: #6c757d;
  --brand-primary: #0f5d75;
}

.metric-card {
  background: var(--bg-surface);
  border: 1px solid var(--border-subtle);
  border-radius: 8px;
  padding: 1rem 1.25rem;
  margin-bottom: 0.5rem;
}

.metric-card .label {
  font-size: 0.75rem;
  text-transform: uppercase;
  letter-spacing: 0.05em;
  color: var(--text-tertiary);
  font-weight: 600;
}

.metric-card .value {
  font-size: 1.25rem;
  font-weight: 700;
  color: var(--brand-primary);
}
</style>
        """,
        unsafe_allow_html=True,
    )


def reset_session_if_schema_changed() -> None:
    existing = st.session_state.get("_app_schema_version")
    if existing == APP_SESSION_SCHEMA_VERSION:
        return
    for key in ["document", "exporter", "export_pdf", "export_name", "export_document", "export_error"]:
        st.session_state.pop(key, None)
    st.session_state["_app_schema_version"] = APP_SESSION_SCHEMA_VERSION


def metric_card(label: str, value: str) -> None:
    st.markdown(
        f"""
<div class="metric-card">
  <div class="label">{label}</div>
  <div class="value">{value}</div>
</div>
        """,
        unsafe_allow_html=True,
    )


def current_document() -> StubDocument:
    document = st.session_state.get("document")
    if document is None:
        document = StubDocument()
        st.session_state["document"] = document
    return document


def exporter() -> StubExporter:
    instance = st.session_state.get("exporter")
    if instance is None:
        instance = StubExporter(settings=DEFAULT_SETTINGS)
        st.session_state["exporter"] = instance
    return instance


def edit_header(document: StubDocument) -> StubDocument:
    settings = DEFAULT_SETTINGS
    c1, c2, c3 = st.columns(3)
    with c1:
        st.subheader("Contractor")
        contractor = Contractor(
            name=st.text_input("Name", value=document.contractor.name),
            email=st.text_input("Email", value=document.contractor.email),
            contractor_id=st.text_input("ID", value=document.contractor.contractor_id),
        )
    with c2:
        st.subheader("Pay Period")
        period = PayPeriod(
            start=st.text_input("Start", value=document.period.start, placeholder="YYYY-MM-DD"),
            end=st.text_input("End", value=document.period.end, placeholder="YYYY-MM-DD"),
            pay_date=st.text_input("Pay Date", value=document.period.pay_date, placeholder="YYYY-MM-DD"),
        )
    with c3:
        st.subheader("Payment Method")
        options = ["", *settings.payment_methods]
        paid_via = st.selectbox(
            "Paid via",
            options=options,
            index=options.index(document.paid_via) if document.paid_via in options else 0,
            format_func=lambda value: value or "Select",
        )
        st.caption(
            f"Mileage is only applicable to **{settings.mileage_category}** "
            f"at {format_money(settings.mile_rate)}/mi."
        )
    return replace(document, contractor=contractor, period=period, paid_via=paid_via)


def edit_item(item: LineItem) -> tuple[LineItem, bool]:
    settings = DEFAULT_SETTINGS
    c1, c2, c3, c4 = st.columns([4, 2, 2, 1])
    with c1:
        category = st.selectbox(
            "Category",
            options=list(settings.categories),
            index=settings.categories.index(item.category) if item.category in settings.categories else 0,
            key=f"category_{item.item_id}",
        )
        note = st.text_input("Note", value=item.note, placeholder="Add note...", key=f"note_{item.item_id}")
        date = st.text_input("Date", value=item.date or "", placeholder="YYYY-MM-DD", key=f"date_{item.item_id}")
    with c2:
        quantity = st.text_input("Qty", value=str(item.quantity), key=f"qty_{item.item_id}")
    with c3:
        rate = st.text_input("Rate", value=str(item.rate), key=f"rate_{item.item_id}")
    with c4:
        deleted = st.button("Delete", key=f"delete_{item.item_id}")

    miles = item.miles
    if is_mileage_eligible(category, settings.mileage_category):
        m1, m2 = st.columns([3, 1])
        with m1:
            miles = st.text_input(
                f"Miles (at {format_money(settings.mile_rate)}/mi)",
                value=str(item.miles),
                key=f"miles_{item.item_id}",
            )
        with m2:
            preview = replace(item, category=category, miles=miles)
            st.markdown(f"**{format_money(line_mileage(preview, mile_rate=settings.mile_rate))}**")

    edited = replace(
        item, category=category, note=note, date=date or None, quantity=quantity, rate=rate, miles=miles
    )
    return edited, deleted


def edit_items(document: StubDocument) -> StubDocument:
    head, button = st.columns([5, 1])
    with head:
        st.subheader("Earnings")
    with button:
        if st.button("Add", type="primary"):
            document = replace(document, items=add_item(document.items))

    if not document.items:
        st.caption("No items yet.")
        return document

    items = document.items
    removed = False
    for item in document.items:
        edited, deleted = edit_item(item)
        if deleted:
            items = remove_item(items, item.item_id)
            removed = True
            continue
        if edited != item:
            items = update_item(
                items,
                item.item_id,
                category=edited.category,
                note=edited.note,
                date=edited.date,
                quantity=edited.quantity,
                rate=edited.rate,
                miles=edited.miles,
            )
        st.divider()
    if removed:
        st.session_state["document"] = replace(document, items=items)
        st.rerun()
    return replace(document, items=items)


def clear_stale_export(document: StubDocument) -> None:
    """Drop a finished export once the document it was made from has been edited."""
    exported = st.session_state.get("export_document")
    if exported is not None and exported != document:
        for key in ["export_pdf", "export_name", "export_document"]:
            st.session_state.pop(key, None)


def run_export(document: StubDocument) -> None:
    with tempfile.TemporaryDirectory() as temp_dir:
        outcome = exporter().export(document, Path(temp_dir))
        if outcome.ok and outcome.path is not None:
            st.session_state["export_pdf"] = outcome.path.read_bytes()
            st.session_state["export_name"] = outcome.path.name
            st.session_state["export_document"] = document
            st.session_state.pop("export_error", None)
        elif outcome.status == "failed":
            for key in ["export_pdf", "export_name", "export_document"]:
                st.session_state.pop(key, None)
            st.session_state["export_error"] = outcome.message


def main() -> None:
    st.set_page_config(page_title="Contractor Pay Stub Generator", page_icon="📄", layout="wide")
    reset_session_if_schema_changed()
    apply_theme()

    st.markdown(f"# {DEFAULT_SETTINGS.company_name} Generator")
    st.markdown(DEFAULT_SETTINGS.company_tagline)

    document = edit_header(current_document())
    document = edit_items(document)
    st.session_state["document"] = document
    clear_stale_export(document)

    settings = DEFAULT_SETTINGS
    totals = compute_totals(document.items, mile_rate=settings.mile_rate, mileage_category=settings.mileage_category)
    m1, m2, m3 = st.columns(3)
    with m1:
        metric_card("Gross Earnings", format_money(totals.earnings))
    with m2:
        metric_card("+ Mileage", format_money(totals.mileage))
    with m3:
        metric_card("Net Pay", format_money(totals.net))

    rows = [
        {
            "Category": item.category,
            "Notes": item.note or "—",
            "Qty": float(coerce_amount(item.quantity)),
            "Rate": format_money(coerce_amount(item.rate)),
            "Amount": format_money(line_amount(item)),
        }
        for item in document.items
    ]
    if rows:
        st.dataframe(rows, use_container_width=True)

    busy = exporter().busy
    if st.button("Exporting..." if busy else "Export PDF", type="primary", disabled=busy):
        with st.spinner("Rendering pay stub..."):
            run_export(document)

    if st.session_state.get("export_error"):
        st.error(f"{st.session_state['export_error']} Check the log for details.")
    if st.session_state.get("export_pdf"):
        st.download_button(
            "Download PDF",
            data=st.session_state["export_pdf"],
            file_name=st.session_state["export_name"],
            mime="application/pdf",
        )


if __name__ == "__main__":
    main()
