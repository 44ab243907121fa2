from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)

CURRENT_SCHEMA_VERSION = "1.0.0"

LEGACY_ITEM_KEYS = {"qty": "quantity"}
LEGACY_PERIOD_KEYS = {"payDate": "pay_date"}
LEGACY_CONTRACTOR_KEYS = {"id": "contractor_id"}


def _rename_keys(section: dict[str, Any], mapping: dict[str, str]) -> dict[str, Any]:
    renamed = dict(section)
    for old, new in mapping.items():
        if old in renamed:
            value = renamed.pop(old)
            renamed.setdefault(new, value)
    return renamed


def migrate_stub_document_v0_to_v1(payload: dict[str, Any]) -> dict[str, Any]:
    """
    Migrate a pre-1.0 stub document (the web form's state shape) to 1.0.0.

    Changes:
    - Renames `qty` to `quantity` on every item.
    - Renames `period.payDate` to `period.pay_date` and `contractor.id` to `contractor.contractor_id`.
    - Renames top-level `paidVia` to `paid_via`.
    - Sets `schema_version` to 1.0.0.
    """
    version = str(payload.get("schema_version", ""))
    if version and not version.startswith("0."):
        return payload

    logger.warning(
        f"Migrating stub document from {version or 'unversioned'} to {CURRENT_SCHEMA_VERSION}. "
        "Re-save the document to suppress this warning."
    )
    migrated = dict(payload)
    migrated["schema_version"] = CURRENT_SCHEMA_VERSION
    migrated["contractor"] = _rename_keys(dict(payload.get("contractor") or {}), LEGACY_CONTRACTOR_KEYS)
    migrated["period"] = _rename_keys(dict(payload.get("period") or {}), LEGACY_PERIOD_KEYS)
    if "paidVia" in migrated:
        migrated.setdefault("paid_via", migrated.pop("paidVia"))
    migrated["items"] = [_rename_keys(dict(item), LEGACY_ITEM_KEYS) for item in payload.get("items") or []]
    return migrated


def migrate_stub_document(payload: dict[str, Any]) -> dict[str, Any]:
    """
    Run all sequential migrations to bring a stub document payload to the latest version.
    """
    version = str(payload.get("schema_version", ""))
    if not version or version.startswith("0."):
        payload = migrate_stub_document_v0_to_v1(payload)

    return payload
