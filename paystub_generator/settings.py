from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields, replace
from decimal import Decimal
from pathlib import Path
from typing import Any

from paystub_generator.core import CATEGORIES, MILE_RATE, MILEAGE_CATEGORY, PAYMENT_METHODS
from paystub_generator.utils.contracts import ContractError, validate_output

logger = logging.getLogger(__name__)

# A4 portrait in PDF points
A4_WIDTH_PT = 595.28
A4_HEIGHT_PT = 841.89


class SettingsError(Exception):
    """Raised when a settings file cannot be read or fails validation."""

    pass


@dataclass(frozen=True)
class StubSettings:
    mile_rate: Decimal = MILE_RATE
    mileage_category: str = MILEAGE_CATEGORY
    categories: tuple[str, ...] = CATEGORIES
    payment_methods: tuple[str, ...] = PAYMENT_METHODS
    page_width: float = A4_WIDTH_PT
    page_height: float = A4_HEIGHT_PT
    render_scale: float = 2.0
    background_color: str = "#ffffff"
    company_name: str = "DOLLC Contractor Pay Stub"
    company_tagline: str = "Relationship built on duty and trust"
    company_contact_lines: tuple[str, ...] = (
        "adjuster@dollcappraisals.com",
        "(502) 422-1901",
        "P O Box 112, Bloomfield, KY 40008-0112",
    )


DEFAULT_SETTINGS = StubSettings()


def settings_from_dict(payload: dict[str, Any], base: StubSettings = DEFAULT_SETTINGS) -> StubSettings:
    try:
        validate_output(payload, "stub_settings")
    except ContractError as exc:
        raise SettingsError(str(exc)) from exc

    known = {f.name for f in fields(StubSettings)}
    overrides: dict[str, Any] = {}
    for key, value in payload.items():
        if key not in known:
            continue
        if key == "mile_rate":
            value = Decimal(str(value))
        elif isinstance(value, list):
            value = tuple(value)
        elif key in {"page_width", "page_height", "render_scale"}:
            value = float(value)
        overrides[key] = value

    settings = replace(base, **overrides)
    if settings.mileage_category not in settings.categories:
        raise SettingsError(
            f"mileage_category '{settings.mileage_category}' is not one of the configured categories"
        )
    return settings


def load_settings(path: Path | None) -> StubSettings:
    """Read a JSON settings file and merge it over the defaults. `None` returns the defaults."""
    if path is None:
        return DEFAULT_SETTINGS
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise SettingsError(f"Could not read settings file {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise SettingsError(f"Settings file {path} must contain a JSON object")
    logger.debug("Loaded settings overrides from %s: %s", path, sorted(payload))
    return settings_from_dict(payload)
