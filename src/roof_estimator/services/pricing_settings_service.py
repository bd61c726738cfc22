"""
Pricing Settings Service - storage for the global pricing configuration.

Keeps a single-row CSV. The row is created with defaults on first read;
updates are owner-only and last writer wins.
"""
import logging
import math
import threading
from dataclasses import dataclass, field, replace
from datetime import datetime
from pathlib import Path
from typing import Optional

import pandas as pd

from ..engine.models import PRICING_FIELDS, PricingConfiguration
from ..engine.pricing_engine import MAX_COMMISSION_RATE, MAX_DEALER_FEE
from .roles import is_owner

logger = logging.getLogger(__name__)


# (minimum, maximum, label) per field; maximum None means unbounded
SETTING_LIMITS = {
    'cost_per_sq_ft': (0, 1000, "Cost per sq ft"),
    'target_profit': (0, 100000, "Target profit"),
    'commission_rate': (0, MAX_COMMISSION_RATE, "Commission rate"),
    'gutter_price_per_ft': (0, 500, "Gutter price"),
    'tier1_dealer_fee': (0, MAX_DEALER_FEE, "Tier 1 fee"),
    'tier2_dealer_fee': (0, MAX_DEALER_FEE, "Tier 2 fee"),
    'tier3_dealer_fee': (0, MAX_DEALER_FEE, "Tier 3 fee"),
    'solar_panel_price_per_unit': (0, None, "Solar panel price"),
    'skylight_price_per_unit': (0, None, "Skylight price"),
    'satellite_price_per_unit': (0, None, "Satellite price"),
}


class SettingsValidationError(ValueError):
    """Raised when a settings update fails validation."""

    def __init__(self, errors: list[str]):
        super().__init__("Invalid pricing data: " + "; ".join(errors))
        self.errors = errors


@dataclass
class ValidationResult:
    """Result of settings validation."""
    valid: bool
    errors: list[str] = field(default_factory=list)


class PricingSettingsService:
    """Service for reading and updating the pricing configuration."""

    CSV_COLUMNS = list(PRICING_FIELDS) + ['updated_at', 'updated_by']

    def __init__(self, settings_csv_path: Path):
        self.settings_csv_path = settings_csv_path
        self._lock = threading.Lock()

    def get_configuration(self) -> PricingConfiguration:
        """Get the stored configuration, creating the default record if none exists."""
        with self._lock:
            stored = self._read()
            if stored is None:
                stored = PricingConfiguration()
                self._write(stored)
                logger.info("Created default pricing settings at %s", self.settings_csv_path)
            return stored

    def validate(self, updates: dict) -> ValidationResult:
        """Validate a settings update, collecting every error."""
        result = ValidationResult(valid=True)

        for key, value in updates.items():
            if key not in SETTING_LIMITS:
                result.errors.append(f"Unknown setting: {key}")
                continue

            minimum, maximum, label = SETTING_LIMITS[key]
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                result.errors.append(f"{label} must be a number")
                continue

            if not math.isfinite(value):
                result.errors.append(f"{label} must be a finite number")
                continue

            if not value >= minimum:
                result.errors.append(f"{label} must be non-negative")
            elif maximum is not None and value > maximum:
                result.errors.append(f"{label} must be at most {maximum}")

        result.valid = not result.errors
        return result

    def update_configuration(self, updates: dict, user_id: str, role: Optional[str]) -> PricingConfiguration:
        """
        Apply a (partial) update to the stored configuration.

        Raises:
            PermissionError: if the user is not an owner
            SettingsValidationError: if any value is out of range
        """
        if not is_owner(role):
            raise PermissionError("Only owners can update pricing settings")

        validation = self.validate(updates)
        if not validation.valid:
            logger.warning("Rejected pricing settings update from %s: %s", user_id, validation.errors)
            raise SettingsValidationError(validation.errors)

        with self._lock:
            current = self._read() or PricingConfiguration()
            updated = replace(
                current,
                **{key: float(value) for key, value in updates.items()},
                updated_at=datetime.now(),
                updated_by=user_id,
            )
            self._write(updated)

        logger.info("Pricing settings updated by %s: %s", user_id, sorted(updates))
        return updated

    def _read(self) -> Optional[PricingConfiguration]:
        if not self.settings_csv_path.exists():
            return None

        df = pd.read_csv(self.settings_csv_path, dtype=str, keep_default_na=False)
        if df.empty:
            return None
        return PricingConfiguration.from_csv_row(df.iloc[0].to_dict())

    def _write(self, configuration: PricingConfiguration):
        self.settings_csv_path.parent.mkdir(parents=True, exist_ok=True)
        df = pd.DataFrame([configuration.to_csv_row()], columns=self.CSV_COLUMNS)
        df.to_csv(self.settings_csv_path, index=False)
