"""
Data models for the pricing engine.

Uses dataclasses for structured, type-safe data representation.
Wire dicts use the camelCase keys the web client expects.
"""
from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Optional


# Fields of PricingConfiguration that feed the formula (and may be overridden per request)
PRICING_FIELDS = (
    'cost_per_sq_ft',
    'target_profit',
    'commission_rate',
    'gutter_price_per_ft',
    'tier1_dealer_fee',
    'tier2_dealer_fee',
    'tier3_dealer_fee',
    'solar_panel_price_per_unit',
    'skylight_price_per_unit',
    'satellite_price_per_unit',
)


def to_camel(name: str) -> str:
    """Convert snake_case to camelCase (tier2_dealer_fee → tier2DealerFee)."""
    head, *rest = name.split('_')
    return head + ''.join(part[:1].upper() + part[1:] for part in rest)


@dataclass
class RoofFeatures:
    """Agent-entered roof features that add flat per-unit charges."""
    has_solar_panels: bool = False
    solar_panel_count: int = 0
    has_skylights: bool = False
    skylight_count: int = 0
    has_satellites: bool = False
    satellite_count: int = 0


@dataclass
class PricingConfiguration:
    """The single global pricing configuration record."""
    cost_per_sq_ft: float = 5.0
    target_profit: float = 2000.0
    commission_rate: float = 0.10  # agent share shown per tier, not used in price derivation
    gutter_price_per_ft: float = 15.0
    tier1_dealer_fee: float = 0.0
    tier2_dealer_fee: float = 0.10
    tier3_dealer_fee: float = 0.15
    solar_panel_price_per_unit: float = 150.0
    skylight_price_per_unit: float = 200.0
    satellite_price_per_unit: float = 75.0

    updated_at: Optional[datetime] = None
    updated_by: Optional[str] = None

    def to_dict(self) -> dict:
        """Wire format (camelCase)."""
        data = {to_camel(name): getattr(self, name) for name in PRICING_FIELDS}
        data['updatedAt'] = self.updated_at.isoformat() if self.updated_at else None
        data['updatedBy'] = self.updated_by
        return data

    def to_csv_row(self) -> dict:
        """Convert to CSV row format."""
        row = {name: repr(float(getattr(self, name))) for name in PRICING_FIELDS}
        row['updated_at'] = self.updated_at.isoformat() if self.updated_at else ''
        row['updated_by'] = self.updated_by or ''
        return row

    @classmethod
    def from_csv_row(cls, row: dict) -> 'PricingConfiguration':
        """Create a configuration from a CSV row, keeping defaults for blank cells."""
        defaults = cls()
        values = {}
        for name in PRICING_FIELDS:
            raw = row.get(name)
            if raw is None or str(raw).strip() in ('', 'nan'):
                values[name] = getattr(defaults, name)
            else:
                values[name] = float(raw)

        updated_at = row.get('updated_at')
        updated_by = row.get('updated_by')
        return cls(
            **values,
            updated_at=datetime.fromisoformat(str(updated_at)) if updated_at and str(updated_at) != 'nan' else None,
            updated_by=str(updated_by) if updated_by and str(updated_by) != 'nan' else None,
        )


@dataclass
class PricingRequest:
    """
    A single pricing request.

    Every pricing field left as None falls back to the stored
    configuration, then to the hard default.
    """
    sq_ft: float
    perimeter_ft: float = 0.0
    include_gutters: bool = False
    roof_features: Optional[RoofFeatures] = None

    # Overrides
    cost_per_sq_ft: Optional[float] = None
    target_profit: Optional[float] = None
    commission_rate: Optional[float] = None
    gutter_price_per_ft: Optional[float] = None
    tier1_dealer_fee: Optional[float] = None
    tier2_dealer_fee: Optional[float] = None
    tier3_dealer_fee: Optional[float] = None
    solar_panel_price_per_unit: Optional[float] = None
    skylight_price_per_unit: Optional[float] = None
    satellite_price_per_unit: Optional[float] = None


@dataclass(frozen=True)
class RoofFeatureAdjustments:
    """Flat charges for roof features."""
    solar_panel_total: float = 0.0
    skylight_total: float = 0.0
    satellite_total: float = 0.0
    total_adjustments: float = 0.0


@dataclass(frozen=True)
class PricingResult:
    """Complete result of a pricing calculation."""
    cost: float
    price_per_sq_ft_cash: float
    price_per_sq_ft_5_dealer: float
    price_per_sq_ft_10_dealer: float
    price_per_sq_ft_18_fee: float
    price_per_sq_ft_23_fee: float
    price_cash: float
    price_5_dealer: float
    price_10_dealer: float
    price_18_fee: float
    price_23_fee: float
    commission_cash: float
    commission_5_dealer: float
    commission_10_dealer: float
    fee13: float
    profit: float
    gutter_total: float
    roof_feature_adjustments: RoofFeatureAdjustments = field(default_factory=RoofFeatureAdjustments)
    final_total: float = 0.0

    def to_dict(self) -> dict:
        """Wire format (camelCase), matching the web client's PricingOutput."""
        data = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, RoofFeatureAdjustments):
                value = {to_camel(a.name): getattr(value, a.name) for a in fields(value)}
            data[to_camel(f.name)] = value
        return data


@dataclass
class RoofData:
    """Roof geometry derived from solar imagery."""
    roof_area_sq_ft: int
    roof_facets: int
    predominant_pitch: str
    ridges_hips_ft: int
    valleys_ft: int
    rakes_ft: int
    eaves_ft: int
    perimeter_ft: int
    data_quality: Optional[str] = None

    def to_dict(self) -> dict:
        return {to_camel(f.name): getattr(self, f.name) for f in fields(self)}


@dataclass
class GeocodeResult:
    """A geocoded property address."""
    formatted_address: str
    latitude: float
    longitude: float
    city: str
    state: str
    zip_code: str
    street_view_url: str = ""
    aerial_view_url: str = ""

    def to_dict(self) -> dict:
        return {to_camel(f.name): getattr(self, f.name) for f in fields(self)}
