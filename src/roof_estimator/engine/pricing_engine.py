"""
Pricing Engine - tiered roofing price formula and input validation.

Pricing formula:
    Total Fee    = Base Commission (30%) + Dealer Fee (per tier)
    Price        = (sqFt × costPerSqFt + targetProfit) / (1 - Total Fee)
    PricePerSqFt = Price / sqFt

Example for 1000 sq ft at Tier 2 (10% dealer):
    Total Fee = 30% + 10% = 40%
    Price     = (1000 × 5 + 2000) / 0.60 = $11,666.67

The base commission (agent 10% + owner 10% + lead 10%) is fixed and
embedded as a markup divisor. The reported per-tier commission uses the
separate, configurable commission_rate (agent share, default 10%).
"""
import logging
import math
from typing import Optional

import pandas as pd

from .errors import PricingValidationError, DegeneratePricingError
from .models import (
    PRICING_FIELDS,
    PricingConfiguration,
    PricingRequest,
    PricingResult,
    RoofFeatures,
    RoofFeatureAdjustments,
    to_camel,
)

logger = logging.getLogger(__name__)

# Base commission rate (fixed at 30%)
BASE_COMMISSION_RATE = 0.30

# Ad hoc quoting scenarios layered on the base commission
FEE_18_RATE = 0.18
FEE_23_RATE = 0.23

# Flat reference fee on the cash price
FEE_13_RATE = 0.13

MIN_SQFT = 1

# Keeps (1 - total fee) well away from zero
MAX_DEALER_FEE = 0.69

MAX_COMMISSION_RATE = 0.99

DEALER_FEE_FIELDS = ('tier1_dealer_fee', 'tier2_dealer_fee', 'tier3_dealer_fee')


def default_configuration() -> PricingConfiguration:
    """Hard-coded defaults, used when neither request nor stored configuration sets a field."""
    return PricingConfiguration()


def resolve_configuration(
    request: PricingRequest,
    configuration: Optional[PricingConfiguration] = None,
) -> PricingConfiguration:
    """
    Merge request overrides over the stored configuration over hard defaults.

    Returns a new configuration; neither input is modified.
    """
    base = configuration or default_configuration()
    values = {}
    for name in PRICING_FIELDS:
        override = getattr(request, name)
        values[name] = override if override is not None else getattr(base, name)
    return PricingConfiguration(**values)


def validate_pricing_input(request: PricingRequest) -> None:
    """
    Validate pricing input, raising on the first violated rule.

    Only fields present on the request are checked; omitted overrides
    resolve to stored or default values that are valid by construction.

    Raises:
        PricingValidationError: with a message naming the field and constraint
    """
    # Written as a negated comparison so NaN is rejected too
    if not request.sq_ft >= MIN_SQFT:
        raise PricingValidationError(
            f"Square footage must be at least {MIN_SQFT}. Received: {request.sq_ft}"
        )

    # NaN and infinity pass range checks on one side or the other
    for name in ('sq_ft', 'perimeter_ft') + PRICING_FIELDS:
        value = getattr(request, name)
        if value is not None and not math.isfinite(value):
            raise PricingValidationError(f"{to_camel(name)} must be a finite number. Received: {value}")

    if request.cost_per_sq_ft is not None and not request.cost_per_sq_ft >= 0:
        raise PricingValidationError(
            f"Cost per sq ft cannot be negative. Received: {request.cost_per_sq_ft}"
        )

    if request.target_profit is not None and not request.target_profit >= 0:
        raise PricingValidationError(
            f"Target profit cannot be negative. Received: {request.target_profit}"
        )

    for name in DEALER_FEE_FIELDS:
        value = getattr(request, name)
        if value is not None and not 0 <= value <= MAX_DEALER_FEE:
            raise PricingValidationError(
                f"{to_camel(name)} must be between 0 and {round(MAX_DEALER_FEE * 100)}%. Received: {value}"
            )

    if request.perimeter_ft is not None and not request.perimeter_ft >= 0:
        raise PricingValidationError(
            f"Perimeter cannot be negative. Received: {request.perimeter_ft}"
        )

    if request.gutter_price_per_ft is not None and not request.gutter_price_per_ft >= 0:
        raise PricingValidationError(
            f"Gutter price cannot be negative. Received: {request.gutter_price_per_ft}"
        )

    if request.commission_rate is not None and not 0 <= request.commission_rate <= MAX_COMMISSION_RATE:
        raise PricingValidationError(
            f"Commission rate must be between 0 and {round(MAX_COMMISSION_RATE * 100)}%. "
            f"Received: {request.commission_rate}"
        )

    unit_prices = (
        ('Solar panel', request.solar_panel_price_per_unit),
        ('Skylight', request.skylight_price_per_unit),
        ('Satellite', request.satellite_price_per_unit),
    )
    for label, value in unit_prices:
        if value is not None and not value >= 0:
            raise PricingValidationError(f"{label} price cannot be negative. Received: {value}")

    features = request.roof_features
    if features is not None:
        counts = (
            ('Solar panel', features.solar_panel_count),
            ('Skylight', features.skylight_count),
            ('Satellite', features.satellite_count),
        )
        for label, count in counts:
            if count < 0:
                raise PricingValidationError(f"{label} count cannot be negative")


def _tier_price(base_amount: float, dealer_fee: float) -> float:
    """Divide once by (1 - (base commission + dealer fee))."""
    total_fee = BASE_COMMISSION_RATE + dealer_fee
    denominator = 1 - total_fee
    if denominator <= 0:
        raise DegeneratePricingError(
            f"Total fee {total_fee:.2%} leaves no room for a price (dealer fee {dealer_fee})"
        )
    return base_amount / denominator


def _feature_adjustments(
    features: Optional[RoofFeatures],
    config: PricingConfiguration,
) -> RoofFeatureAdjustments:
    if features is None:
        return RoofFeatureAdjustments()

    solar = features.solar_panel_count * config.solar_panel_price_per_unit if features.has_solar_panels else 0.0
    skylight = features.skylight_count * config.skylight_price_per_unit if features.has_skylights else 0.0
    satellite = features.satellite_count * config.satellite_price_per_unit if features.has_satellites else 0.0

    return RoofFeatureAdjustments(
        solar_panel_total=solar,
        skylight_total=skylight,
        satellite_total=satellite,
        total_adjustments=solar + skylight + satellite,
    )


def calculate_pricing(
    request: PricingRequest,
    configuration: Optional[PricingConfiguration] = None,
) -> PricingResult:
    """
    Calculate all pricing options for a roof.

    Does not validate; call validate_pricing_input first for untrusted input.

    Args:
        request: roof size, gutter/feature inputs and optional rate overrides
        configuration: stored configuration, consulted for fields the request omits

    Returns:
        PricingResult with every tier price, commission and adjustment

    Raises:
        DegeneratePricingError: if sq_ft is zero or a total fee reaches 100%
    """
    if request.sq_ft == 0:
        raise DegeneratePricingError("Square footage of 0 cannot be priced per square foot")

    config = resolve_configuration(request, configuration)
    sq_ft = request.sq_ft

    # Base cost (materials + labor)
    cost = sq_ft * config.cost_per_sq_ft
    base_amount = cost + config.target_profit

    price_cash = _tier_price(base_amount, config.tier1_dealer_fee)
    price_5_dealer = _tier_price(base_amount, config.tier2_dealer_fee)
    price_10_dealer = _tier_price(base_amount, config.tier3_dealer_fee)
    price_18_fee = _tier_price(base_amount, FEE_18_RATE)
    price_23_fee = _tier_price(base_amount, FEE_23_RATE)

    gutter_total = request.perimeter_ft * config.gutter_price_per_ft if request.include_gutters else 0.0
    adjustments = _feature_adjustments(request.roof_features, config)

    return PricingResult(
        cost=cost,
        price_per_sq_ft_cash=price_cash / sq_ft,
        price_per_sq_ft_5_dealer=price_5_dealer / sq_ft,
        price_per_sq_ft_10_dealer=price_10_dealer / sq_ft,
        price_per_sq_ft_18_fee=price_18_fee / sq_ft,
        price_per_sq_ft_23_fee=price_23_fee / sq_ft,
        price_cash=price_cash,
        price_5_dealer=price_5_dealer,
        price_10_dealer=price_10_dealer,
        price_18_fee=price_18_fee,
        price_23_fee=price_23_fee,
        commission_cash=price_cash * config.commission_rate,
        commission_5_dealer=price_5_dealer * config.commission_rate,
        commission_10_dealer=price_10_dealer * config.commission_rate,
        fee13=price_cash * FEE_13_RATE,
        profit=config.target_profit,
        gutter_total=gutter_total,
        roof_feature_adjustments=adjustments,
        final_total=price_cash + gutter_total + adjustments.total_adjustments,
    )


def tier_table(
    result: PricingResult,
    configuration: Optional[PricingConfiguration] = None,
) -> pd.DataFrame:
    """
    Tabulate a result as one row per tier/fee scenario.

    `configuration` should be the resolved configuration the result was
    computed with; it supplies the dealer fees shown in the table.
    """
    config = configuration or default_configuration()
    rows = [
        ("Cash", config.tier1_dealer_fee, result.price_per_sq_ft_cash, result.price_cash, result.commission_cash),
        ("5 Dealer", config.tier2_dealer_fee, result.price_per_sq_ft_5_dealer, result.price_5_dealer,
         result.commission_5_dealer),
        ("10 Dealer", config.tier3_dealer_fee, result.price_per_sq_ft_10_dealer, result.price_10_dealer,
         result.commission_10_dealer),
        ("18% Fee", FEE_18_RATE, result.price_per_sq_ft_18_fee, result.price_18_fee, None),
        ("23% Fee", FEE_23_RATE, result.price_per_sq_ft_23_fee, result.price_23_fee, None),
    ]
    df = pd.DataFrame(rows, columns=['Tier', 'Dealer Fee', 'Price / Sq Ft', 'Price', 'Commission'])
    df.insert(2, 'Total Fee', BASE_COMMISSION_RATE + df['Dealer Fee'])
    return df


def table_records(df: pd.DataFrame) -> list[dict]:
    """Rows as JSON-safe dicts (NaN becomes None)."""
    return df.astype(object).where(pd.notna(df), None).to_dict(orient="records")


class PricingEngine:
    """
    Prices roofs against the stored global configuration.

    Resolution order for each rate:
    1. Explicit value on the request
    2. Stored configuration (from the configuration source)
    3. Hard-coded default
    """

    def __init__(self, configuration_source=None):
        """
        Args:
            configuration_source: object with get_configuration() -> PricingConfiguration,
                e.g. PricingSettingsService. None prices against hard defaults.
        """
        self.configuration_source = configuration_source

    def get_configuration(self) -> Optional[PricingConfiguration]:
        if self.configuration_source is None:
            return None
        return self.configuration_source.get_configuration()

    def calculate(self, request: PricingRequest) -> PricingResult:
        """Calculate without validation (trusted input)."""
        return calculate_pricing(request, self.get_configuration())

    def quote(self, request: PricingRequest) -> tuple[PricingResult, PricingConfiguration]:
        """
        Validate, then calculate.

        Returns (result, resolved configuration) so callers can tabulate tiers.
        """
        validate_pricing_input(request)
        resolved = resolve_configuration(request, self.get_configuration())
        result = calculate_pricing(request, resolved)
        logger.debug(
            "Quoted %.0f sq ft: cash $%.2f, final $%.2f",
            request.sq_ft, result.price_cash, result.final_total,
        )
        return result, resolved
