"""Validation gate for untrusted pricing input."""
import math

import pytest

from roof_estimator.engine import PricingRequest, PricingValidationError, RoofFeatures, validate_pricing_input


@pytest.mark.parametrize("sq_ft", [0, -100, 0.5, math.nan])
def test_rejects_small_or_invalid_sqft(sq_ft):
    with pytest.raises(PricingValidationError, match="Square footage must be at least 1"):
        validate_pricing_input(PricingRequest(sq_ft=sq_ft))


def test_rejects_negative_cost():
    with pytest.raises(PricingValidationError, match="Cost per sq ft cannot be negative"):
        validate_pricing_input(PricingRequest(sq_ft=1000, cost_per_sq_ft=-1))


def test_rejects_negative_profit():
    with pytest.raises(PricingValidationError, match="Target profit cannot be negative"):
        validate_pricing_input(PricingRequest(sq_ft=1000, target_profit=-500))


@pytest.mark.parametrize("field, wire_name", [
    ("tier1_dealer_fee", "tier1DealerFee"),
    ("tier2_dealer_fee", "tier2DealerFee"),
    ("tier3_dealer_fee", "tier3DealerFee"),
])
@pytest.mark.parametrize("value", [0.70, -0.10])
def test_rejects_dealer_fee_out_of_range(field, wire_name, value):
    with pytest.raises(PricingValidationError, match=f"{wire_name} must be between 0 and 69%"):
        validate_pricing_input(PricingRequest(sq_ft=1000, **{field: value}))


def test_accepts_dealer_fee_at_ceiling():
    validate_pricing_input(PricingRequest(sq_ft=1000, tier3_dealer_fee=0.69))


def test_rejects_negative_perimeter():
    with pytest.raises(PricingValidationError, match="Perimeter cannot be negative"):
        validate_pricing_input(PricingRequest(sq_ft=1000, perimeter_ft=-10))


def test_rejects_negative_gutter_price():
    with pytest.raises(PricingValidationError, match="Gutter price cannot be negative"):
        validate_pricing_input(PricingRequest(sq_ft=1000, gutter_price_per_ft=-1))


def test_rejects_negative_unit_price():
    with pytest.raises(PricingValidationError, match="Skylight price cannot be negative"):
        validate_pricing_input(PricingRequest(sq_ft=1000, skylight_price_per_unit=-20))


def test_rejects_negative_feature_count():
    features = RoofFeatures(has_satellites=True, satellite_count=-1)
    with pytest.raises(PricingValidationError, match="Satellite count cannot be negative"):
        validate_pricing_input(PricingRequest(sq_ft=1000, roof_features=features))


def test_rejects_commission_rate_of_100_percent():
    with pytest.raises(PricingValidationError, match="Commission rate must be between 0 and 99%"):
        validate_pricing_input(PricingRequest(sq_ft=1000, commission_rate=1.0))


def test_message_includes_received_value():
    with pytest.raises(PricingValidationError, match="Received: -500"):
        validate_pricing_input(PricingRequest(sq_ft=1000, target_profit=-500))


def test_validation_error_is_value_error():
    with pytest.raises(ValueError):
        validate_pricing_input(PricingRequest(sq_ft=0))


def test_accepts_defaults():
    validate_pricing_input(PricingRequest(sq_ft=1000))


def test_accepts_explicit_rates():
    validate_pricing_input(PricingRequest(
        sq_ft=1000,
        cost_per_sq_ft=5,
        tier1_dealer_fee=0.05,
        tier2_dealer_fee=0.10,
        tier3_dealer_fee=0.15,
    ))


@pytest.mark.parametrize("field, wire_name", [
    ("tier2_dealer_fee", "tier2DealerFee"),
    ("cost_per_sq_ft", "costPerSqFt"),
    ("target_profit", "targetProfit"),
    ("skylight_price_per_unit", "skylightPricePerUnit"),
])
@pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
def test_rejects_non_finite_rates(field, wire_name, value):
    with pytest.raises(PricingValidationError, match=f"{wire_name} must be a finite number"):
        validate_pricing_input(PricingRequest(sq_ft=1000, **{field: value}))


def test_rejects_infinite_sqft():
    with pytest.raises(PricingValidationError, match="sqFt must be a finite number"):
        validate_pricing_input(PricingRequest(sq_ft=math.inf))


def test_rejects_nan_perimeter():
    with pytest.raises(PricingValidationError, match="perimeterFt must be a finite number"):
        validate_pricing_input(PricingRequest(sq_ft=1000, perimeter_ft=math.nan))
