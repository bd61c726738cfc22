"""
Pricing engine regression tests.

Literal figures capture the expected quote for the default rates
(cost $5.00/sq ft, profit $2000, 30% base commission, dealer fees
0% / 10% / 15%) and should fail if the formula changes unexpectedly.
"""
import pytest

from roof_estimator.engine import (
    PricingConfiguration,
    PricingEngine,
    PricingRequest,
    RoofFeatures,
    calculate_pricing,
    resolve_configuration,
    tier_table,
)
from roof_estimator.engine.errors import DegeneratePricingError
from roof_estimator.engine.pricing_engine import BASE_COMMISSION_RATE


def price(sq_ft, **kwargs):
    return calculate_pricing(PricingRequest(sq_ft=sq_ft, **kwargs))


# ---------------------------------------------------------------------------
# Literal fixtures
# ---------------------------------------------------------------------------

def test_cash_price_1000_sqft():
    result = price(1000)
    assert result.cost == 5000
    assert result.price_cash == pytest.approx(10000.00, abs=0.01)
    assert result.price_per_sq_ft_cash == pytest.approx(10.00, abs=0.01)


def test_tier2_price_1000_sqft():
    result = price(1000)
    assert result.price_5_dealer == pytest.approx(11666.67, abs=0.01)
    assert result.price_per_sq_ft_5_dealer == pytest.approx(11.67, abs=0.01)


def test_tier3_price_1000_sqft():
    result = price(1000)
    assert result.price_10_dealer == pytest.approx(12727.27, abs=0.01)


@pytest.mark.parametrize("sq_ft, expected", [(2000, 20000.00), (5000, 45000.00)])
def test_tier2_price_scales_with_size(sq_ft, expected):
    assert price(sq_ft).price_5_dealer == pytest.approx(expected, abs=0.01)


def test_fee_scenarios_1000_sqft():
    result = price(1000)
    # 30% + 18% = 48%, 30% + 23% = 53%
    assert result.price_per_sq_ft_18_fee == pytest.approx(7000 / 0.52 / 1000, abs=1e-9)
    assert result.price_per_sq_ft_23_fee == pytest.approx(7000 / 0.47 / 1000, abs=1e-9)
    assert result.price_per_sq_ft_23_fee > result.price_per_sq_ft_18_fee > result.price_per_sq_ft_10_dealer


def test_tier_fee_is_single_combined_division():
    """Tier prices divide (cost + profit) once by 1 - (base commission + dealer fee)."""
    result = price(1000)
    combined = (5000 + 2000) / (1 - (BASE_COMMISSION_RATE + 0.10))
    compounded = (5000 + 2000) / (1 - BASE_COMMISSION_RATE) / (1 - 0.10)

    assert result.price_5_dealer == pytest.approx(combined)
    assert result.price_5_dealer != pytest.approx(compounded, abs=1.0)


def test_commissions_and_fee13():
    result = price(1000)
    assert result.commission_cash == pytest.approx(1000.00, abs=0.01)
    assert result.commission_5_dealer == pytest.approx(1166.67, abs=0.01)
    assert result.commission_10_dealer == pytest.approx(1272.73, abs=0.01)
    assert result.fee13 == pytest.approx(result.price_cash * 0.13)
    assert result.profit == 2000


def test_commission_rate_is_reporting_only():
    """Changing the agent commission rate changes commissions but not prices."""
    default = price(1000)
    custom = price(1000, commission_rate=0.15)

    assert custom.price_cash == default.price_cash
    assert custom.price_5_dealer == default.price_5_dealer
    assert custom.commission_cash == pytest.approx(1500.00, abs=0.01)


def test_gutters():
    result = price(1000, include_gutters=True, perimeter_ft=100, gutter_price_per_ft=15)
    assert result.gutter_total == 1500
    assert result.final_total == pytest.approx(result.price_cash + 1500)


def test_gutters_not_included():
    result = price(2000, include_gutters=False, perimeter_ft=200)
    assert result.gutter_total == 0
    assert result.final_total == result.price_cash


def test_solar_panel_adjustment():
    result = price(1000, roof_features=RoofFeatures(has_solar_panels=True, solar_panel_count=10))
    assert result.roof_feature_adjustments.solar_panel_total == 1500


def test_all_feature_adjustments():
    features = RoofFeatures(
        has_solar_panels=True, solar_panel_count=5,
        has_skylights=True, skylight_count=2,
        has_satellites=True, satellite_count=1,
    )
    adjustments = price(1000, roof_features=features).roof_feature_adjustments

    assert adjustments.solar_panel_total == 750
    assert adjustments.skylight_total == 400
    assert adjustments.satellite_total == 75
    assert adjustments.total_adjustments == 1225


def test_feature_counts_ignored_without_flag():
    features = RoofFeatures(has_solar_panels=False, solar_panel_count=12, has_skylights=True, skylight_count=1)
    adjustments = price(1000, roof_features=features).roof_feature_adjustments

    assert adjustments.solar_panel_total == 0
    assert adjustments.skylight_total == 200


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("sq_ft", [1, 500, 1000, 3957, 10000])
def test_tiers_monotonic(sq_ft):
    result = price(sq_ft)
    assert result.price_10_dealer > result.price_5_dealer > result.price_cash


@pytest.mark.parametrize("sq_ft, cost_per_sq_ft", [(1, 5.0), (1234.5, 4.5), (10000, 7.25)])
def test_cost_scales_exactly(sq_ft, cost_per_sq_ft):
    assert price(sq_ft, cost_per_sq_ft=cost_per_sq_ft).cost == sq_ft * cost_per_sq_ft


def test_final_total_is_additive():
    features = RoofFeatures(has_skylights=True, skylight_count=3, has_satellites=True, satellite_count=2)
    result = price(2750, include_gutters=True, perimeter_ft=180, roof_features=features)

    assert result.final_total == (
        result.price_cash + result.gutter_total + result.roof_feature_adjustments.total_adjustments
    )


def test_no_features_means_zero_adjustments():
    adjustments = price(1800).roof_feature_adjustments
    assert adjustments.solar_panel_total == 0
    assert adjustments.skylight_total == 0
    assert adjustments.satellite_total == 0
    assert adjustments.total_adjustments == 0


def test_idempotent():
    request = PricingRequest(sq_ft=2222, include_gutters=True, perimeter_ft=150)
    assert calculate_pricing(request) == calculate_pricing(request)


# ---------------------------------------------------------------------------
# Precedence: request → stored configuration → defaults
# ---------------------------------------------------------------------------

def test_stored_configuration_used_when_request_omits_field():
    stored = PricingConfiguration(cost_per_sq_ft=4.5)
    result = calculate_pricing(PricingRequest(sq_ft=2000), stored)
    assert result.cost == 9000


def test_request_override_beats_stored_configuration():
    stored = PricingConfiguration(cost_per_sq_ft=4.5, target_profit=3000)
    result = calculate_pricing(PricingRequest(sq_ft=1000, cost_per_sq_ft=6.0), stored)

    assert result.cost == 6000
    assert result.profit == 3000


def test_resolve_configuration_does_not_mutate_inputs():
    stored = PricingConfiguration(tier2_dealer_fee=0.12)
    resolved = resolve_configuration(PricingRequest(sq_ft=1000, tier2_dealer_fee=0.2), stored)

    assert resolved.tier2_dealer_fee == 0.2
    assert stored.tier2_dealer_fee == 0.12


def test_tier1_dealer_fee_applies_to_cash_price():
    result = price(1000, tier1_dealer_fee=0.05)
    assert result.price_cash == pytest.approx(7000 / 0.65)


# ---------------------------------------------------------------------------
# Degenerate input
# ---------------------------------------------------------------------------

def test_zero_sqft_raises_instead_of_infinity():
    with pytest.raises(DegeneratePricingError):
        price(0)


def test_total_fee_over_100_percent_raises():
    with pytest.raises(DegeneratePricingError):
        price(1000, tier3_dealer_fee=0.75)


# ---------------------------------------------------------------------------
# Engine wrapper and tier table
# ---------------------------------------------------------------------------

def test_engine_uses_stored_configuration(settings_service):
    settings_service.update_configuration({'target_profit': 3000.0}, user_id="owner-1", role="owner")
    engine = PricingEngine(settings_service)

    result, resolved = engine.quote(PricingRequest(sq_ft=1000))

    assert resolved.target_profit == 3000
    assert result.price_cash == pytest.approx(8000 / 0.7)


def test_engine_without_source_uses_defaults():
    result = PricingEngine().calculate(PricingRequest(sq_ft=1000))
    assert result.price_cash == pytest.approx(10000.00, abs=0.01)


def test_tier_table():
    request = PricingRequest(sq_ft=1000)
    result, resolved = PricingEngine().quote(request)
    df = tier_table(result, resolved)

    assert df['Tier'].tolist() == ["Cash", "5 Dealer", "10 Dealer", "18% Fee", "23% Fee"]
    assert df['Total Fee'].tolist() == pytest.approx([0.30, 0.40, 0.45, 0.48, 0.53])
    assert df.loc[1, 'Price'] == pytest.approx(11666.67, abs=0.01)
    assert df.loc[3, 'Price'] == pytest.approx(7000 / 0.52)
    assert df.loc[3, 'Price'] == result.price_18_fee
    assert df.loc[4, 'Price'] == result.price_23_fee
    assert df['Commission'].isna().tolist() == [False, False, False, True, True]


def test_result_wire_format():
    data = price(1000, roof_features=RoofFeatures(has_solar_panels=True, solar_panel_count=1)).to_dict()

    assert data['price5Dealer'] == pytest.approx(11666.67, abs=0.01)
    assert data['pricePerSqFtCash'] == pytest.approx(10.0)
    assert data['roofFeatureAdjustments']['solarPanelTotal'] == 150
    assert 'finalTotal' in data
    assert 'fee13' in data
