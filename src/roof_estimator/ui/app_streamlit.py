"""
Streamlit UI for the Roof Estimator.

Features:
- Address lookup (geocode + Solar API roof measurements) when an API key is set
- Manual roof size entry
- Gutter and roof feature adjustments
- Tier pricing table with CSV export
"""
import streamlit as st
import pandas as pd
from datetime import datetime

from roof_estimator import __version__
from roof_estimator.config.settings import get_settings
from roof_estimator.engine import (
    PricingEngine,
    PricingRequest,
    PricingValidationError,
    RoofFeatures,
    tier_table,
)
from roof_estimator.services.google_maps import GoogleMapsClient, ExternalServiceError
from roof_estimator.services.pricing_settings_service import PricingSettingsService


st.set_page_config(
    page_title="Roof Estimator",
    layout="wide",
    initial_sidebar_state="expanded"
)


@st.cache_resource
def get_settings_service():
    """Get cached settings store."""
    return PricingSettingsService(get_settings().pricing_settings_csv)


@st.cache_resource
def get_engine():
    """Get cached engine instance."""
    return PricingEngine(get_settings_service())


@st.cache_resource
def get_maps_client():
    settings = get_settings()
    return GoogleMapsClient(settings.google_maps_api_key, timeout=settings.request_timeout_seconds)


try:
    engine = get_engine()
    configuration = engine.get_configuration()
except Exception as e:
    st.error(f"System Error: {e}")
    st.stop()


# ============================================================================
# SIDEBAR: Stored pricing settings
# ============================================================================
with st.sidebar:
    st.header("⚙️ Pricing Settings")

    with st.container(border=True):
        st.metric("Cost / Sq Ft", f"${configuration.cost_per_sq_ft:,.2f}")
        st.metric("Target Profit", f"${configuration.target_profit:,.0f}")
        st.caption(
            f"Dealer fees: {configuration.tier1_dealer_fee:.0%} / "
            f"{configuration.tier2_dealer_fee:.0%} / {configuration.tier3_dealer_fee:.0%}"
        )
        st.caption(f"Agent commission: {configuration.commission_rate:.0%}")

    if configuration.updated_by:
        st.caption(f"Last changed by {configuration.updated_by} on {configuration.updated_at:%Y-%m-%d}")
    st.caption("Settings are edited by owners through the API.")


# ============================================================================
# MAIN CONTENT
# ============================================================================
st.title("Roof Estimator")
st.caption(f"v{__version__} | Pricing Engine Active | {datetime.now().strftime('%Y-%m-%d')}")

if 'roof' not in st.session_state:
    st.session_state.roof = None

col1, col2 = st.columns([1.2, 1.8], gap="large")

with col1:
    st.subheader("Property")

    with st.container(border=True):
        st.markdown("##### 🏠 Address Lookup")
        address = st.text_input("Address", placeholder="123 Main St, Springfield, IL", label_visibility="collapsed")
        if st.button("🔍 Measure Roof", type="primary", disabled=not get_settings().google_maps_api_key):
            client = get_maps_client()
            try:
                geocoded = client.geocode_address(address)
                roof = client.get_building_insights(geocoded.latitude, geocoded.longitude) if geocoded else None
            except (ValueError, ExternalServiceError) as e:
                st.error(str(e))
            else:
                if roof is None:
                    st.warning("Could not retrieve roof data for this address.")
                else:
                    st.session_state.roof = roof
                    st.success(f"{geocoded.formatted_address}: {roof.roof_area_sq_ft:,} sq ft, pitch {roof.predominant_pitch}")

    roof = st.session_state.roof
    sq_ft = st.number_input("Roof Area (sq ft)", min_value=0.0, value=float(roof.roof_area_sq_ft) if roof else 2000.0, step=50.0)
    perimeter_ft = st.number_input("Perimeter (ft)", min_value=0.0, value=float(roof.perimeter_ft) if roof else 0.0, step=10.0)
    include_gutters = st.checkbox("Include Gutters")

    with st.expander("🔧 Roof Features"):
        c1, c2 = st.columns(2)
        has_solar = c1.checkbox("Solar Panels")
        solar_count = c2.number_input("Panels", min_value=0, max_value=100, value=0, step=1, disabled=not has_solar)
        has_skylights = c1.checkbox("Skylights")
        skylight_count = c2.number_input("Skylights", min_value=0, max_value=50, value=0, step=1, disabled=not has_skylights)
        has_satellites = c1.checkbox("Satellite Dishes")
        satellite_count = c2.number_input("Dishes", min_value=0, max_value=20, value=0, step=1, disabled=not has_satellites)

with col2:
    st.subheader("Quote Summary")

    request = PricingRequest(
        sq_ft=sq_ft,
        perimeter_ft=perimeter_ft,
        include_gutters=include_gutters,
        roof_features=RoofFeatures(
            has_solar_panels=has_solar,
            solar_panel_count=int(solar_count),
            has_skylights=has_skylights,
            skylight_count=int(skylight_count),
            has_satellites=has_satellites,
            satellite_count=int(satellite_count),
        ),
    )

    try:
        result, resolved = engine.quote(request)
    except PricingValidationError as e:
        st.warning(str(e))
        st.stop()

    with st.container(border=True):
        m1, m2, m3 = st.columns(3)
        m1.metric("Cash Price", f"${result.price_cash:,.2f}")
        m2.metric("Final Total", f"${result.final_total:,.2f}")
        m3.metric("Cost", f"${result.cost:,.2f}")

        adjustments = result.roof_feature_adjustments
        if result.gutter_total or adjustments.total_adjustments:
            st.caption(
                f"Gutters ${result.gutter_total:,.2f} | "
                f"Solar ${adjustments.solar_panel_total:,.2f} | "
                f"Skylights ${adjustments.skylight_total:,.2f} | "
                f"Satellites ${adjustments.satellite_total:,.2f}"
            )
        st.caption(f"13% fee reference: ${result.fee13:,.2f} | Profit: ${result.profit:,.2f}")

    tiers = tier_table(result, resolved)
    display = tiers.copy()
    display['Dealer Fee'] = display['Dealer Fee'].map(lambda v: f"{v:.0%}")
    display['Total Fee'] = display['Total Fee'].map(lambda v: f"{v:.0%}")
    display['Price / Sq Ft'] = display['Price / Sq Ft'].map(lambda v: f"${v:,.2f}")
    display['Price'] = display['Price'].map(lambda v: f"${v:,.2f}")
    display['Commission'] = display['Commission'].map(lambda v: f"${v:,.2f}" if pd.notna(v) else "")
    st.dataframe(display, use_container_width=True, hide_index=True)

    st.download_button(
        "📥 CSV",
        data=tiers.to_csv(index=False),
        file_name=f"roof_quote_{int(sq_ft)}sqft.csv",
        mime="text/csv",
    )
