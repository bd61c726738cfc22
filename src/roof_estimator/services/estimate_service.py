"""
Estimate Service - assembles address, roof geometry and pricing into one estimate.
"""
import logging
from dataclasses import dataclass
from typing import Optional

import pandas as pd

from ..engine.models import GeocodeResult, PricingRequest, PricingResult, RoofData, RoofFeatures
from ..engine.pricing_engine import PricingEngine, table_records, tier_table
from .google_maps import GoogleMapsClient

logger = logging.getLogger(__name__)


@dataclass
class Estimate:
    """A complete roofing estimate for one property."""
    address: GeocodeResult
    roof: RoofData
    pricing: PricingResult
    tiers: pd.DataFrame

    def to_dict(self) -> dict:
        return {
            "address": self.address.to_dict(),
            "roof": self.roof.to_dict(),
            "pricing": self.pricing.to_dict(),
            "tiers": table_records(self.tiers),
        }


class EstimateService:
    """Address → Geocode → Roof → Price."""

    def __init__(self, maps_client: GoogleMapsClient, engine: PricingEngine):
        self.maps_client = maps_client
        self.engine = engine

    def build_estimate(
        self,
        address: str,
        roof_features: Optional[RoofFeatures] = None,
        include_gutters: bool = False,
    ) -> Estimate:
        """
        Build an estimate for an address.

        Raises:
            ValueError: for a malformed address or pricing input
            LookupError: when the address or its roof cannot be found
        """
        geocoded = self.maps_client.geocode_address(address)
        if geocoded is None:
            raise LookupError(f"Address not found: {address}")

        roof = self.maps_client.get_building_insights(geocoded.latitude, geocoded.longitude)
        if roof is None:
            raise LookupError(
                "Could not retrieve roof data for this location. "
                "The Solar API may not have coverage for this address."
            )

        request = PricingRequest(
            sq_ft=roof.roof_area_sq_ft,
            perimeter_ft=roof.perimeter_ft,
            include_gutters=include_gutters,
            roof_features=roof_features,
        )
        pricing, resolved = self.engine.quote(request)

        logger.info(
            "Estimate for %s: %s sq ft (%s), cash $%.2f",
            geocoded.formatted_address, roof.roof_area_sq_ft, roof.data_quality, pricing.price_cash,
        )
        return Estimate(
            address=geocoded,
            roof=roof,
            pricing=pricing,
            tiers=tier_table(pricing, resolved),
        )
