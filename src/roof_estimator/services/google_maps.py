"""
Google Maps client - geocoding and Solar API building insights.
"""
import logging
from typing import Optional

import httpx

from ..engine.models import GeocodeResult, RoofData
from ..engine.roof_geometry import roof_data_from_building_insights

logger = logging.getLogger(__name__)

SOLAR_API_BASE = "https://solar.googleapis.com/v1"
GEOCODING_API_BASE = "https://maps.googleapis.com/maps/api/geocode/json"
STREET_VIEW_API_BASE = "https://maps.googleapis.com/maps/api/streetview"
STATIC_MAP_API_BASE = "https://maps.googleapis.com/maps/api/staticmap"

# Tried in order until the Solar API has coverage
QUALITY_LEVELS = ("HIGH", "MEDIUM", "LOW")

MIN_ADDRESS_LENGTH = 5
MAX_ADDRESS_LENGTH = 200


class ConfigurationError(RuntimeError):
    """Raised when a required setting (e.g. an API key) is missing."""


class ExternalServiceError(RuntimeError):
    """Raised when a third-party API returns an unexpected error."""


def validate_address(address: str) -> str:
    """Strip and length-check an address, raising ValueError when invalid."""
    address = (address or "").strip()
    if len(address) < MIN_ADDRESS_LENGTH:
        raise ValueError(f"Address must be at least {MIN_ADDRESS_LENGTH} characters")
    if len(address) > MAX_ADDRESS_LENGTH:
        raise ValueError(f"Address must be less than {MAX_ADDRESS_LENGTH} characters")
    return address


def validate_coordinates(lat: float, lng: float):
    """Raise ValueError when coordinates are out of range."""
    if not -90 <= lat <= 90 or not -180 <= lng <= 180:
        raise ValueError("Invalid coordinates provided")


class GoogleMapsClient:
    """Thin wrapper over the Geocoding and Solar APIs."""

    def __init__(
        self,
        api_key: Optional[str],
        timeout: float = 10.0,
        http_client: Optional[httpx.Client] = None,
    ):
        self.api_key = api_key
        self.http = http_client or httpx.Client(timeout=timeout)

    def _require_key(self) -> str:
        if not self.api_key:
            raise ConfigurationError("Google Maps API key is not configured")
        return self.api_key

    def _get_json(self, url: str, params: dict, service: str, allow_not_found: bool = False) -> Optional[dict]:
        """
        GET a Google API and decode the JSON body.

        Returns None for a 404 when allow_not_found is set. Transport
        failures, error statuses and undecodable bodies raise ExternalServiceError.
        """
        try:
            response = self.http.get(url, params=params)
        except httpx.RequestError as e:
            raise ExternalServiceError(f"{service} request failed: {type(e).__name__}") from e

        if allow_not_found and response.status_code == 404:
            return None
        if response.is_error:
            raise ExternalServiceError(f"{service} error: {response.status_code} {response.reason_phrase}")

        try:
            return response.json()
        except ValueError as e:
            raise ExternalServiceError(f"{service} returned an invalid response") from e

    def geocode_address(self, address: str) -> Optional[GeocodeResult]:
        """
        Geocode an address.

        Returns None when Google finds no match.
        """
        key = self._require_key()
        address = validate_address(address)

        data = self._get_json(GEOCODING_API_BASE, {"address": address, "key": key}, "Geocoding API")
        results = data.get("results") or []
        if data.get("status") != "OK" or not results:
            logger.info("No geocoding match for %r (status %s)", address, data.get("status"))
            return None

        result = results[0]
        location = result["geometry"]["location"]
        lat, lng = location["lat"], location["lng"]

        city = state = zip_code = ""
        for component in result.get("address_components", []):
            types = component.get("types", [])
            if "locality" in types:
                city = component.get("long_name", "")
            elif "administrative_area_level_1" in types:
                state = component.get("short_name", "")
            elif "postal_code" in types:
                zip_code = component.get("long_name", "")

        return GeocodeResult(
            formatted_address=result.get("formatted_address", address),
            latitude=lat,
            longitude=lng,
            city=city,
            state=state,
            zip_code=zip_code,
            street_view_url=f"{STREET_VIEW_API_BASE}?size=800x400&location={lat},{lng}&key={key}",
            aerial_view_url=(
                f"{STATIC_MAP_API_BASE}?center={lat},{lng}&zoom=20&size=800x400&maptype=satellite&key={key}"
            ),
        )

    def get_building_insights(self, lat: float, lng: float) -> Optional[RoofData]:
        """
        Get roof data for the building closest to a point.

        Tries HIGH quality first, then MEDIUM and LOW. Returns None when no
        quality level has coverage.
        """
        key = self._require_key()
        validate_coordinates(lat, lng)

        for quality in QUALITY_LEVELS:
            payload = self._get_json(
                f"{SOLAR_API_BASE}/buildingInsights:findClosest",
                {
                    "location.latitude": lat,
                    "location.longitude": lng,
                    "requiredQuality": quality,
                    "key": key,
                },
                "Solar API",
                allow_not_found=True,
            )

            if payload is None:
                logger.debug("No %s quality Solar data at %s,%s", quality, lat, lng)
                continue

            roof = roof_data_from_building_insights(payload, quality)
            if roof is not None:
                return roof

        logger.info("Solar API has no coverage at %s,%s", lat, lng)
        return None

    def close(self):
        self.http.close()
