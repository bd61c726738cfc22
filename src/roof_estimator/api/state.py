"""
Shared service instances for the API.

Routers receive these through FastAPI dependencies so tests can
substitute their own via app.dependency_overrides.
"""
from ..config.settings import get_settings
from ..engine.pricing_engine import PricingEngine
from ..services.estimate_service import EstimateService
from ..services.google_maps import GoogleMapsClient
from ..services.pricing_settings_service import PricingSettingsService

settings = get_settings()

settings_service = PricingSettingsService(settings.pricing_settings_csv)
engine = PricingEngine(settings_service)
maps_client = GoogleMapsClient(settings.google_maps_api_key, timeout=settings.request_timeout_seconds)
estimate_service = EstimateService(maps_client, engine)


def get_settings_service() -> PricingSettingsService:
    return settings_service


def get_engine() -> PricingEngine:
    return engine


def get_maps_client() -> GoogleMapsClient:
    return maps_client


def get_estimate_service() -> EstimateService:
    return estimate_service
