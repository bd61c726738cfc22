"""
Pricing API - FastAPI router for quotes and pricing settings.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict

from ..engine.errors import DegeneratePricingError, PricingValidationError
from ..engine.models import PricingRequest, RoofFeatures, to_camel
from ..engine.pricing_engine import PricingEngine, table_records, tier_table
from ..services.pricing_settings_service import PricingSettingsService, SettingsValidationError
from .auth import CurrentUser, current_user
from .state import get_engine, get_settings_service

router = APIRouter(prefix="/api", tags=["pricing"])


class CamelModel(BaseModel):
    """Accepts camelCase keys from the web client (and snake_case from scripts)."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RoofFeaturesModel(CamelModel):
    has_solar_panels: bool = False
    solar_panel_count: int = 0
    has_skylights: bool = False
    skylight_count: int = 0
    has_satellites: bool = False
    satellite_count: int = 0


class PricingRequestModel(CamelModel):
    """Request model for a quote."""
    sq_ft: float
    perimeter_ft: float = 0.0
    include_gutters: bool = False
    roof_features: Optional[RoofFeaturesModel] = None

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

    def to_request(self) -> PricingRequest:
        data = self.model_dump(exclude={'roof_features'})
        features = RoofFeatures(**self.roof_features.model_dump()) if self.roof_features else None
        return PricingRequest(**data, roof_features=features)


class PricingSettingsUpdate(CamelModel):
    """Request model for updating pricing settings; omitted fields keep their stored value."""
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


# Endpoints

@router.post("/pricing/calculate")
async def calculate_pricing(
    body: PricingRequestModel,
    user: CurrentUser = Depends(current_user),
    engine: PricingEngine = Depends(get_engine),
):
    """Quote a roof against the stored pricing settings."""
    request = body.to_request()
    try:
        result, resolved = engine.quote(request)
    except (PricingValidationError, DegeneratePricingError) as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "success": True,
        "data": result.to_dict(),
        "tiers": table_records(tier_table(result, resolved)),
    }


@router.get("/settings/pricing")
async def get_pricing_settings(
    user: CurrentUser = Depends(current_user),
    service: PricingSettingsService = Depends(get_settings_service),
):
    """Fetch current pricing settings. Creates defaults if none exist."""
    return {"success": True, "data": service.get_configuration().to_dict()}


@router.put("/settings/pricing")
async def update_pricing_settings(
    updates: PricingSettingsUpdate,
    user: CurrentUser = Depends(current_user),
    service: PricingSettingsService = Depends(get_settings_service),
):
    """Update pricing settings. Owner only."""
    update_dict = updates.model_dump(exclude_none=True)

    try:
        updated = service.update_configuration(update_dict, user_id=user.user_id, role=user.role)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except SettingsValidationError as e:
        raise HTTPException(status_code=400, detail={"error": "Invalid pricing data", "errors": e.errors})

    return {"success": True, "data": updated.to_dict()}
