"""
Estimate API - address lookup, roof analysis and full estimates.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..engine.models import RoofFeatures
from ..services.estimate_service import EstimateService
from ..services.google_maps import ConfigurationError, ExternalServiceError, GoogleMapsClient
from .auth import CurrentUser, current_user
from .pricing_api import CamelModel, RoofFeaturesModel
from .state import get_estimate_service, get_maps_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["estimate"])


class EstimateRequest(CamelModel):
    """Request model for a full estimate."""
    address: str
    include_gutters: bool = False
    roof_features: Optional[RoofFeaturesModel] = None


def _external_error(e: Exception, what: str) -> HTTPException:
    if isinstance(e, ConfigurationError):
        logger.error("%s unavailable: %s", what, e)
        return HTTPException(status_code=500, detail=str(e))
    logger.error("%s failed: %s", what, e)
    return HTTPException(status_code=502, detail=f"Failed to {what.lower()}")


@router.get("/geocode")
def geocode(
    address: str = Query(...),
    user: CurrentUser = Depends(current_user),
    client: GoogleMapsClient = Depends(get_maps_client),
):
    """Geocode an address."""
    try:
        result = client.geocode_address(address)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except (ConfigurationError, ExternalServiceError) as e:
        raise _external_error(e, "Geocode address")

    if result is None:
        raise HTTPException(status_code=404, detail="Address not found")
    return {"success": True, "data": result.to_dict()}


@router.get("/roof-analysis")
def roof_analysis(
    lat: float = Query(...),
    lng: float = Query(...),
    user: CurrentUser = Depends(current_user),
    client: GoogleMapsClient = Depends(get_maps_client),
):
    """Get roof measurements for the building nearest a point."""
    try:
        roof = client.get_building_insights(lat, lng)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except (ConfigurationError, ExternalServiceError) as e:
        raise _external_error(e, "Analyze roof")

    if roof is None:
        raise HTTPException(
            status_code=404,
            detail="Could not retrieve roof data for this location. "
                   "The Solar API may not have coverage for this address.",
        )
    return {"success": True, "data": roof.to_dict()}


@router.post("/estimate")
def build_estimate(
    body: EstimateRequest,
    user: CurrentUser = Depends(current_user),
    service: EstimateService = Depends(get_estimate_service),
):
    """Geocode, measure and price a property in one call."""
    features = RoofFeatures(**body.roof_features.model_dump()) if body.roof_features else None
    try:
        estimate = service.build_estimate(body.address, features, body.include_gutters)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except (ConfigurationError, ExternalServiceError) as e:
        raise _external_error(e, "Build estimate")

    return {"success": True, "data": estimate.to_dict()}
