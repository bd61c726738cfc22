import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from roof_estimator import __version__
from roof_estimator.config.settings import get_settings
from roof_estimator.api.pricing_api import router as pricing_router
from roof_estimator.api.estimate_api import router as estimate_router
from roof_estimator.api import state

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Release pooled connections to the Google APIs
    state.maps_client.close()


app = FastAPI(
    title="Roof Estimator API",
    description="Backend API for roofing estimates and pricing settings",
    version=__version__,
    lifespan=lifespan,
)

# Enable CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(pricing_router)
app.include_router(estimate_router)


@app.get("/")
async def root():
    return {"status": "online", "message": "Roof Estimator API Active"}


@app.get("/system/status")
async def get_status():
    return {
        "engine_active": True,
        "pricing_settings_stored": settings.pricing_settings_csv.exists(),
        "google_maps_configured": bool(settings.google_maps_api_key),
    }
