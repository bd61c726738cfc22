"""Engine subpackage - core pricing formula, validation and roof geometry."""
from .pricing_engine import (
    PricingEngine,
    calculate_pricing,
    validate_pricing_input,
    tier_table,
    table_records,
    resolve_configuration,
)
from .models import (
    PricingConfiguration,
    PricingRequest,
    PricingResult,
    RoofFeatures,
    RoofFeatureAdjustments,
    RoofData,
    GeocodeResult,
)
from .errors import PricingValidationError, DegeneratePricingError

__all__ = [
    'PricingEngine', 'calculate_pricing', 'validate_pricing_input', 'tier_table',
    'table_records', 'resolve_configuration',
    'PricingConfiguration', 'PricingRequest', 'PricingResult', 'RoofFeatures',
    'RoofFeatureAdjustments', 'RoofData', 'GeocodeResult',
    'PricingValidationError', 'DegeneratePricingError',
]
