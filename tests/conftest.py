import os
import sys

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from roof_estimator.services.pricing_settings_service import PricingSettingsService


@pytest.fixture
def settings_service(tmp_path):
    """Settings store backed by a throwaway CSV."""
    return PricingSettingsService(tmp_path / "pricing_settings.csv")
