#!/usr/bin/env python
"""
Print a tier quote for a roof size using the stored pricing settings.

Usage:
    python scripts/quote.py 2400 [perimeter_ft]
"""
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from roof_estimator.config.settings import get_settings
from roof_estimator.engine import PricingEngine, PricingRequest, PricingValidationError, tier_table
from roof_estimator.services.pricing_settings_service import PricingSettingsService


def main():
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)

    sq_ft = float(sys.argv[1])
    perimeter_ft = float(sys.argv[2]) if len(sys.argv) > 2 else 0.0

    engine = PricingEngine(PricingSettingsService(get_settings().pricing_settings_csv))
    request = PricingRequest(sq_ft=sq_ft, perimeter_ft=perimeter_ft, include_gutters=perimeter_ft > 0)

    try:
        result, resolved = engine.quote(request)
    except PricingValidationError as e:
        print(f"ERROR: {e}")
        sys.exit(1)

    print("=" * 60)
    print(f"ROOF QUOTE: {sq_ft:,.0f} sq ft")
    print("=" * 60)
    print(tier_table(result, resolved).to_string(index=False, float_format=lambda v: f"{v:,.2f}"))
    print()
    print(f"  Cost:        ${result.cost:,.2f}")
    print(f"  Gutters:     ${result.gutter_total:,.2f}")
    print(f"  Final total: ${result.final_total:,.2f}")


if __name__ == "__main__":
    main()
