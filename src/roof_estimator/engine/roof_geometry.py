"""
Roof geometry - converts Solar API building insights into roof measurements.

The Solar API reports roof segment areas and pitches but no edge lengths,
so perimeter and edge figures are estimates.
"""
import math
from typing import Optional

from .models import RoofData

SQ_FEET_PER_SQ_METER = 10.7639
FEET_PER_METER = 3.28084

DEFAULT_PITCH = "4/12"
DEFAULT_PITCH_DEGREES = 18.43  # ~4/12

# Anything under ~1.5/12 is reported as flat; the API returns small non-zero pitches for flat roofs
FLAT_ROOF_MAX_DEGREES = 7.2

# Share of the estimated perimeter attributed to each edge type
EDGE_SHARES = {
    'ridges_hips_ft': 0.30,
    'valleys_ft': 0.10,
    'rakes_ft': 0.25,
    'eaves_ft': 0.35,
}


def sq_meters_to_sq_feet(meters: float) -> float:
    return meters * SQ_FEET_PER_SQ_METER


def meters_to_feet(meters: float) -> float:
    return meters * FEET_PER_METER


def pitch_degrees_to_ratio(degrees: float) -> str:
    """Convert a pitch angle to rise over 12 (22.6° → "5/12")."""
    rise = _round_half_up(math.tan(math.radians(degrees)) * 12)
    return f"{rise}/12"


def _round_half_up(value: float) -> int:
    # Python's round() is banker's rounding; measurements round half up
    return int(math.floor(value + 0.5))


def predominant_pitch(segments: list[dict]) -> str:
    """Pitch of the largest roof segment."""
    if not segments:
        return DEFAULT_PITCH

    largest = max(segments, key=_segment_area)

    # 0 is a valid (flat) pitch, only a missing value falls back
    pitch = largest.get('pitchDegrees')
    if pitch is None:
        pitch = DEFAULT_PITCH_DEGREES

    if pitch < FLAT_ROOF_MAX_DEGREES:
        return "0/12"

    return pitch_degrees_to_ratio(pitch)


def estimate_perimeter(area_sq_ft: float, facets: int) -> float:
    """
    Estimate roof perimeter assuming roughly square facets.

    Perimeter ≈ 4 × sqrt(area / facets) × sqrt(facets) × 0.8
    """
    avg_facet_area = area_sq_ft / max(facets, 1)
    avg_facet_side = math.sqrt(avg_facet_area)
    # Factor accounts for rectangular shapes and shared edges
    return avg_facet_side * 4 * math.sqrt(facets) * 0.8


def _segment_area(segment: dict) -> float:
    # Solar API nests area under "stats"; flattened payloads carry it directly
    return segment.get('stats', segment).get('areaMeters2', 0) or 0


def roof_data_from_building_insights(payload: dict, quality: Optional[str] = None) -> Optional[RoofData]:
    """
    Build RoofData from a buildingInsights response.

    Returns None when the payload has no solarPotential section.
    """
    solar_potential = payload.get('solarPotential')
    if not solar_potential:
        return None

    segments = solar_potential.get('roofSegmentStats') or []
    whole_roof = solar_potential.get('wholeRoofStats') or {}

    if whole_roof.get('areaMeters2'):
        area_sq_ft = sq_meters_to_sq_feet(whole_roof['areaMeters2'])
    else:
        area_sq_ft = sum(sq_meters_to_sq_feet(_segment_area(seg)) for seg in segments)

    perimeter = estimate_perimeter(area_sq_ft, len(segments))
    edges = {name: _round_half_up(perimeter * share) for name, share in EDGE_SHARES.items()}

    return RoofData(
        roof_area_sq_ft=_round_half_up(area_sq_ft),
        roof_facets=len(segments) or 1,
        predominant_pitch=predominant_pitch(segments),
        perimeter_ft=_round_half_up(perimeter),
        data_quality=quality,
        **edges,
    )
