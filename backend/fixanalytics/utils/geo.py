"""
Geodesic helpers for fix logs.

Distances are great-circle (Haversine) on a spherical Earth; headings are
compass degrees (0=North, 90=East).
"""

import numpy as np

from fixanalytics.models.summary import COMPASS_DIRECTIONS

EARTH_RADIUS_M = 6371000.0  # Earth's mean radius in meters


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate great-circle distance between two points.

    Args:
        lat1, lon1: First point coordinates in degrees
        lat2, lon2: Second point coordinates in degrees

    Returns:
        Distance in meters
    """
    if lat1 == lat2 and lon1 == lon2:
        return 0.0

    lat1_rad = np.radians(lat1)
    lat2_rad = np.radians(lat2)
    dlat = np.radians(lat2 - lat1)
    dlon = np.radians(lon2 - lon1)

    a = np.sin(dlat/2)**2 + np.cos(lat1_rad) * np.cos(lat2_rad) * np.sin(dlon/2)**2
    a = min(max(float(a), 0.0), 1.0)
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1-a))

    return float(EARTH_RADIUS_M * c)


def normalize_heading(heading: float) -> float:
    """Wrap a heading into [0, 360)."""
    return float(heading % 360.0)


def heading_delta(previous: float, current: float) -> float:
    """
    Absolute angular difference between two headings.

    Returns the circular distance in [0, 180], so 350 -> 10 is 20 degrees.
    """
    delta = abs(normalize_heading(current) - normalize_heading(previous))
    if delta > 180:
        delta = 360 - delta
    return float(delta)


def compass_direction(heading: float) -> str:
    """Map a heading to one of eight 45-degree compass sectors."""
    sector = int(((normalize_heading(heading) + 22.5) % 360.0) // 45.0)
    return COMPASS_DIRECTIONS[sector]
