# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Geodetic transform on the WGS84 ellipsoid.

Pure mathematical conversion from geodetic coordinates to the
Earth-Centered Earth-Fixed (ECEF) frame. Output is in kilometers,
matching the tolerance units of the geodesy checks.
"""
import math

from simverify.domain.constants import WGS84


def prime_vertical_radius(lat_rad: float) -> float:
    """Prime-vertical radius of curvature N(lat) in km."""
    sin_lat = math.sin(lat_rad)
    return WGS84.A / math.sqrt(1.0 - WGS84.E_SQUARED * sin_lat**2)


def to_ecef(
    lat_deg: float,
    lon_deg: float,
    elevation_m: float,
) -> tuple[float, float, float]:
    """
    Convert geodetic coordinates to ECEF position (WGS84 ellipsoid).

    N(lat) = a / sqrt(1 - e² sin² lat) is finite everywhere. At the poles
    x = y = 0 exactly; on the equator z = 0 exactly.

    Args:
        lat_deg: Geodetic latitude in degrees [-90, 90].
        lon_deg: Longitude in degrees.
        elevation_m: Height above the ellipsoid in meters.

    Returns:
        (x, y, z) in kilometers, ECEF frame.
    """
    if not -90.0 <= lat_deg <= 90.0:
        raise ValueError(f"latitude must be in [-90, 90], got {lat_deg}")

    e2 = WGS84.E_SQUARED
    lat_rad = math.radians(lat_deg)
    lon_rad = math.radians(lon_deg)
    h = elevation_m / 1000.0

    n = prime_vertical_radius(lat_rad)

    if abs(lat_deg) == 90.0:
        cos_lat = 0.0
        sin_lat = math.copysign(1.0, lat_deg)
    elif lat_deg == 0.0:
        cos_lat = 1.0
        sin_lat = 0.0
    else:
        cos_lat = math.cos(lat_rad)
        sin_lat = math.sin(lat_rad)

    x = (n + h) * cos_lat * math.cos(lon_rad)
    y = (n + h) * cos_lat * math.sin(lon_rad)
    z = (n * (1.0 - e2) + h) * sin_lat

    # Avoid -0.0 leaking into reports
    return x + 0.0, y + 0.0, z + 0.0
