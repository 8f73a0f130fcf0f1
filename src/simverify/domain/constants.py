# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Astronomical and geodetic constants (J2000.0 epoch).

Units follow the verification engine: kilometers, seconds, days.
No external dependencies.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class _AstroConstants:
    """Reference constants used by the verification checks."""
    GM_SUN: float = 1.32712440018e11     # km³/s² — heliocentric gravitational parameter
    GM_EARTH: float = 3.986004418e5      # km³/s²
    GM_MOON: float = 4.9028e3            # km³/s²
    AU: float = 149_597_870.7            # km
    C: float = 299_792.458               # km/s — speed of light
    J2000: float = 2451545.0             # Julian Date of J2000.0
    EARTH_SIDEREAL_DAY: float = 86164.0905  # s
    EARTH_AXIAL_TILT: float = 23.4397    # deg
    SECONDS_PER_DAY: float = 86400.0
    # Mean orbital elements
    EARTH_ORBIT_A: float = 1.00000011    # AU
    EARTH_ORBIT_E: float = 0.01671022
    EARTH_ORBIT_I: float = 0.00005       # deg
    EARTH_ORBIT_PERIOD: float = 365.256363004  # days (sidereal year)
    MOON_ORBIT_A: float = 384_400.0      # km
    MOON_ORBIT_E: float = 0.0549
    MOON_ORBIT_I: float = 5.145          # deg to ecliptic
    MOON_ORBIT_PERIOD: float = 27.321661  # days (sidereal month)


@dataclass(frozen=True)
class _WGS84:
    """WGS84 reference ellipsoid in kilometers."""
    A: float = 6378.137                  # km — equatorial radius
    F: float = 1.0 / 298.257223563       # flattening

    @property
    def B(self) -> float:
        """Polar radius (km)."""
        return self.A * (1.0 - self.F)

    @property
    def E_SQUARED(self) -> float:
        """First eccentricity squared."""
        return 1.0 - (self.B / self.A) ** 2


AstroConstants: _AstroConstants = _AstroConstants()
WGS84: _WGS84 = _WGS84()
