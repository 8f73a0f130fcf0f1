# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Reference catalogs: known celestial events, geodetic landmarks, physics
benchmarks, and named constants.

A ReferenceCatalog is immutable configuration. It is built once, passed
to the verification engine and the suite at construction, and never
changed afterwards. Lookups of unknown identifiers return None.

Data sources:
    Event timings — NASA eclipse bulletins, USNO seasons table (UTC).
    Landmarks — published WGS84 coordinates.
"""
from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from simverify.domain.constants import AstroConstants


@dataclass(frozen=True)
class KnownEvent:
    """A celestial event with a published reference instant.

    tolerance_unit names what tolerance is measured in: "s" for timing,
    "magnitude" for eclipse magnitude, "deg" for angular separation.
    """
    event_id: str
    instant: datetime
    kind: str
    tolerance: float
    tolerance_unit: str = "s"
    location: tuple[float, float] | None = None
    magnitude: float | None = None
    duration_s: float | None = None
    separation_deg: float | None = None


@dataclass(frozen=True)
class Landmark:
    """A point with known geodetic coordinates on the WGS84 ellipsoid."""
    landmark_id: str
    name: str
    latitude_deg: float
    longitude_deg: float
    elevation_m: float


@dataclass(frozen=True)
class Benchmark:
    """A physics benchmark: expected relationship and acceptance tolerance."""
    benchmark_id: str
    description: str
    tolerance: float
    initial_conditions: Mapping[str, Any] = field(default_factory=dict)
    expected: Mapping[str, Any] = field(default_factory=dict)


def _freeze(items) -> MappingProxyType:
    return MappingProxyType(dict(items))


@dataclass(frozen=True)
class ReferenceCatalog:
    """Read-only lookup tables addressed by identifier."""
    events: Mapping[str, KnownEvent]
    landmarks: Mapping[str, Landmark]
    benchmarks: Mapping[str, Benchmark]
    constants: Mapping[str, float]

    def __post_init__(self):
        for name in ("events", "landmarks", "benchmarks", "constants"):
            table = getattr(self, name)
            if not isinstance(table, MappingProxyType):
                object.__setattr__(self, name, _freeze(table))

    @classmethod
    def build(
        cls,
        events: Iterable[KnownEvent] = (),
        landmarks: Iterable[Landmark] = (),
        benchmarks: Iterable[Benchmark] = (),
        constants: Mapping[str, float] | None = None,
    ) -> "ReferenceCatalog":
        """Build a catalog from entry lists, keyed by their identifiers."""
        return cls(
            events={e.event_id: e for e in events},
            landmarks={lm.landmark_id: lm for lm in landmarks},
            benchmarks={b.benchmark_id: b for b in benchmarks},
            constants=dict(constants or {}),
        )

    def event(self, event_id: str) -> KnownEvent | None:
        return self.events.get(event_id)

    def landmark(self, landmark_id: str) -> Landmark | None:
        return self.landmarks.get(landmark_id)

    def benchmark(self, benchmark_id: str) -> Benchmark | None:
        return self.benchmarks.get(benchmark_id)

    def constant(self, name: str) -> float | None:
        return self.constants.get(name)

    def benchmark_tolerance(self, benchmark_id: str, default: float) -> float:
        """Tolerance of a benchmark, or default if the catalog has none."""
        bench = self.benchmark(benchmark_id)
        return bench.tolerance if bench is not None else default


def _utc(text: str) -> datetime:
    return datetime.fromisoformat(text).replace(tzinfo=timezone.utc)


KNOWN_EVENTS: tuple[KnownEvent, ...] = (
    KnownEvent(
        event_id="solar_eclipse_2024",
        instant=_utc("2024-04-08T18:17:00"),
        kind="total_solar_eclipse",
        location=(29.9, -99.8),  # Texas
        duration_s=268.0,
        tolerance=60.0,
    ),
    KnownEvent(
        event_id="lunar_eclipse_2025",
        instant=_utc("2025-03-14T06:59:00"),
        kind="total_lunar_eclipse",
        magnitude=1.178,
        tolerance=0.01,
        tolerance_unit="magnitude",
    ),
    KnownEvent(
        event_id="jupiter_saturn_2020",
        instant=_utc("2020-12-21T18:20:00"),
        kind="great_conjunction",
        separation_deg=0.1,
        tolerance=0.05,
        tolerance_unit="deg",
    ),
    KnownEvent(
        event_id="spring_equinox_2025",
        instant=_utc("2025-03-20T09:01:00"),
        kind="vernal_equinox",
        tolerance=3600.0,
    ),
    KnownEvent(
        event_id="summer_solstice_2025",
        instant=_utc("2025-06-20T22:42:00"),
        kind="summer_solstice",
        tolerance=3600.0,
    ),
)

WGS84_LANDMARKS: tuple[Landmark, ...] = (
    Landmark("greenwich", "Greenwich Observatory", 51.4769, -0.0005, 46.0),
    Landmark("north_pole", "Geographic North Pole", 90.0, 0.0, 0.0),
    Landmark("equator_null_island", "Null Island (0°N 0°E)", 0.0, 0.0, 0.0),
    Landmark("mount_everest", "Mount Everest Summit", 27.9881, 86.9250, 8848.86),
)

PHYSICS_BENCHMARKS: tuple[Benchmark, ...] = (
    Benchmark(
        benchmark_id="earth_moon_2body",
        description="Earth-Moon barycentric orbit",
        tolerance=0.01,
        initial_conditions=MappingProxyType({
            "earth_pos": (0.0, 0.0, 0.0),
            "moon_pos": (384_400.0, 0.0, 0.0),  # km
            "moon_vel": (0.0, 1.022, 0.0),      # km/s
        }),
        expected=MappingProxyType({"period_days": AstroConstants.MOON_ORBIT_PERIOD}),
    ),
    Benchmark("energy_conservation", "Total energy should remain constant", 1e-6),
    Benchmark("angular_momentum", "Angular momentum should remain constant", 1e-8),
    Benchmark("keplers_third_law", "T² ∝ a³ for all heliocentric bodies", 1e-3),
)


DEFAULT_CATALOG: ReferenceCatalog = ReferenceCatalog.build(
    events=KNOWN_EVENTS,
    landmarks=WGS84_LANDMARKS,
    benchmarks=PHYSICS_BENCHMARKS,
    constants={f.name: getattr(AstroConstants, f.name) for f in fields(AstroConstants)},
)
