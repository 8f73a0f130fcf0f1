# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Verification engine: compares simulation state against truth sources.

Checks:
    Position: Euclidean distance to a reference position (km).
    Celestial event: timing error against a catalogued instant (s).
    Orbital period: relative error against a reference period.
    Energy / angular momentum conservation: relative drift.
    Kepler's third law: T²/a³ against 4π²/GM_sun (heliocentric bodies).
    WGS84 transform: simulated landmark ECEF against the ellipsoid model.

Each evaluated check appends one TestResult. Checks that cannot be
evaluated append an OperationalWarning instead, never a result. Pass and
fail counts are derived from the result sequence.

The engine holds no lock. Concurrent runs use one engine per worker and
merge() the engines afterwards.
"""
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Mapping

import numpy as np

from simverify.domain.catalogs import DEFAULT_CATALOG, ReferenceCatalog
from simverify.domain.constants import AstroConstants
from simverify.domain.ephemeris import as_tuple, as_utc, as_vector
from simverify.domain.geodesy import to_ecef
from simverify.domain.reports import Report, build_report, report_to_json
from simverify.domain.results import (
    CheckKind,
    DegenerateInputError,
    OperationalWarning,
    TestResult,
    WarningKind,
)


_log = logging.getLogger(__name__)

MOON_POSITION_TOLERANCE_KM = 10.0
PLANET_POSITION_TOLERANCE_KM = 1000.0
ORBITAL_PERIOD_TOLERANCE = 0.01
WGS84_TOLERANCE_KM = 0.01  # 10 m

PASS_MARKER = "✅"
FAIL_MARKER = "❌"


@dataclass(frozen=True)
class KeplerBody:
    """A heliocentric body for the Kepler's third law check.

    Units must match GM_SUN (km³/s²): period in seconds, semi-major axis
    in km.
    """
    period: float
    semi_major_axis: float
    name: str = ""

    @classmethod
    def from_days(cls, period_days: float, semi_major_axis: float, name: str = "") -> "KeplerBody":
        return cls(period_days * AstroConstants.SECONDS_PER_DAY, semi_major_axis, name)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def position_tolerance_km(body_name: str) -> float:
    """Lunar error budgets are tighter than planetary ones."""
    if body_name == "moon":
        return MOON_POSITION_TOLERANCE_KM
    return PLANET_POSITION_TOLERANCE_KM


def _kepler_body(entry: Any) -> KeplerBody:
    if isinstance(entry, KeplerBody):
        return entry
    if isinstance(entry, Mapping):
        return KeplerBody(
            period=float(entry["period"]),
            semi_major_axis=float(entry["semi_major_axis"]),
            name=str(entry.get("name", "")),
        )
    raise TypeError(f"cannot interpret {type(entry).__name__} as a Kepler body")


class VerificationEngine:
    """
    Accumulates verification results for one or more runs.

    States: empty (no results) and accumulating. reset() returns to empty;
    the engine is reusable indefinitely.

    Args:
        catalog: Reference catalog for events, landmarks, benchmark
            tolerances and constants.
        clock: Returns the current UTC time; stamps results and reports.
    """

    def __init__(
        self,
        catalog: ReferenceCatalog = DEFAULT_CATALOG,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self._catalog = catalog
        self._clock = clock
        self._results: list[TestResult] = []
        self._warnings: list[OperationalWarning] = []

    @property
    def catalog(self) -> ReferenceCatalog:
        return self._catalog

    @property
    def results(self) -> tuple[TestResult, ...]:
        return tuple(self._results)

    @property
    def warnings(self) -> tuple[OperationalWarning, ...]:
        return tuple(self._warnings)

    @property
    def passed(self) -> int:
        return sum(1 for r in self._results if r.passed)

    @property
    def failed(self) -> int:
        return len(self._results) - self.passed

    @property
    def warning_count(self) -> int:
        return len(self._warnings)

    @property
    def is_empty(self) -> bool:
        return not self._results

    # ── Astronomical checks ─────────────────────────────────────────

    def verify_position(
        self,
        body_name: str,
        simulated: Any,
        reference: Any,
        instant: datetime,
    ) -> TestResult:
        """Compare a simulated body position with a reference position (km)."""
        sim = as_vector(simulated)
        ref = as_vector(reference)
        delta = np.abs(sim - ref)
        error = float(np.linalg.norm(delta))
        tolerance = position_tolerance_km(body_name)
        instant = as_utc(instant)

        return self._record(
            name=f"Position: {body_name} at {instant.isoformat()}",
            kind=CheckKind.POSITION,
            error=error,
            tolerance=tolerance,
            details={
                "body": body_name,
                "instant": instant,
                "simulated": as_tuple(sim),
                "reference": as_tuple(ref),
                "component_error": as_tuple(delta),
            },
        )

    def verify_celestial_event(
        self,
        event_id: str,
        simulated_instant: datetime,
    ) -> TestResult | None:
        """Compare a simulated event instant with the catalogued instant.

        Returns None, without recording a result, for unknown events.
        """
        event = self._catalog.event(event_id)
        if event is None:
            self.record_warning(
                WarningKind.UNKNOWN_EVENT,
                f"Event: {event_id}",
                f"Unknown event: {event_id}",
            )
            return None

        simulated_instant = as_utc(simulated_instant)
        error_s = abs((simulated_instant - event.instant).total_seconds())

        return self._record(
            name=f"Event: {event.kind}",
            kind=CheckKind.EVENT,
            error=error_s,
            tolerance=event.tolerance,
            details={
                "event_id": event_id,
                "expected": event.instant,
                "simulated": simulated_instant,
                "error_seconds": error_s,
                "tolerance_unit": event.tolerance_unit,
            },
        )

    def verify_orbital_period(
        self,
        body_name: str,
        simulated_days: float,
        reference_days: float,
        tolerance: float = ORBITAL_PERIOD_TOLERANCE,
    ) -> TestResult:
        """Relative orbital period error against a reference period.

        Raises:
            DegenerateInputError: reference period is zero.
        """
        name = f"Orbital Period: {body_name}"
        if reference_days == 0:
            self._degenerate(name, f"reference period of {body_name} is zero")
        relative_error = abs(simulated_days - reference_days) / abs(reference_days)
        self._require_finite(name, relative_error)

        return self._record(
            name=name,
            kind=CheckKind.ORBITAL_PERIOD,
            error=relative_error,
            tolerance=tolerance,
            details={
                "body": body_name,
                "simulated": float(simulated_days),
                "reference": float(reference_days),
                "relative_error": relative_error,
            },
        )

    # ── Physics checks ──────────────────────────────────────────────

    def verify_energy_conservation(
        self,
        initial_energy: float,
        current_energy: float,
        tolerance: float | None = None,
    ) -> TestResult:
        """Relative drift of total energy.

        Raises:
            DegenerateInputError: initial energy is zero.
        """
        name = "Energy Conservation"
        if tolerance is None:
            tolerance = self._catalog.benchmark_tolerance("energy_conservation", 1e-6)
        if initial_energy == 0:
            self._degenerate(name, "initial energy is zero; relative drift is undefined")
        relative_change = abs(current_energy - initial_energy) / abs(initial_energy)
        self._require_finite(name, relative_change)

        return self._record(
            name=name,
            kind=CheckKind.PHYSICS,
            error=relative_change,
            tolerance=tolerance,
            details={
                "initial": float(initial_energy),
                "current": float(current_energy),
                "change": relative_change,
            },
        )

    def verify_angular_momentum(
        self,
        initial: Any,
        current: Any,
        tolerance: float | None = None,
    ) -> TestResult:
        """Relative drift of the angular momentum vector, ‖ΔL‖ / ‖L₀‖.

        Raises:
            DegenerateInputError: initial angular momentum is zero.
        """
        name = "Angular Momentum Conservation"
        if tolerance is None:
            tolerance = self._catalog.benchmark_tolerance("angular_momentum", 1e-8)
        l0 = as_vector(initial)
        l1 = as_vector(current)
        initial_magnitude = float(np.linalg.norm(l0))
        if initial_magnitude == 0:
            self._degenerate(name, "initial angular momentum is zero; relative drift is undefined")
        relative_change = float(np.linalg.norm(l1 - l0)) / initial_magnitude
        self._require_finite(name, relative_change)

        return self._record(
            name=name,
            kind=CheckKind.PHYSICS,
            error=relative_change,
            tolerance=tolerance,
            details={
                "initial": as_tuple(l0),
                "current": as_tuple(l1),
                "change": relative_change,
            },
        )

    def verify_keplers_third_law(
        self,
        bodies: Iterable[Any],
        tolerance: float | None = None,
    ) -> TestResult:
        """
        Check T²/a³ = 4π²/GM_sun for every body; error is the worst body.

        All bodies must orbit the Sun; mixing reference frames is the
        caller's responsibility. Per-body relative errors are kept in
        details["bodies"].

        Args:
            bodies: KeplerBody instances, or mappings with "period" (s)
                and "semi_major_axis" (km), used as given.
            tolerance: Relative tolerance (default: keplers_third_law benchmark).

        Raises:
            DegenerateInputError: no bodies, or a non-positive period or axis.
        """
        name = "Kepler's 3rd Law"
        if tolerance is None:
            tolerance = self._catalog.benchmark_tolerance("keplers_third_law", 1e-3)

        parsed = [_kepler_body(b) for b in bodies]
        if not parsed:
            self._degenerate(name, "no bodies supplied")

        gm_sun = self._catalog.constant("GM_SUN")
        if not gm_sun:
            self._degenerate(name, "catalog has no GM_SUN constant")
        theoretical = 4.0 * math.pi**2 / gm_sun

        per_body = []
        for i, body in enumerate(parsed):
            if body.period <= 0 or body.semi_major_axis <= 0:
                self._degenerate(
                    name,
                    f"body {body.name or i} has non-positive period or semi-major axis",
                )
            ratio = body.period**2 / body.semi_major_axis**3
            per_body.append({
                "name": body.name or str(i),
                "ratio": ratio,
                "relative_error": abs(ratio - theoretical) / theoretical,
            })

        max_error = max(entry["relative_error"] for entry in per_body)
        self._require_finite(name, max_error)

        return self._record(
            name=name,
            kind=CheckKind.PHYSICS,
            error=max_error,
            tolerance=tolerance,
            details={
                "theoretical": theoretical,
                "bodies": tuple(per_body),
            },
        )

    # ── Geodesy checks ──────────────────────────────────────────────

    def verify_wgs84_transform(
        self,
        landmark_id: str,
        simulated_ecef: Any,
        tolerance: float = WGS84_TOLERANCE_KM,
    ) -> TestResult | None:
        """Compare a simulated landmark ECEF position (km) with WGS84.

        Returns None, without recording a result, for unknown landmarks.
        """
        landmark = self._catalog.landmark(landmark_id)
        if landmark is None:
            self.record_warning(
                WarningKind.UNKNOWN_LANDMARK,
                f"WGS84: {landmark_id}",
                f"Unknown landmark: {landmark_id}",
            )
            return None

        expected = np.array(to_ecef(
            landmark.latitude_deg, landmark.longitude_deg, landmark.elevation_m,
        ))
        sim = as_vector(simulated_ecef)
        error = float(np.linalg.norm(sim - expected))

        return self._record(
            name=f"WGS84: {landmark.name}",
            kind=CheckKind.GEODESY,
            error=error,
            tolerance=tolerance,
            details={
                "landmark": {
                    "id": landmark.landmark_id,
                    "name": landmark.name,
                    "lat": landmark.latitude_deg,
                    "lon": landmark.longitude_deg,
                    "elevation_m": landmark.elevation_m,
                },
                "simulated": as_tuple(sim),
                "expected": as_tuple(expected),
                "error_km": error,
            },
        )

    # ── Recording & reporting ───────────────────────────────────────

    def record_test(self, result: TestResult) -> None:
        """Append a result and emit its status line."""
        self._results.append(result)
        marker = PASS_MARKER if result.passed else FAIL_MARKER
        _log.info(
            "%s %s: Error = %.2e, Tolerance = %.2e",
            marker, result.name, result.error, result.tolerance,
        )

    def record_warning(self, kind: WarningKind, check: str, message: str) -> OperationalWarning:
        """Append an operational warning; it never changes pass/fail counts."""
        warning = OperationalWarning(
            kind=kind, check=check, message=message, timestamp=self._clock(),
        )
        self._warnings.append(warning)
        _log.warning("%s [%s]: %s", check, kind.value, message)
        return warning

    def generate_report(self) -> Report:
        """Snapshot of the accumulated state."""
        report = build_report(self._results, self._warnings, self._clock())
        s = report.summary
        _log.info(
            "Verification report: total=%d passed=%d failed=%d warnings=%d pass_rate=%s",
            s.total, s.passed, s.failed, s.warnings, s.pass_rate,
        )
        return report

    def export_report(self) -> str:
        """Canonical JSON text of a fresh report."""
        return report_to_json(self.generate_report())

    def reset(self) -> None:
        self._results.clear()
        self._warnings.clear()

    def merge(self, other: "VerificationEngine") -> None:
        """Append another engine's results and warnings, in their order."""
        self._results.extend(other._results)
        self._warnings.extend(other._warnings)

    # ── Internals ───────────────────────────────────────────────────

    def _record(
        self,
        name: str,
        kind: CheckKind,
        error: float,
        tolerance: float,
        details: dict[str, Any],
    ) -> TestResult:
        result = TestResult(
            name=name,
            kind=kind,
            passed=error < tolerance,
            error=error,
            tolerance=tolerance,
            timestamp=self._clock(),
            details=details,
        )
        self.record_test(result)
        return result

    def _degenerate(self, check: str, message: str) -> None:
        self.record_warning(WarningKind.DEGENERATE_INPUT, check, message)
        raise DegenerateInputError(f"{check}: {message}")

    def _require_finite(self, check: str, error: float) -> None:
        if not math.isfinite(error):
            self._degenerate(check, f"computed error is not finite ({error})")
