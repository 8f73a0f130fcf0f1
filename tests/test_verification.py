# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tests for the verification engine checks, recording and reset."""
import logging
import math
from datetime import datetime, timedelta, timezone

import numpy as np
import pytest

from simverify.domain.catalogs import DEFAULT_CATALOG
from simverify.domain.constants import AstroConstants
from simverify.domain.geodesy import to_ecef
from simverify.domain.results import (
    CheckKind,
    DegenerateInputError,
    TestResult,
    WarningKind,
)
from simverify.domain.verification import KeplerBody, VerificationEngine


_NOW = datetime(2026, 3, 20, 12, 0, 0, tzinfo=timezone.utc)
_LOGGER = "simverify.domain.verification"


@pytest.fixture
def engine():
    return VerificationEngine(clock=lambda: _NOW)


def _kepler_period_s(a_km: float) -> float:
    return 2.0 * math.pi * math.sqrt(a_km**3 / AstroConstants.GM_SUN)


# ── Position ────────────────────────────────────────────────────────

class TestVerifyPosition:

    def test_earth_within_planet_tolerance(self, engine):
        result = engine.verify_position("earth", (0, 0, 0), (500, 0, 0), _NOW)
        assert result.error == 500.0
        assert result.tolerance == 1000.0
        assert result.passed is True
        assert result.kind is CheckKind.POSITION

    def test_moon_uses_tight_tolerance(self, engine):
        engine.verify_position("earth", (0, 0, 0), (500, 0, 0), _NOW)
        result = engine.verify_position("moon", (0, 0, 0), (500, 0, 0), _NOW)
        assert result.tolerance == 10.0
        assert result.passed is False
        assert engine.passed == 1
        assert engine.failed == 1

    def test_error_is_euclidean_distance(self, engine):
        sim = (1.0, 2.0, 3.0)
        ref = (4.0, 6.0, 15.0)
        result = engine.verify_position("mars", sim, ref, _NOW)
        assert abs(result.error - 13.0) < 1e-12

    def test_error_equal_to_tolerance_fails(self, engine):
        result = engine.verify_position("moon", (0, 0, 0), (0, 10, 0), _NOW)
        assert result.error == 10.0
        assert result.passed is False

    def test_accepts_xyz_mappings(self, engine):
        result = engine.verify_position(
            "earth", {"x": 0, "y": 0, "z": 0}, {"x": 0, "y": 3, "z": 4}, _NOW,
        )
        assert abs(result.error - 5.0) < 1e-12

    def test_details_hold_inputs(self, engine):
        result = engine.verify_position("earth", (1, 0, 0), (0, 0, 0), _NOW)
        assert result.details["simulated"] == (1.0, 0.0, 0.0)
        assert result.details["reference"] == (0.0, 0.0, 0.0)
        assert result.details["instant"] == _NOW

    def test_rejects_wrong_shape(self, engine):
        with pytest.raises(ValueError):
            engine.verify_position("earth", (1, 2), (0, 0, 0), _NOW)


# ── Celestial events ────────────────────────────────────────────────

class TestVerifyCelestialEvent:

    def test_exact_instant_passes(self, engine):
        event = DEFAULT_CATALOG.event("solar_eclipse_2024")
        result = engine.verify_celestial_event("solar_eclipse_2024", event.instant)
        assert result.error == 0.0
        assert result.passed is True
        assert result.kind is CheckKind.EVENT
        assert result.name == "Event: total_solar_eclipse"

    def test_error_in_seconds(self, engine):
        event = DEFAULT_CATALOG.event("solar_eclipse_2024")
        result = engine.verify_celestial_event(
            "solar_eclipse_2024", event.instant - timedelta(seconds=90),
        )
        assert result.error == 90.0
        assert result.tolerance == 60.0
        assert result.passed is False

    def test_naive_instant_treated_as_utc(self, engine):
        result = engine.verify_celestial_event(
            "spring_equinox_2025", datetime(2025, 3, 20, 9, 31),
        )
        assert result.error == 1800.0
        assert result.passed is True

    def test_unknown_event_records_nothing(self, engine, caplog):
        engine.verify_position("earth", (0, 0, 0), (1, 0, 0), _NOW)
        with caplog.at_level(logging.WARNING, logger=_LOGGER):
            result = engine.verify_celestial_event("no_such_event", _NOW)
        assert result is None
        assert engine.passed == 1
        assert engine.failed == 0
        assert len(engine.results) == 1
        assert engine.warnings[0].kind is WarningKind.UNKNOWN_EVENT
        assert any("no_such_event" in r.getMessage() for r in caplog.records)


# ── Orbital period ──────────────────────────────────────────────────

class TestVerifyOrbitalPeriod:

    def test_relative_error(self, engine):
        result = engine.verify_orbital_period("earth", 368.0, 365.0)
        assert abs(result.error - 3.0 / 365.0) < 1e-15
        assert result.tolerance == 0.01
        assert result.passed is True

    def test_outside_tolerance(self, engine):
        result = engine.verify_orbital_period("moon", 30.0, 27.321661)
        assert result.passed is False
        assert result.kind is CheckKind.ORBITAL_PERIOD

    def test_custom_tolerance(self, engine):
        result = engine.verify_orbital_period("earth", 365.3, 365.256363004, tolerance=1e-6)
        assert result.tolerance == 1e-6
        assert result.passed is False

    def test_zero_reference_raises(self, engine):
        with pytest.raises(DegenerateInputError):
            engine.verify_orbital_period("earth", 365.0, 0.0)
        assert engine.is_empty
        assert engine.warning_count == 1
        assert engine.warnings[0].kind is WarningKind.DEGENERATE_INPUT

    def test_degenerate_is_arithmetic_error(self, engine):
        with pytest.raises(ArithmeticError):
            engine.verify_orbital_period("earth", 365.0, 0.0)


# ── Conservation laws ───────────────────────────────────────────────

class TestVerifyEnergyConservation:

    @pytest.mark.parametrize("energy", [-1.5e33, -2.0, 7.25e-3, 4.0e12])
    def test_unchanged_energy_exact_zero(self, engine, energy):
        result = engine.verify_energy_conservation(energy, energy)
        assert result.error == 0.0
        assert result.passed is True

    def test_default_tolerance_from_benchmark(self, engine):
        result = engine.verify_energy_conservation(-1.0, -1.0)
        assert result.tolerance == 1e-6

    def test_drift_detected(self, engine):
        result = engine.verify_energy_conservation(-1.0e10, -1.0e10 * (1 + 2e-6))
        assert abs(result.error - 2e-6) < 1e-12
        assert result.passed is False
        assert result.kind is CheckKind.PHYSICS

    def test_zero_initial_energy_is_distinct_failure(self, engine):
        with pytest.raises(DegenerateInputError):
            engine.verify_energy_conservation(0.0, 1.0)
        assert engine.passed == 0
        assert engine.failed == 0
        assert engine.warning_count == 1

    def test_non_finite_current_energy(self, engine):
        with pytest.raises(DegenerateInputError):
            engine.verify_energy_conservation(-1.0, float("nan"))
        assert engine.is_empty


class TestVerifyAngularMomentum:

    def test_unchanged_vector_exact_zero(self, engine):
        result = engine.verify_angular_momentum([1, 0, 0], [1, 0, 0])
        assert result.error == 0.0
        assert result.passed is True
        assert result.tolerance == 1e-8

    def test_relative_change(self, engine):
        result = engine.verify_angular_momentum(
            np.array([0.0, 0.0, 2.0]), np.array([0.0, 2e-6, 2.0]),
        )
        assert abs(result.error - 1e-6) < 1e-15
        assert result.passed is False

    def test_zero_initial_vector(self, engine):
        with pytest.raises(DegenerateInputError):
            engine.verify_angular_momentum([0, 0, 0], [1, 0, 0])
        assert engine.is_empty


# ── Kepler's third law ──────────────────────────────────────────────

class TestVerifyKeplersThirdLaw:

    def test_exact_bodies_pass(self, engine):
        bodies = [
            KeplerBody(_kepler_period_s(a), a, name)
            for name, a in (
                ("earth", AstroConstants.AU),
                ("mars", 1.523679 * AstroConstants.AU),
                ("jupiter", 5.2044 * AstroConstants.AU),
            )
        ]
        result = engine.verify_keplers_third_law(bodies)
        assert result.error < 1e-12
        assert result.passed is True
        assert result.tolerance == 1e-3

    def test_period_used_as_given(self, engine):
        a = AstroConstants.AU
        period = math.sqrt(4.0 * math.pi**2 / AstroConstants.GM_SUN * a**3)
        result = engine.verify_keplers_third_law([{"period": period, "semi_major_axis": a}])
        assert result.error < 1e-12
        assert result.passed is True
        ratio = result.details["bodies"][0]["ratio"]
        assert abs(ratio - result.details["theoretical"]) / ratio < 1e-12

    def test_from_days_converts_to_seconds(self, engine):
        a = 1.523679 * AstroConstants.AU
        body = KeplerBody.from_days(_kepler_period_s(a) / AstroConstants.SECONDS_PER_DAY, a, "mars")
        assert abs(body.period - _kepler_period_s(a)) < 1e-6
        assert engine.verify_keplers_third_law([body]).passed is True

    def test_error_is_worst_body(self, engine):
        a = AstroConstants.AU
        good = {"period": _kepler_period_s(a), "semi_major_axis": a, "name": "good"}
        bad = {"period": _kepler_period_s(a) * 1.01, "semi_major_axis": a, "name": "bad"}
        result = engine.verify_keplers_third_law([good, bad])
        # (1.01)² - 1
        assert abs(result.error - 0.0201) < 1e-9
        assert result.passed is False
        per_body = {b["name"]: b["relative_error"] for b in result.details["bodies"]}
        assert per_body["good"] < 1e-12
        assert abs(per_body["bad"] - 0.0201) < 1e-9

    def test_empty_body_list_never_passes(self, engine):
        with pytest.raises(DegenerateInputError):
            engine.verify_keplers_third_law([])
        assert engine.is_empty

    def test_non_positive_axis(self, engine):
        with pytest.raises(DegenerateInputError):
            engine.verify_keplers_third_law([KeplerBody(365.0, 0.0)])


# ── Geodesy ─────────────────────────────────────────────────────────

class TestVerifyWGS84Transform:

    def test_exact_landmark_passes(self, engine):
        expected = to_ecef(51.4769, -0.0005, 46.0)
        result = engine.verify_wgs84_transform("greenwich", expected)
        assert result.error == 0.0
        assert result.passed is True
        assert result.tolerance == 0.01
        assert result.name == "WGS84: Greenwich Observatory"

    def test_offset_of_twenty_meters_fails(self, engine):
        x, y, z = to_ecef(90.0, 0.0, 0.0)
        result = engine.verify_wgs84_transform("north_pole", (x, y, z + 0.02))
        assert abs(result.error - 0.02) < 1e-9
        assert result.passed is False
        assert result.kind is CheckKind.GEODESY

    def test_unknown_landmark_records_nothing(self, engine):
        assert engine.verify_wgs84_transform("atlantis", (0, 0, 0)) is None
        assert engine.is_empty
        assert engine.warnings[0].kind is WarningKind.UNKNOWN_LANDMARK


# ── Recording, counters, reset ──────────────────────────────────────

class TestRecording:

    def test_status_line_format(self, engine, caplog):
        with caplog.at_level(logging.INFO, logger=_LOGGER):
            engine.verify_orbital_period("earth", 366.0, 365.0)
        messages = [r.getMessage() for r in caplog.records]
        assert "✅ Orbital Period: earth: Error = 2.74e-03, Tolerance = 1.00e-02" in messages

    def test_fail_marker(self, engine, caplog):
        with caplog.at_level(logging.INFO, logger=_LOGGER):
            engine.verify_position("moon", (0, 0, 0), (500, 0, 0), _NOW)
        assert any(r.getMessage().startswith("❌ Position: moon") for r in caplog.records)

    def test_record_test_appends_in_order(self, engine):
        first = TestResult("a", CheckKind.PHYSICS, True, 0.0, 1.0, _NOW)
        second = TestResult("b", CheckKind.PHYSICS, False, 2.0, 1.0, _NOW)
        engine.record_test(first)
        engine.record_test(second)
        assert engine.results == (first, second)
        assert engine.passed + engine.failed == 2

    def test_counts_match_recorded_results(self, engine):
        engine.verify_position("earth", (0, 0, 0), (1, 0, 0), _NOW)
        engine.verify_celestial_event("nope", _NOW)
        engine.verify_wgs84_transform("nope", (0, 0, 0))
        with pytest.raises(DegenerateInputError):
            engine.verify_energy_conservation(0.0, 0.0)
        engine.verify_energy_conservation(-1.0, -2.0)
        assert engine.passed + engine.failed == 2
        assert engine.warning_count == 3

    def test_result_is_immutable(self, engine):
        result = engine.verify_position("earth", (0, 0, 0), (1, 0, 0), _NOW)
        with pytest.raises((AttributeError, TypeError)):
            result.passed = False
        with pytest.raises(TypeError):
            result.details["simulated"] = (9, 9, 9)

    def test_negative_error_rejected(self):
        with pytest.raises(ValueError):
            TestResult("x", CheckKind.PHYSICS, True, -1.0, 1.0, _NOW)


class TestReset:

    def test_reset_clears_everything(self, engine):
        engine.verify_position("earth", (0, 0, 0), (1, 0, 0), _NOW)
        engine.verify_position("moon", (0, 0, 0), (100, 0, 0), _NOW)
        engine.verify_celestial_event("nope", _NOW)
        engine.reset()
        assert engine.is_empty
        assert engine.passed == 0
        assert engine.failed == 0
        assert engine.warning_count == 0
        assert engine.results == ()

    def test_reset_on_empty_engine(self, engine):
        engine.reset()
        engine.reset()
        assert engine.is_empty

    def test_reusable_after_reset(self, engine):
        engine.verify_position("earth", (0, 0, 0), (1, 0, 0), _NOW)
        engine.reset()
        engine.verify_position("moon", (0, 0, 0), (100, 0, 0), _NOW)
        assert engine.passed == 0
        assert engine.failed == 1


class TestMerge:

    def test_merge_appends_in_order(self):
        a = VerificationEngine(clock=lambda: _NOW)
        b = VerificationEngine(clock=lambda: _NOW)
        a.verify_position("earth", (0, 0, 0), (1, 0, 0), _NOW)
        b.verify_position("moon", (0, 0, 0), (100, 0, 0), _NOW)
        b.verify_celestial_event("nope", _NOW)
        a.merge(b)
        assert [r.details["body"] for r in a.results] == ["earth", "moon"]
        assert a.passed == 1
        assert a.failed == 1
        assert a.warning_count == 1
        assert len(b.results) == 1
