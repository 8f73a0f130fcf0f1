# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Automated verification suite: runs every check against a live simulation.

Sequence:
    1. Physics: energy and angular momentum conservation across one
       step(), Kepler's third law over all heliocentric bodies.
    2. Astronomy: simulated vs reference positions of tracked bodies.
    3. Orbital periods: measured vs catalogued periods.
    4. Geodesy: simulated landmark ECEF positions vs WGS84.
    5. Event predictions: only when the simulation can predict events.

Steps 1-4 are independent. With SuiteConfig.parallel they run on a thread
pool, each on its own engine, and are merged back in step order. The
measure/step/measure pairs of step 1 always run inside one worker.

Any error raised inside one check becomes a warning; the run continues.
"""
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

from simverify.adapters.placeholder_reference import PlaceholderReferenceSource
from simverify.domain.catalogs import DEFAULT_CATALOG, ReferenceCatalog
from simverify.domain.reports import Report
from simverify.domain.results import (
    DegenerateInputError,
    ReferenceUnavailable,
    WarningKind,
)
from simverify.domain.verification import VerificationEngine
from simverify.ports.reference_data import ReferenceDataSource
from simverify.ports.simulation import Simulation


_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SuiteConfig:
    """Configuration of a verification run.

    tracked_bodies: bodies whose positions are checked against references.
    conservation_step_days: simulation advance between conservation samples.
    period_bodies: (body, catalog constant holding its period in days).
    landmark_ids: catalog landmarks to check.
    event_ids: catalog events to check via simulation.predict_event().
    parallel: run steps 1-4 concurrently.
    max_workers: thread pool size when parallel.
    """
    tracked_bodies: tuple[str, ...] = ("earth", "moon")
    conservation_step_days: float = 365.25
    period_bodies: tuple[tuple[str, str], ...] = (
        ("earth", "EARTH_ORBIT_PERIOD"),
        ("moon", "MOON_ORBIT_PERIOD"),
    )
    landmark_ids: tuple[str, ...] = (
        "greenwich", "north_pole", "equator_null_island", "mount_everest",
    )
    event_ids: tuple[str, ...] = ()
    parallel: bool = False
    max_workers: int | None = None

    def __post_init__(self):
        if self.conservation_step_days <= 0:
            raise ValueError(
                f"conservation_step_days must be positive, got {self.conservation_step_days}"
            )


class VerificationSuite:
    """
    Sequences a full verification run against a simulation.

    Args:
        simulation: The simulation under test.
        reference_source: Reference ephemeris port (default: placeholder
            source, whose records are never checked against).
        engine: Engine to accumulate into (default: new engine on catalog).
        catalog: Reference catalog for periods, landmarks and events.
        config: Run configuration.
        clock: Returns the current UTC time for reference queries.
    """

    def __init__(
        self,
        simulation: Simulation,
        reference_source: ReferenceDataSource | None = None,
        engine: VerificationEngine | None = None,
        catalog: ReferenceCatalog = DEFAULT_CATALOG,
        config: SuiteConfig = SuiteConfig(),
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self._simulation = simulation
        self._reference = reference_source or PlaceholderReferenceSource()
        self._catalog = catalog
        self._config = config
        self._clock = clock
        self.engine = engine or VerificationEngine(catalog=catalog, clock=clock)

    def run_all(self) -> Report:
        """Run every step and return the final report."""
        _log.info("Running automated verification tests")
        steps = [
            self.check_conservation_laws,
            self.check_positions,
            self.check_orbital_periods,
            self.check_landmarks,
        ]

        if self._config.parallel:
            self._run_parallel(steps)
        else:
            for step in steps:
                with _isolated(self.engine, step.__name__):
                    step(self.engine)

        self.check_event_predictions(self.engine)
        return self.engine.generate_report()

    def _run_parallel(self, steps: list[Callable[[VerificationEngine], None]]) -> None:
        """Run steps on separate engines and merge them in step order."""
        max_workers = self._config.max_workers or min(32, (os.cpu_count() or 1) + 4)
        engines = [
            VerificationEngine(catalog=self._catalog, clock=self._clock) for _ in steps
        ]
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [
                executor.submit(step, engine) for step, engine in zip(steps, engines)
            ]
            for step, engine, future in zip(steps, engines, futures):
                with _isolated(engine, step.__name__):
                    future.result()
        for engine in engines:
            self.engine.merge(engine)

    # ── Steps ───────────────────────────────────────────────────────

    def check_conservation_laws(self, engine: VerificationEngine) -> None:
        sim = self._simulation
        days = self._config.conservation_step_days

        _log.info("Testing energy conservation")
        with _isolated(engine, "Energy Conservation"):
            initial = sim.calculate_total_energy()
            sim.step(days)
            engine.verify_energy_conservation(initial, sim.calculate_total_energy())

        _log.info("Testing angular momentum conservation")
        with _isolated(engine, "Angular Momentum Conservation"):
            initial = sim.calculate_angular_momentum()
            sim.step(days)
            engine.verify_angular_momentum(initial, sim.calculate_angular_momentum())

        _log.info("Testing Kepler's 3rd Law")
        with _isolated(engine, "Kepler's 3rd Law"):
            engine.verify_keplers_third_law(sim.get_bodies())

    def check_positions(self, engine: VerificationEngine) -> None:
        """Compare tracked body positions with reference data at the clock time.

        The reference is queried at the wall-clock instant, while the
        simulated position is whatever the simulation currently reports,
        including any step() the physics step has already applied. The
        Simulation port exposes no simulation time to align the two.
        """
        for body in self._config.tracked_bodies:
            _log.info("Testing %s position against reference data", body)
            check = f"Position: {body}"
            with _isolated(engine, check):
                instant = self._clock()
                simulated = self._simulation.get_position(body)
                try:
                    record = self._reference.fetch_position(body, instant)
                except ReferenceUnavailable as e:
                    engine.record_warning(WarningKind.REFERENCE_UNAVAILABLE, check, str(e))
                    continue

                if not record.is_reference:
                    engine.record_warning(
                        WarningKind.PLACEHOLDER_REFERENCE, check,
                        f"reference from {record.source} is a placeholder; check skipped",
                    )
                    continue
                if record.attempts > 1:
                    engine.record_warning(
                        WarningKind.RETRIED_REFERENCE, check,
                        f"reference obtained after {record.attempts} attempts",
                    )
                engine.verify_position(body, simulated, record.position, instant)

    def check_orbital_periods(self, engine: VerificationEngine) -> None:
        _log.info("Testing orbital periods")
        for body, constant_name in self._config.period_bodies:
            check = f"Orbital Period: {body}"
            with _isolated(engine, check):
                reference = self._catalog.constant(constant_name)
                if reference is None:
                    engine.record_warning(
                        WarningKind.CHECK_ABORTED, check,
                        f"catalog has no constant {constant_name}",
                    )
                    continue
                measured = self._simulation.measure_orbital_period(body)
                engine.verify_orbital_period(body, measured, reference)

    def check_landmarks(self, engine: VerificationEngine) -> None:
        _log.info("Testing WGS84 coordinate transformations")
        for landmark_id in self._config.landmark_ids:
            with _isolated(engine, f"WGS84: {landmark_id}"):
                simulated = self._simulation.get_landmark_position(landmark_id)
                engine.verify_wgs84_transform(landmark_id, simulated)

    def check_event_predictions(self, engine: VerificationEngine) -> None:
        if not self._config.event_ids:
            return
        predict = getattr(self._simulation, "predict_event", None)
        if predict is None:
            _log.info("Simulation cannot predict events; event checks skipped")
            return

        _log.info("Testing celestial event predictions")
        for event_id in self._config.event_ids:
            with _isolated(engine, f"Event: {event_id}"):
                engine.verify_celestial_event(event_id, predict(event_id))


@contextmanager
def _isolated(engine: VerificationEngine, check: str):
    """Turn any error raised inside one check into a CHECK_ABORTED warning."""
    try:
        yield
    except DegenerateInputError:
        # The engine already recorded a degenerate-input warning
        pass
    except Exception as e:
        _log.debug("Check %s aborted", check, exc_info=True)
        engine.record_warning(WarningKind.CHECK_ABORTED, check, f"{type(e).__name__}: {e}")
