# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Port interface for the simulation under verification.

The simulation is an external collaborator. Positions are in km; measured
orbital periods and step durations are in days, while get_bodies()
reports periods in seconds. step() mutates simulation state, so callers
must not interleave other mutations between a measure/step/measure pair.
"""
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Simulation(Protocol):
    """Consumed contract of a running simulation."""

    def calculate_total_energy(self) -> float:
        ...

    def calculate_angular_momentum(self) -> Any:
        """Angular momentum vector as a 3-sequence or {x, y, z} mapping."""
        ...

    def step(self, duration_days: float) -> None:
        """Advance the simulation."""
        ...

    def get_bodies(self) -> list[Any]:
        """Heliocentric bodies with "period" (s) and "semi_major_axis" (km)."""
        ...

    def get_position(self, body_id: str) -> Any:
        ...

    def measure_orbital_period(self, body_id: str) -> float:
        ...

    def get_landmark_position(self, landmark_id: str) -> Any:
        """ECEF position of a landmark in km."""
        ...
