# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Ephemeris state records and vector helpers.

A StateRecord always carries a provenance tag. Placeholder data is never
indistinguishable from a genuine zero-valued observation.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping

import numpy as np


class Provenance(Enum):
    """Where a state record came from."""
    REFERENCE = "reference"
    PLACEHOLDER = "placeholder"


@dataclass(frozen=True)
class StateRecord:
    """Position (km) and velocity (km/s) of a body at an instant."""
    body_id: str
    instant: datetime
    position: tuple[float, float, float]
    velocity: tuple[float, float, float]
    provenance: Provenance
    source: str
    attempts: int = 1

    @property
    def is_reference(self) -> bool:
        return self.provenance is Provenance.REFERENCE


def as_utc(dt: datetime) -> datetime:
    """Ensure datetime is timezone-aware (treat naive as UTC)."""
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


def as_vector(value: Any) -> np.ndarray:
    """
    Coerce a 3-vector to a float numpy array.

    Accepts sequences, numpy arrays, and {x, y, z} mappings (the shape the
    simulation returns positions in).
    """
    if isinstance(value, Mapping):
        try:
            value = (value["x"], value["y"], value["z"])
        except KeyError as e:
            raise ValueError(f"vector mapping is missing component {e}") from e
    vec = np.asarray(value, dtype=float)
    if vec.shape != (3,):
        raise ValueError(f"expected a 3-vector, got shape {vec.shape}")
    return vec


def as_tuple(vec: np.ndarray) -> tuple[float, float, float]:
    """Plain-float tuple of a 3-vector, for immutable result details."""
    return float(vec[0]), float(vec[1]), float(vec[2])
