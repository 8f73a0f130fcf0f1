# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Port interface for external reference ephemeris sources.

Adapters handle the actual HTTP/API calls. Failures surface as
ReferenceUnavailable; adapters never substitute zero vectors for missing
data.
"""
from datetime import datetime
from typing import Protocol, runtime_checkable

from simverify.domain.ephemeris import StateRecord


@runtime_checkable
class ReferenceDataSource(Protocol):
    """Port for fetching truth positions and velocities of celestial bodies."""

    def fetch_position(self, body_id: str, instant: datetime) -> StateRecord:
        """Fetch the state of a body at one instant."""
        ...

    def fetch_ephemeris(
        self,
        body_id: str,
        start: datetime,
        end: datetime,
        step: str = "1d",
    ) -> list[StateRecord]:
        """Fetch an ordered table of states between start and end."""
        ...
