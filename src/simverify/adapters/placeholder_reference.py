# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Stand-in reference source for runs without network access.

Returns deterministic zero vectors tagged Provenance.PLACEHOLDER. Consumers
check StateRecord.is_reference and must not verify against these records.
"""
import logging
from datetime import datetime, timedelta

from simverify.domain.ephemeris import Provenance, StateRecord, as_utc
from simverify.ports.reference_data import ReferenceDataSource


_log = logging.getLogger(__name__)

SOURCE_TAG = "JPL_HORIZONS_PLACEHOLDER"

_STEP_UNITS = {
    "d": timedelta(days=1),
    "h": timedelta(hours=1),
    "m": timedelta(minutes=1),
}


def parse_step(step: str) -> timedelta:
    """Parse a Horizons-style step size such as "1d", "6h" or "30m"."""
    step = step.strip().lower()
    if len(step) < 2 or step[-1] not in _STEP_UNITS:
        raise ValueError(f"step must look like '1d', '6h' or '30m', got {step!r}")
    count = int(step[:-1])
    if count <= 0:
        raise ValueError(f"step must be positive, got {step!r}")
    return count * _STEP_UNITS[step[-1]]


class PlaceholderReferenceSource(ReferenceDataSource):
    """Deterministic placeholder ephemeris, always tagged as such."""

    def fetch_position(self, body_id: str, instant: datetime) -> StateRecord:
        _log.info("[PLACEHOLDER] reference state for %s at %s", body_id, instant)
        return self._record(body_id, as_utc(instant))

    def fetch_ephemeris(
        self,
        body_id: str,
        start: datetime,
        end: datetime,
        step: str = "1d",
    ) -> list[StateRecord]:
        start, end = as_utc(start), as_utc(end)
        if end < start:
            raise ValueError(f"end {end} is before start {start}")
        delta = parse_step(step)
        _log.info("[PLACEHOLDER] ephemeris for %s from %s to %s", body_id, start, end)

        records = []
        instant = start
        while instant <= end:
            records.append(self._record(body_id, instant))
            instant += delta
        return records

    @staticmethod
    def _record(body_id: str, instant: datetime) -> StateRecord:
        return StateRecord(
            body_id=body_id,
            instant=instant,
            position=(0.0, 0.0, 0.0),
            velocity=(0.0, 0.0, 0.0),
            provenance=Provenance.PLACEHOLDER,
            source=SOURCE_TAG,
        )
