# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
JPL Horizons adapter: fetches reference state vectors for solar system bodies.

External dependencies (urllib, json) are confined to this layer.

Data source:
    Horizons API — https://ssd.jpl.nasa.gov/api/horizons.api
    EPHEM_TYPE=VECTORS, VEC_TABLE=2 (position + velocity), OUT_UNITS=KM-S,
    CSV_FORMAT=YES. Rows sit between the $$SOE and $$EOE markers:
        JDTDB, Calendar Date (TDB), X, Y, Z, VX, VY, VZ,

Failure handling:
    Every failure (HTTP error, unreachable host, timeout, interrupted read,
    undecodable, malformed or empty response) raises ReferenceUnavailable.
    Transient failures (5xx, network and read errors) are retried a
    bounded number of times with exponential backoff; the number of
    attempts is carried on each StateRecord so a success after retry can
    be reported as a warning.
"""
import http.client
import json
import logging
import time
import urllib.error
import urllib.request
from datetime import datetime, timedelta, timezone
from typing import Any, Callable
from urllib.parse import urlencode

from simverify.domain.constants import AstroConstants
from simverify.domain.ephemeris import Provenance, StateRecord, as_utc
from simverify.domain.results import ReferenceUnavailable
from simverify.ports.reference_data import ReferenceDataSource


_log = logging.getLogger(__name__)

BASE_URL = "https://ssd.jpl.nasa.gov/api/horizons.api"
SOURCE_TAG = "JPL_HORIZONS"

# Horizons major-body identifiers
BODY_IDS = {
    "sun": "10",
    "mercury": "199",
    "venus": "299",
    "earth": "399",
    "moon": "301",
    "mars": "499",
    "jupiter": "599",
    "saturn": "699",
    "uranus": "799",
    "neptune": "899",
}

_J2000_UTC = datetime(2000, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def datetime_to_jd(dt: datetime) -> float:
    """Julian Date of a UTC datetime."""
    delta = as_utc(dt) - _J2000_UTC
    return AstroConstants.J2000 + delta.total_seconds() / 86400.0


def jd_to_datetime(jd: float) -> datetime:
    """UTC datetime of a Julian Date (TDB-UTC offset ignored)."""
    return _J2000_UTC + timedelta(days=jd - AstroConstants.J2000)


def _horizons_time(dt: datetime) -> str:
    return as_utc(dt).strftime("'%Y-%m-%d %H:%M:%S'")


def parse_vector_table(result_text: str) -> list[tuple[float, tuple, tuple]]:
    """
    Parse the CSV vector table out of a Horizons result text.

    Returns:
        List of (jd, position_km, velocity_km_s).

    Raises:
        ValueError: markers are missing or a row is malformed.
    """
    try:
        start = result_text.index("$$SOE") + len("$$SOE")
        end = result_text.index("$$EOE", start)
    except ValueError:
        raise ValueError("Horizons result has no $$SOE/$$EOE vector table") from None

    rows = []
    for line in result_text[start:end].splitlines():
        line = line.strip()
        if not line:
            continue
        fields = [f.strip() for f in line.split(",")]
        if len(fields) < 8:
            raise ValueError(f"malformed Horizons vector row: {line!r}")
        values = [float(f) for f in fields[2:8]]
        rows.append((
            float(fields[0]),
            (values[0], values[1], values[2]),
            (values[3], values[4], values[5]),
        ))
    return rows


class HorizonsReferenceSource(ReferenceDataSource):
    """
    Reference ephemerides from JPL Horizons.

    Args:
        base_url: Horizons API endpoint.
        center: Horizons CENTER code (default "500@10", the Sun's center).
        timeout: Per-request timeout in seconds.
        max_attempts: Total attempts per request, including the first.
        backoff_s: Delay before the first retry; doubles per retry.
        sleep: Sleep function (injectable for tests).
    """

    def __init__(
        self,
        base_url: str = BASE_URL,
        center: str = "500@10",
        timeout: float = 30,
        max_attempts: int = 3,
        backoff_s: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")
        self._base_url = base_url
        self._center = center
        self._timeout = timeout
        self._max_attempts = max_attempts
        self._backoff_s = backoff_s
        self._sleep = sleep

    def fetch_position(self, body_id: str, instant: datetime) -> StateRecord:
        params = self._vector_params(body_id)
        params["TLIST"] = f"'{datetime_to_jd(instant):.9f}'"
        params["TLIST_TYPE"] = "'JD'"
        records = self._fetch_records(body_id, params)
        return records[0]

    def fetch_ephemeris(
        self,
        body_id: str,
        start: datetime,
        end: datetime,
        step: str = "1d",
    ) -> list[StateRecord]:
        if as_utc(end) < as_utc(start):
            raise ValueError(f"end {end} is before start {start}")
        params = self._vector_params(body_id)
        params["START_TIME"] = _horizons_time(start)
        params["STOP_TIME"] = _horizons_time(end)
        params["STEP_SIZE"] = f"'{step}'"
        return self._fetch_records(body_id, params)

    def _vector_params(self, body_id: str) -> dict[str, str]:
        command = BODY_IDS.get(body_id.lower(), body_id)
        return {
            "format": "json",
            "COMMAND": f"'{command}'",
            "OBJ_DATA": "'NO'",
            "MAKE_EPHEM": "'YES'",
            "EPHEM_TYPE": "'VECTORS'",
            "CENTER": f"'{self._center}'",
            "REF_PLANE": "'ECLIPTIC'",
            "VEC_TABLE": "'2'",
            "OUT_UNITS": "'KM-S'",
            "CSV_FORMAT": "'YES'",
            "TIME_TYPE": "'UT'",
        }

    def _fetch_records(self, body_id: str, params: dict[str, str]) -> list[StateRecord]:
        url = f"{self._base_url}?{urlencode(params)}"
        payload, attempts = self._fetch_json(url)

        if "error" in payload:
            raise ReferenceUnavailable(f"Horizons error for {body_id}: {payload['error']}")
        result_text = payload.get("result")
        if not isinstance(result_text, str):
            raise ReferenceUnavailable(f"Horizons response for {body_id} has no result text")
        try:
            rows = parse_vector_table(result_text)
        except ValueError as e:
            raise ReferenceUnavailable(f"Horizons response for {body_id} is malformed: {e}") from e
        if not rows:
            raise ReferenceUnavailable(f"Horizons returned no vectors for {body_id}")

        return [
            StateRecord(
                body_id=body_id,
                instant=jd_to_datetime(jd),
                position=position,
                velocity=velocity,
                provenance=Provenance.REFERENCE,
                source=SOURCE_TAG,
                attempts=attempts,
            )
            for jd, position, velocity in rows
        ]

    def _fetch_json(self, url: str) -> tuple[dict[str, Any], int]:
        """Fetch and decode a JSON payload, retrying transient failures."""
        req = urllib.request.Request(url, headers={"User-Agent": "simverify/0.1"})
        last_error: Exception | None = None

        for attempt in range(1, self._max_attempts + 1):
            try:
                with urllib.request.urlopen(req, timeout=self._timeout) as response:
                    body = response.read()
            except urllib.error.HTTPError as e:
                if e.code < 500:
                    raise ReferenceUnavailable(f"Horizons API error {e.code}: {e.reason}") from e
                last_error = e
            except (urllib.error.URLError, http.client.HTTPException, OSError) as e:
                # Unreachable host, timeout, reset or truncated read
                last_error = e
            else:
                try:
                    payload = json.loads(body.decode("utf-8"))
                except (UnicodeDecodeError, json.JSONDecodeError) as e:
                    raise ReferenceUnavailable(f"Horizons returned invalid JSON: {e}") from e
                if not isinstance(payload, dict):
                    raise ReferenceUnavailable("Horizons returned an unexpected JSON document")
                return payload, attempt

            if attempt < self._max_attempts:
                delay = self._backoff_s * 2 ** (attempt - 1)
                _log.warning(
                    "Horizons request failed (attempt %d/%d): %s; retrying in %.1fs",
                    attempt, self._max_attempts, last_error, delay,
                )
                self._sleep(delay)

        raise ReferenceUnavailable(
            f"Horizons unreachable after {self._max_attempts} attempts: {last_error}"
        ) from last_error
