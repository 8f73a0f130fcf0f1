# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Verification result value objects and operational error types.

A failed comparison is a normal TestResult with passed=False. Conditions
that prevent a comparison from being made at all (unknown catalog entry,
undefined relative error, missing reference data) are operational errors:
they are recorded as OperationalWarning entries and, where the caller must
stop, raised as VerificationError subclasses.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping


class CheckKind(Enum):
    """Truth source a check compares against."""
    POSITION = "position"
    EVENT = "event"
    ORBITAL_PERIOD = "orbital_period"
    PHYSICS = "physics"
    GEODESY = "geodesy"


class WarningKind(Enum):
    """Operational conditions routed to the warnings counter."""
    UNKNOWN_EVENT = "unknown_event"
    UNKNOWN_LANDMARK = "unknown_landmark"
    DEGENERATE_INPUT = "degenerate_input"
    REFERENCE_UNAVAILABLE = "reference_unavailable"
    PLACEHOLDER_REFERENCE = "placeholder_reference"
    RETRIED_REFERENCE = "retried_reference"
    CHECK_ABORTED = "check_aborted"


@dataclass(frozen=True)
class TestResult:
    """Outcome of one check. Immutable once created.

    error and tolerance share units, which depend on kind:
    km for position and geodesy, seconds for event timing, and a
    dimensionless relative error for orbital_period and physics.
    """
    __test__ = False

    name: str
    kind: CheckKind
    passed: bool
    error: float
    tolerance: float
    timestamp: datetime
    details: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.error < 0:
            raise ValueError(f"error must be non-negative, got {self.error}")
        if not isinstance(self.details, MappingProxyType):
            object.__setattr__(self, "details", MappingProxyType(dict(self.details)))


@dataclass(frozen=True)
class OperationalWarning:
    """A check that could not be evaluated, and why."""
    kind: WarningKind
    check: str
    message: str
    timestamp: datetime


class VerificationError(Exception):
    """Base class for operational errors raised by checks and reference sources."""


class DegenerateInputError(VerificationError, ArithmeticError):
    """Relative error is undefined because its denominator is zero."""


class ReferenceUnavailable(VerificationError, ConnectionError):
    """Reference data could not be obtained (timeout, HTTP, malformed payload)."""
