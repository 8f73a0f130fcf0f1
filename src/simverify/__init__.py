# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Simverify

Verification and validation of astronomical simulations against
independent truth: reference ephemerides, known celestial events,
WGS84 geodetic landmarks, and conservation laws.
"""

from simverify.domain.constants import AstroConstants, WGS84
from simverify.domain.catalogs import (
    Benchmark,
    DEFAULT_CATALOG,
    KnownEvent,
    Landmark,
    ReferenceCatalog,
)
from simverify.domain.geodesy import to_ecef
from simverify.domain.ephemeris import Provenance, StateRecord
from simverify.domain.results import (
    CheckKind,
    DegenerateInputError,
    OperationalWarning,
    ReferenceUnavailable,
    TestResult,
    VerificationError,
    WarningKind,
)
from simverify.domain.reports import Report, ReportSummary, report_to_json
from simverify.domain.verification import KeplerBody, VerificationEngine
from simverify.suite import SuiteConfig, VerificationSuite

__version__ = "0.1.0"

__all__ = [
    "AstroConstants",
    "WGS84",
    "Benchmark",
    "DEFAULT_CATALOG",
    "KnownEvent",
    "Landmark",
    "ReferenceCatalog",
    "to_ecef",
    "Provenance",
    "StateRecord",
    "CheckKind",
    "DegenerateInputError",
    "OperationalWarning",
    "ReferenceUnavailable",
    "TestResult",
    "VerificationError",
    "WarningKind",
    "Report",
    "ReportSummary",
    "report_to_json",
    "KeplerBody",
    "VerificationEngine",
    "SuiteConfig",
    "VerificationSuite",
]
