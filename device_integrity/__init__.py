"""Advisory root and emulator detection for Android builds."""

from __future__ import annotations

__version__ = "0.1.0"

from device_integrity.checker import IntegrityChecker
from device_integrity.emulator_detector import EmulatorDetector
from device_integrity.models import (
    DeviceFingerprint,
    EmulatorVerdict,
    HostMetadata,
    PlatformKind,
    PolicyDecision,
    ProbeResult,
    RootVerdict,
)
from device_integrity.restriction import PolicyEvaluator
from device_integrity.root_detector import RootDetector

__all__ = [
    "DeviceFingerprint",
    "EmulatorDetector",
    "EmulatorVerdict",
    "HostMetadata",
    "IntegrityChecker",
    "PlatformKind",
    "PolicyDecision",
    "PolicyEvaluator",
    "ProbeResult",
    "RootDetector",
    "RootVerdict",
    "__version__",
]
