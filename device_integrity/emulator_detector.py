"""Emulator detection from build metadata."""
from __future__ import annotations

import logging
from typing import Tuple

from device_integrity.models import DeviceFingerprint, EmulatorVerdict, PlatformKind

_logger = logging.getLogger(__name__)

# (field, needles) pairs matched with ``needle in value``, in evaluation order.
CONTAINS_RULES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("fingerprint", ("generic", "unknown")),
    ("model", ("google_sdk", "Emulator", "Android SDK built for x86")),
    ("manufacturer", ("Genymotion",)),
)

EXACT_PRODUCTS = ("google_sdk", "unknown")
EMULATOR_HARDWARE = ("goldfish", "ranchu")


class EmulatorDetector:
    """Match build metadata against known emulator signatures.

    A trusted development host is always reported as an emulator; any other
    non-Android host never is.
    """

    def __init__(self, platform: PlatformKind = PlatformKind.ANDROID) -> None:
        self.platform = platform

    def evaluate(self, fingerprint: DeviceFingerprint) -> bool:
        return self.explain(fingerprint).is_emulator

    def explain(self, fingerprint: DeviceFingerprint) -> EmulatorVerdict:
        if self.platform is PlatformKind.DESKTOP_EDITOR:
            return EmulatorVerdict(True, "platform:trusted-dev-host")
        if self.platform is not PlatformKind.ANDROID:
            return EmulatorVerdict(False)
        reason = _match(fingerprint)
        if reason:
            _logger.info("Emulator signature matched: %s", reason)
            return EmulatorVerdict(True, reason)
        return EmulatorVerdict(False)


def _match(fingerprint: DeviceFingerprint) -> str:
    for field, needles in CONTAINS_RULES:
        value = getattr(fingerprint, field)
        for needle in needles:
            if needle in value:
                return f"{field}:{needle}"
    if "generic" in fingerprint.brand and "generic" in fingerprint.device:
        return "brand+device:generic"
    if fingerprint.product in EXACT_PRODUCTS:
        return f"product={fingerprint.product}"
    for needle in EMULATOR_HARDWARE:
        if needle in fingerprint.hardware:
            return f"hardware:{needle}"
    return ""


__all__ = ["EmulatorDetector"]
