"""Public entry point combining the root, emulator and restriction checks."""
from __future__ import annotations

import logging
from typing import Optional

from audit.logger import record_event
from device_integrity.android_bridge import default_bridge
from device_integrity.bridge import DeviceBridge
from device_integrity.emulator_detector import EmulatorDetector
from device_integrity.models import (
    DeviceFingerprint,
    EmulatorVerdict,
    HostMetadata,
    PlatformKind,
    PolicyDecision,
    RootVerdict,
)
from device_integrity.platform import current_platform
from device_integrity.policy import IntegrityPolicy, policy as default_policy
from device_integrity.restriction import PolicyEvaluator
from device_integrity.root_detector import RootDetector

_logger = logging.getLogger(__name__)


def _format_genuine(genuine: Optional[bool]) -> str:
    return "unknown" if genuine is None else str(genuine)


class IntegrityChecker:
    """Answer "is this device rooted / an emulator / to be restricted?".

    Nothing is cached: every call reads live device state, so a verdict can
    change between calls (e.g. su granted mid-session). No call raises on a
    platform failure; unreadable signals count as negative.

    Decisions stay in memory unless ``policy.audit_enabled`` is set
    (``DEVICE_INTEGRITY_AUDIT=1``). With it, every restricting decision is
    also persisted as a signed record in the audit directory.
    """

    def __init__(
        self,
        bridge: DeviceBridge | None = None,
        *,
        policy: IntegrityPolicy | None = None,
        platform: PlatformKind | None = None,
    ) -> None:
        self.policy = policy or default_policy
        self.platform = platform or current_platform(self.policy)
        self.bridge = bridge or default_bridge(
            self.policy, android=self.platform is PlatformKind.ANDROID
        )
        self.root_detector = RootDetector(
            self.bridge.shell,
            self.bridge.properties,
            self.bridge.files,
            self.bridge.packages,
            platform=self.platform,
            suspect_paths=self.policy.suspect_paths,
            suspect_packages=self.policy.suspect_packages,
        )
        self.emulator_detector = EmulatorDetector(self.platform)

    def _read_fingerprint(self) -> DeviceFingerprint:
        if self.platform is not PlatformKind.ANDROID:
            return DeviceFingerprint()
        try:
            return self.bridge.build.read()
        except Exception as exc:
            _logger.debug("Build metadata unreadable: %s", exc)
            return DeviceFingerprint()

    def _read_host(self) -> HostMetadata:
        try:
            return self.bridge.host.read()
        except Exception as exc:
            _logger.debug("Host metadata unreadable: %s", exc)
            return HostMetadata()

    def is_rooted(self) -> RootVerdict:
        return self.root_detector.evaluate()

    def explain_emulator(self) -> EmulatorVerdict:
        return self.emulator_detector.explain(self._read_fingerprint())

    def is_emulator(self) -> bool:
        return self.explain_emulator().is_emulator

    def should_restrict_sensitive_features(self) -> PolicyDecision:
        decision = PolicyEvaluator(self.is_emulator, self.is_rooted).evaluate()
        if decision.restrict:
            _logger.info("Restricting sensitive features: %s", decision.reason)
            self._audit("integrity.restrict", {"reason": decision.reason})
        return decision

    def get_diagnostic_summary(self) -> str:
        host = self._read_host()
        parts = [
            host.installer_name,
            host.install_mode,
            host.build_id,
            f"Genuine:{_format_genuine(host.genuine)}",
        ]
        if self.platform is not PlatformKind.ANDROID:
            return "/".join(parts)

        fingerprint = self._read_fingerprint()
        is_emulator = self.emulator_detector.evaluate(fingerprint)
        verdict = self.is_rooted()

        parts.append(f"Rooted:{verdict.is_rooted}")
        if verdict.is_rooted:
            parts.append(f"RootReason:{verdict.reason}")
        parts.extend(
            [
                f"Emulator:{is_emulator}",
                f"Model:{fingerprint.model}",
                f"Manufacturer:{fingerprint.manufacturer}",
                f"Brand:{fingerprint.brand}",
                f"Device:{fingerprint.device}",
                f"Fingerprint:{fingerprint.fingerprint}",
                f"Product:{fingerprint.product}",
                f"Hardware:{fingerprint.hardware}",
                f"Tags:{fingerprint.tags}",
            ]
        )
        return "/".join(parts)

    def _audit(self, event: str, details: dict) -> None:
        if not self.policy.audit_enabled:
            return
        try:
            record_event(event, details={"platform": self.platform.value, **details})
        except (OSError, ValueError) as exc:
            _logger.warning("Could not write audit record %s: %s", event, exc)


__all__ = ["IntegrityChecker"]
