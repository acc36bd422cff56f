"""Detect which kind of host the checks run on."""
from __future__ import annotations

import os
import sys

from device_integrity.models import PlatformKind
from device_integrity.policy import IntegrityPolicy, policy as default_policy

_OVERRIDES = {
    "android": PlatformKind.ANDROID,
    "editor": PlatformKind.DESKTOP_EDITOR,
    "other": PlatformKind.OTHER,
}


def is_android() -> bool:
    # python-for-android exports ANDROID_ARGUMENT, Termux and adb shells ANDROID_ROOT/ANDROID_DATA.
    if os.environ.get("ANDROID_ARGUMENT"):
        return True
    if os.environ.get("ANDROID_ROOT") and os.environ.get("ANDROID_DATA"):
        return True
    if hasattr(sys, "getandroidapilevel"):
        return True
    return os.path.exists("/system/build.prop")


def current_platform(policy: IntegrityPolicy | None = None) -> PlatformKind:
    """Resolve the platform, honouring the configured override and dev host flag."""

    active = policy or default_policy
    if active.platform_override:
        return _OVERRIDES[active.platform_override]
    if is_android():
        return PlatformKind.ANDROID
    if active.trusted_dev_host:
        return PlatformKind.DESKTOP_EDITOR
    return PlatformKind.OTHER


__all__ = ["current_platform", "is_android"]
