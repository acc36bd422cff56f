"""Centralised configuration for the integrity checks.

Every tunable has a sane default and can be overridden through an environment
variable, so test rigs and release builds can adjust the detector without
code changes. Malformed values fall back to the default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional, Tuple

SUSPECT_PATHS: Tuple[str, ...] = (
    "/system/bin/su",
    "/system/xbin/su",
    "/sbin/su",
    "/system/app/Superuser.apk",
    "/system/app/SuperSU.apk",
    "/system/app/Magisk.apk",
    "/data/local/su",
    "/data/local/bin/su",
    "/data/local/xbin/su",
    "/data/data/com.noshufou.android.su",
)

SUSPECT_PACKAGES: Tuple[str, ...] = (
    "com.topjohnwu.magisk",
    "eu.chainfire.supersu",
    "com.noshufou.android.su",
    "com.koushikdutta.superuser",
    "com.thirdparty.superuser",
)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}
_PLATFORM_VALUES = {"android", "editor", "other"}


def _load_float(name: str, default: float) -> float:
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        parsed = float(value)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _load_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    return default


def _load_list(name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    value = os.environ.get(name)
    if value is None:
        return default
    items = tuple(item.strip() for item in value.split(",") if item.strip())
    return items or default


def _load_platform(name: str) -> Optional[str]:
    value = os.environ.get(name)
    if value is None:
        return None
    normalized = value.strip().lower()
    return normalized if normalized in _PLATFORM_VALUES else None


@dataclass(frozen=True)
class IntegrityPolicy:
    """Holds runtime tunables for the root and emulator checks."""

    trusted_dev_host: bool = False
    platform_override: Optional[str] = None
    shell_timeout: float = 5.0
    suspect_paths: Tuple[str, ...] = SUSPECT_PATHS
    suspect_packages: Tuple[str, ...] = SUSPECT_PACKAGES
    audit_enabled: bool = False


def load_policy() -> IntegrityPolicy:
    """Load the integrity policy considering environment overrides."""

    return IntegrityPolicy(
        trusted_dev_host=_load_bool("DEVICE_INTEGRITY_TRUSTED_DEV_HOST", False),
        platform_override=_load_platform("DEVICE_INTEGRITY_PLATFORM"),
        shell_timeout=_load_float("DEVICE_INTEGRITY_SHELL_TIMEOUT", 5.0),
        suspect_paths=_load_list("DEVICE_INTEGRITY_SUSPECT_PATHS", SUSPECT_PATHS),
        suspect_packages=_load_list("DEVICE_INTEGRITY_SUSPECT_PACKAGES", SUSPECT_PACKAGES),
        audit_enabled=_load_bool("DEVICE_INTEGRITY_AUDIT", False),
    )


policy = load_policy()


__all__ = [
    "IntegrityPolicy",
    "SUSPECT_PACKAGES",
    "SUSPECT_PATHS",
    "load_policy",
    "policy",
]
