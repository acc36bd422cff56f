"""Value objects shared by the detectors and the public facade."""
from __future__ import annotations

import enum
from dataclasses import dataclass, fields
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class PlatformKind(enum.Enum):
    """Where the checks are running."""

    ANDROID = "android"
    DESKTOP_EDITOR = "editor"
    OTHER = "other"


class ProbeError(RuntimeError):
    """Raised by :meth:`ProbeResult.unwrap` for a failed probe."""


@dataclass(frozen=True)
class ProbeResult(Generic[T]):
    """Outcome of a single collaborator call.

    Platform adapters never raise: a failed spawn, a timeout or a missing
    Java bridge is reported through ``error`` and the detectors treat it as a
    negative signal.
    """

    value: Optional[T] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "ProbeResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: object) -> "ProbeResult[T]":
        return cls(error=str(error) or type(error).__name__)

    def unwrap(self) -> T:
        if self.error is not None:
            raise ProbeError(self.error)
        return self.value  # type: ignore[return-value]


@dataclass(frozen=True)
class DeviceFingerprint:
    fingerprint: str = ""
    model: str = ""
    manufacturer: str = ""
    brand: str = ""
    device: str = ""
    product: str = ""
    hardware: str = ""
    tags: str = ""

    @classmethod
    def from_mapping(cls, values: dict[str, object]) -> "DeviceFingerprint":
        """Build a fingerprint, coercing missing or ``None`` fields to ``""``."""

        kwargs = {}
        for field in fields(cls):
            raw = values.get(field.name)
            kwargs[field.name] = "" if raw is None else str(raw)
        return cls(**kwargs)


@dataclass(frozen=True)
class HostMetadata:
    installer_name: str = ""
    install_mode: str = "unknown"
    build_id: str = ""
    genuine: Optional[bool] = None


@dataclass(frozen=True)
class RootVerdict:
    is_rooted: bool
    reason: str = ""

    @classmethod
    def clean(cls) -> "RootVerdict":
        return cls(is_rooted=False)

    @classmethod
    def rooted(cls, reason: str) -> "RootVerdict":
        return cls(is_rooted=True, reason=reason)


@dataclass(frozen=True)
class EmulatorVerdict:
    is_emulator: bool
    reason: str = ""


@dataclass(frozen=True)
class PolicyDecision:
    restrict: bool
    reason: str = ""


ROOT_REASON_PREFIXES = ("exec:", "prop:", "file:", "package:")


__all__ = [
    "DeviceFingerprint",
    "EmulatorVerdict",
    "HostMetadata",
    "PlatformKind",
    "PolicyDecision",
    "ProbeError",
    "ProbeResult",
    "ROOT_REASON_PREFIXES",
    "RootVerdict",
]
