"""Interfaces between the detectors and the host platform."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from device_integrity.models import DeviceFingerprint, HostMetadata, ProbeResult


class ShellRunner(Protocol):
    def run(self, command: str) -> ProbeResult[str]:
        """Execute *command* through a shell and return its standard output."""


class PropertyReader(Protocol):
    def read(self, key: str) -> str:
        """Return the trimmed system property *key* or ``""``."""


class FileProbe(Protocol):
    def exists(self, path: str) -> bool:
        ...


class PackageProbe(Protocol):
    def is_installed(self, package: str) -> ProbeResult[bool]:
        ...


class DeviceFingerprintReader(Protocol):
    def read(self) -> DeviceFingerprint:
        ...


class HostMetadataReader(Protocol):
    def read(self) -> HostMetadata:
        ...


@dataclass
class DeviceBridge:
    """Bundle of collaborators consumed by :class:`IntegrityChecker`."""

    shell: ShellRunner
    properties: PropertyReader
    files: FileProbe
    packages: PackageProbe
    build: DeviceFingerprintReader
    host: HostMetadataReader


__all__ = [
    "DeviceBridge",
    "DeviceFingerprintReader",
    "FileProbe",
    "HostMetadataReader",
    "PackageProbe",
    "PropertyReader",
    "ShellRunner",
]
