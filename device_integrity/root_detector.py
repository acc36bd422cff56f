"""Root detection heuristics."""
from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional, Sequence

from device_integrity.bridge import FileProbe, PackageProbe, PropertyReader, ShellRunner
from device_integrity.models import PlatformKind, RootVerdict
from device_integrity.policy import SUSPECT_PACKAGES, SUSPECT_PATHS

_logger = logging.getLogger(__name__)

SU_PROBE_COMMAND = "su -c id"
ROOT_UID_MARKER = "uid=0"

CheckFn = Callable[[], Optional[str]]


class RootDetector:
    """Run the root checks in order of strength and stop at the first hit.

    1. ``su -c id`` reports ``uid=0`` (actual privilege escalation)
    2. ``ro.secure`` is ``0``
    3. ``ro.debuggable`` is ``1``
    4. a known su binary or superuser APK exists
    5. a known root manager package is installed

    A collaborator failure only negates the check it happened in.
    """

    def __init__(
        self,
        shell: ShellRunner,
        properties: PropertyReader,
        files: FileProbe,
        packages: PackageProbe,
        *,
        platform: PlatformKind = PlatformKind.ANDROID,
        suspect_paths: Sequence[str] = SUSPECT_PATHS,
        suspect_packages: Sequence[str] = SUSPECT_PACKAGES,
    ) -> None:
        self.shell = shell
        self.properties = properties
        self.files = files
        self.packages = packages
        self.platform = platform
        self.suspect_paths = tuple(suspect_paths)
        self.suspect_packages = tuple(suspect_packages)

    def evaluate(self) -> RootVerdict:
        if self.platform is not PlatformKind.ANDROID:
            return RootVerdict.clean()
        for check in self._checks():
            reason = self._run_check(check)
            if reason:
                _logger.info("Root indicator found: %s", reason)
                return RootVerdict.rooted(reason)
        return RootVerdict.clean()

    def _checks(self) -> Iterable[CheckFn]:
        return (
            self._check_su,
            self._check_secure_flag,
            self._check_debuggable,
            self._check_paths,
            self._check_packages,
        )

    @staticmethod
    def _run_check(check: CheckFn) -> Optional[str]:
        try:
            return check()
        except Exception as exc:
            _logger.debug("Root check %s failed: %s", check.__name__, exc)
            return None

    def _check_su(self) -> Optional[str]:
        result = self.shell.run(SU_PROBE_COMMAND)
        if result.ok and ROOT_UID_MARKER in (result.value or ""):
            return "exec:su uid=0"
        return None

    def _check_property(self, key: str, expected: str) -> Optional[str]:
        value = (self.properties.read(key) or "").strip()
        if value == expected:
            return f"prop:{key}={expected}"
        return None

    def _check_secure_flag(self) -> Optional[str]:
        return self._check_property("ro.secure", "0")

    def _check_debuggable(self) -> Optional[str]:
        return self._check_property("ro.debuggable", "1")

    def _check_paths(self) -> Optional[str]:
        for path in self.suspect_paths:
            if self.files.exists(path):
                return f"file:{path}"
        return None

    def _check_packages(self) -> Optional[str]:
        for package in self.suspect_packages:
            result = self.packages.is_installed(package)
            if not result.ok:
                _logger.debug("Package query for %s failed: %s", package, result.error)
                continue
            if result.value:
                return f"package:{package}"
        return None


__all__ = ["RootDetector", "SU_PROBE_COMMAND"]
