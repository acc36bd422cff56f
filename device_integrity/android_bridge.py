"""Default platform adapters.

Shell access goes through :mod:`subprocess`, which works both on-device and on
a desktop host. Everything that needs the Android object model (package
manager, ``android.os.Build``) imports pyjnius lazily, so the package still
imports on desktop where the adapters simply report failures.
"""
from __future__ import annotations

import logging
import os
import shlex
import signal
import subprocess
from typing import Optional, Sequence

from device_integrity.bridge import DeviceBridge, ShellRunner
from device_integrity.models import DeviceFingerprint, HostMetadata, ProbeResult
from device_integrity.policy import IntegrityPolicy, policy as default_policy

_logger = logging.getLogger(__name__)

BUILD_FIELDS = {
    "fingerprint": "FINGERPRINT",
    "model": "MODEL",
    "manufacturer": "MANUFACTURER",
    "brand": "BRAND",
    "device": "DEVICE",
    "product": "PRODUCT",
    "hardware": "HARDWARE",
    "tags": "TAGS",
}

TRUSTED_INSTALLERS = ("com.android.vending", "com.google.android.feedback")

# android.content.pm.ApplicationInfo.FLAG_DEBUGGABLE
_FLAG_DEBUGGABLE = 0x2


def _current_activity():
    from jnius import autoclass

    return autoclass("org.kivy.android.PythonActivity").mActivity


class SubprocessShellRunner:
    """Run commands through ``sh -c`` and capture standard output.

    Each command runs in its own session. On timeout the whole process group
    is killed, so children still holding the output pipe cannot keep the
    call waiting past ``timeout``.
    """

    reap_timeout = 1.0

    def __init__(self, *, shell: str = "sh", timeout: float = 5.0) -> None:
        self.shell = shell
        self.timeout = timeout

    def run(self, command: str) -> ProbeResult[str]:
        try:
            with subprocess.Popen(
                [self.shell, "-c", command],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                text=True,
                errors="replace",
                start_new_session=True,
            ) as process:
                try:
                    output, _ = process.communicate(timeout=self.timeout)
                except subprocess.TimeoutExpired:
                    self._kill_group(process)
                    try:
                        process.communicate(timeout=self.reap_timeout)
                    except subprocess.TimeoutExpired:
                        _logger.debug("Output of %r still open after kill", command)
                    raise
        except (OSError, subprocess.SubprocessError, ValueError) as exc:
            _logger.debug("Shell command %r failed: %s", command, exc)
            return ProbeResult.failure(exc)
        return ProbeResult.success(output or "")

    @staticmethod
    def _kill_group(process: subprocess.Popen) -> None:
        try:
            os.killpg(process.pid, signal.SIGKILL)
        except ProcessLookupError:
            pass
        except OSError as exc:
            _logger.debug("Cannot kill process group %s: %s", process.pid, exc)
            process.kill()


class ShellPropertyReader:
    """Read system properties with ``getprop``."""

    def __init__(self, runner: ShellRunner) -> None:
        self.runner = runner

    def read(self, key: str) -> str:
        if not key:
            return ""
        result = self.runner.run(f"getprop {shlex.quote(key)}")
        if not result.ok:
            return ""
        return (result.value or "").strip()


class LocalFileProbe:
    def exists(self, path: str) -> bool:
        try:
            return os.path.exists(path)
        except ValueError:
            return False


class AndroidPackageProbe:
    """Query the package manager of the running activity through pyjnius."""

    def is_installed(self, package: str) -> ProbeResult[bool]:
        try:
            from jnius import JavaException

            manager = _current_activity().getPackageManager()
        except Exception as exc:
            _logger.debug("Package manager unavailable: %s", exc)
            return ProbeResult.failure(exc)
        try:
            manager.getPackageInfo(package, 0)
        except JavaException:
            # NameNotFoundException
            return ProbeResult.success(False)
        except Exception as exc:
            _logger.debug("Package query for %s failed: %s", package, exc)
            return ProbeResult.failure(exc)
        return ProbeResult.success(True)


class AndroidBuildReader:
    """Expose ``android.os.Build`` constants as a :class:`DeviceFingerprint`."""

    def read(self) -> DeviceFingerprint:
        try:
            from jnius import autoclass

            build = autoclass("android.os.Build")
        except Exception as exc:
            _logger.debug("android.os.Build unavailable: %s", exc)
            return DeviceFingerprint()
        values = {}
        for field, constant in BUILD_FIELDS.items():
            try:
                values[field] = getattr(build, constant)
            except Exception as exc:  # pragma: no cover - environment dependent
                _logger.debug("Build.%s unreadable: %s", constant, exc)
        return DeviceFingerprint.from_mapping(values)


class AndroidHostMetadataReader:
    """Describe how the running application was installed."""

    def __init__(self, trusted_installers: Sequence[str] = TRUSTED_INSTALLERS) -> None:
        self.trusted_installers = tuple(trusted_installers)

    def read(self) -> HostMetadata:
        try:
            activity = _current_activity()
            package_name = activity.getPackageName()
            manager = activity.getPackageManager()
            installer: Optional[str] = manager.getInstallerPackageName(package_name)
            info = manager.getPackageInfo(package_name, 0)
            flags = int(activity.getApplicationInfo().flags)
        except Exception as exc:
            _logger.debug("Host metadata unavailable: %s", exc)
            return HostMetadata()
        installer = installer or ""
        return HostMetadata(
            installer_name=installer,
            install_mode="debuggable" if flags & _FLAG_DEBUGGABLE else "release",
            build_id=str(info.versionName or ""),
            genuine=installer in self.trusted_installers,
        )


class StaticHostMetadataReader:
    """Metadata for hosts without an Android package manager."""

    def __init__(self, metadata: HostMetadata | None = None) -> None:
        if metadata is None:
            from device_integrity import __version__

            metadata = HostMetadata(install_mode="desktop", build_id=__version__)
        self.metadata = metadata

    def read(self) -> HostMetadata:
        return self.metadata


def default_bridge(policy: IntegrityPolicy | None = None, *, android: bool = True) -> DeviceBridge:
    """Wire the default adapters for the current host."""

    active = policy or default_policy
    runner = SubprocessShellRunner(timeout=active.shell_timeout)
    return DeviceBridge(
        shell=runner,
        properties=ShellPropertyReader(runner),
        files=LocalFileProbe(),
        packages=AndroidPackageProbe(),
        build=AndroidBuildReader(),
        host=AndroidHostMetadataReader() if android else StaticHostMetadataReader(),
    )


__all__ = [
    "AndroidBuildReader",
    "AndroidHostMetadataReader",
    "AndroidPackageProbe",
    "LocalFileProbe",
    "ShellPropertyReader",
    "StaticHostMetadataReader",
    "SubprocessShellRunner",
    "default_bridge",
]
