"""Test configuration helpers."""
from __future__ import annotations

import sys
from pathlib import Path


def _ensure_paths() -> None:
    tests_dir = Path(__file__).resolve().parent
    for path in (tests_dir.parent, tests_dir):
        if str(path) not in sys.path:
            sys.path.insert(0, str(path))


_ensure_paths()

import pytest

from device_integrity.bridge import DeviceBridge
from fakes import EMULATOR, PIXEL, FakeBuild, FakeFiles, FakeHost, FakePackages, FakeProperties, FakeShell


@pytest.fixture(autouse=True, scope="session")
def _session_audit_dir(tmp_path_factory):
    """Keep audit records out of the real home directory."""

    with pytest.MonkeyPatch.context() as patcher:
        patcher.setenv("DEVICE_INTEGRITY_AUDIT_DIR", str(tmp_path_factory.mktemp("audit")))
        yield


@pytest.fixture
def audit_dir(tmp_path, monkeypatch):
    """A fresh, empty audit directory for tests that inspect the records."""

    directory = tmp_path / "audit"
    monkeypatch.setenv("DEVICE_INTEGRITY_AUDIT_DIR", str(directory))
    return directory


@pytest.fixture
def pixel():
    return PIXEL


@pytest.fixture
def emulator_fingerprint():
    return EMULATOR


@pytest.fixture
def make_bridge():
    def _make(
        *,
        shell=None,
        properties=None,
        files=None,
        packages=None,
        fingerprint=None,
        host=None,
    ):
        return DeviceBridge(
            shell=shell or FakeShell(),
            properties=properties or FakeProperties(),
            files=files or FakeFiles(),
            packages=packages or FakePackages(),
            build=FakeBuild(fingerprint or PIXEL),
            host=FakeHost(host),
        )

    return _make
