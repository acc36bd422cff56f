from hypothesis import given
from hypothesis import strategies as st

from device_integrity.models import ROOT_REASON_PREFIXES, PlatformKind
from device_integrity.policy import SUSPECT_PACKAGES, SUSPECT_PATHS
from device_integrity.root_detector import SU_PROBE_COMMAND, RootDetector
from fakes import FakeFiles, FakePackages, FakeProperties, FakeShell

ROOT_ID = "uid=0(root) gid=0(root) groups=0(root) context=u:r:magisk:s0\n"


def make_detector(*, shell=None, properties=None, files=None, packages=None, **kwargs):
    return RootDetector(
        shell or FakeShell(),
        properties or FakeProperties(),
        files or FakeFiles(),
        packages or FakePackages(),
        **kwargs,
    )


def test_clean_device_is_not_rooted():
    verdict = make_detector(properties=FakeProperties({"ro.secure": "1", "ro.debuggable": "0"})).evaluate()
    assert not verdict.is_rooted
    assert verdict.reason == ""


def test_su_uid_zero_short_circuits_everything():
    properties = FakeProperties({"ro.secure": "0"})
    files = FakeFiles(SUSPECT_PATHS)
    packages = FakePackages(SUSPECT_PACKAGES)
    detector = make_detector(
        shell=FakeShell({SU_PROBE_COMMAND: ROOT_ID}),
        properties=properties,
        files=files,
        packages=packages,
    )

    verdict = detector.evaluate()

    assert verdict.is_rooted
    assert verdict.reason == "exec:su uid=0"
    assert properties.keys == []
    assert files.probed == []
    assert packages.queried == []


def test_su_without_root_uid_is_ignored():
    shell = FakeShell({SU_PROBE_COMMAND: "uid=2000(shell) gid=2000(shell)\n"})
    assert not make_detector(shell=shell).evaluate().is_rooted


def test_secure_flag_when_su_fails():
    detector = make_detector(
        shell=FakeShell(fail=True),
        properties=FakeProperties({"ro.secure": " 0\n", "ro.debuggable": "1"}),
    )
    verdict = detector.evaluate()
    assert verdict.is_rooted
    assert verdict.reason == "prop:ro.secure=0"


def test_debuggable_build():
    verdict = make_detector(properties=FakeProperties({"ro.secure": "1", "ro.debuggable": "1"})).evaluate()
    assert verdict.reason == "prop:ro.debuggable=1"


def test_first_existing_path_wins():
    files = FakeFiles({"/sbin/su", "/system/xbin/su"})
    verdict = make_detector(files=files).evaluate()
    assert verdict.reason == "file:/system/xbin/su"
    assert files.probed == ["/system/bin/su", "/system/xbin/su"]


def test_injected_path_list_is_used():
    files = FakeFiles({"/custom/su"})
    detector = make_detector(files=files, suspect_paths=["/custom/none", "/custom/su"])
    assert detector.evaluate().reason == "file:/custom/su"
    assert files.probed == ["/custom/none", "/custom/su"]


def test_installed_root_manager_package():
    packages = FakePackages({"eu.chainfire.supersu"})
    verdict = make_detector(packages=packages).evaluate()
    assert verdict.reason == "package:eu.chainfire.supersu"
    assert packages.queried == ["com.topjohnwu.magisk", "eu.chainfire.supersu"]


def test_failed_package_query_moves_on():
    packages = FakePackages({"com.koushikdutta.superuser"}, failing={"com.topjohnwu.magisk"})
    verdict = make_detector(packages=packages).evaluate()
    assert verdict.reason == "package:com.koushikdutta.superuser"


def test_raising_collaborators_only_negate_their_check():
    detector = make_detector(
        shell=FakeShell(raises=RuntimeError("no shell")),
        properties=FakeProperties(raises=OSError("getprop")),
        files=FakeFiles(raises=PermissionError("denied")),
        packages=FakePackages({"com.topjohnwu.magisk"}),
    )
    verdict = detector.evaluate()
    assert verdict.is_rooted
    assert verdict.reason == "package:com.topjohnwu.magisk"


def test_everything_failing_is_not_rooted():
    detector = make_detector(
        shell=FakeShell(fail=True),
        properties=FakeProperties(raises=RuntimeError("bridge down")),
        files=FakeFiles(raises=OSError("stat")),
        packages=FakePackages(failing=set(SUSPECT_PACKAGES)),
    )
    verdict = detector.evaluate()
    assert not verdict.is_rooted
    assert verdict.reason == ""


def test_non_android_platforms_are_never_rooted():
    shell = FakeShell({SU_PROBE_COMMAND: ROOT_ID})
    files = FakeFiles(SUSPECT_PATHS)
    for platform in (PlatformKind.OTHER, PlatformKind.DESKTOP_EDITOR):
        verdict = make_detector(shell=shell, files=files, platform=platform).evaluate()
        assert not verdict.is_rooted
        assert verdict.reason == ""
    assert shell.commands == []
    assert files.probed == []


@given(
    su_root=st.booleans(),
    secure=st.sampled_from(["0", "1", ""]),
    debuggable=st.sampled_from(["0", "1", ""]),
    paths=st.sets(st.sampled_from(SUSPECT_PATHS)),
    packages=st.sets(st.sampled_from(SUSPECT_PACKAGES)),
)
def test_reason_is_single_tagged_signal(su_root, secure, debuggable, paths, packages):
    detector = make_detector(
        shell=FakeShell({SU_PROBE_COMMAND: ROOT_ID if su_root else ""}),
        properties=FakeProperties({"ro.secure": secure, "ro.debuggable": debuggable}),
        files=FakeFiles(paths),
        packages=FakePackages(packages),
    )
    verdict = detector.evaluate()
    if verdict.is_rooted:
        assert sum(verdict.reason.startswith(prefix) for prefix in ROOT_REASON_PREFIXES) == 1
    else:
        assert verdict.reason == ""
    expected = su_root or secure == "0" or debuggable == "1" or bool(paths) or bool(packages)
    assert verdict.is_rooted == expected
