import plistlib

import pytest

from chatlog import appver
from chatlog.appver import AppInfo, load_app_info, read_plist_info


def make_bundle(tmp_path, content):
    contents = tmp_path / "Demo.app" / "Contents"
    (contents / "MacOS").mkdir(parents=True)
    binary = contents / "MacOS" / "Demo"
    binary.write_bytes(b"")
    (contents / "Info.plist").write_bytes(plistlib.dumps(content))
    return str(binary)


def test_read_plist_info(tmp_path):
    binary = make_bundle(
        tmp_path,
        {"CFBundleShortVersionString": "4.0.3.22", "NSHumanReadableCopyright": "Demo Corp"},
    )
    info = read_plist_info(binary)
    assert info.full_version == "4.0.3.22"
    assert info.version == 4
    assert info.company_name == "Demo Corp"
    assert info.file_path == binary


def test_non_numeric_version_gives_zero(tmp_path):
    binary = make_bundle(tmp_path, {"CFBundleShortVersionString": "beta.1"})
    info = read_plist_info(binary)
    assert info.version == 0
    assert info.full_version == "beta.1"
    assert info.company_name == ""


def test_binary_plist_is_read(tmp_path):
    contents = tmp_path / "B.app" / "Contents"
    (contents / "MacOS").mkdir(parents=True)
    (contents / "Info.plist").write_bytes(
        plistlib.dumps({"CFBundleShortVersionString": "3.9"}, fmt=plistlib.FMT_BINARY)
    )
    info = read_plist_info(str(contents / "MacOS" / "B"))
    assert info.version == 3


def test_missing_plist_raises(tmp_path):
    (tmp_path / "X.app" / "Contents" / "MacOS").mkdir(parents=True)
    with pytest.raises(FileNotFoundError):
        read_plist_info(str(tmp_path / "X.app" / "Contents" / "MacOS" / "X"))


def test_malformed_plist_raises(tmp_path):
    contents = tmp_path / "Y.app" / "Contents"
    (contents / "MacOS").mkdir(parents=True)
    (contents / "Info.plist").write_bytes(b"not a plist at all")
    with pytest.raises(plistlib.InvalidFileException):
        read_plist_info(str(contents / "MacOS" / "Y"))


def test_load_on_other_platforms_only_keeps_path(monkeypatch):
    monkeypatch.setattr(appver.sys, "platform", "linux")
    assert load_app_info("/opt/demo/bin/demo") == AppInfo(file_path="/opt/demo/bin/demo")


def test_load_on_darwin_reads_plist(tmp_path, monkeypatch):
    binary = make_bundle(tmp_path, {"CFBundleShortVersionString": "4.1"})
    monkeypatch.setattr(appver.sys, "platform", "darwin")
    info = load_app_info(binary)
    assert info.full_version == "4.1"
    assert info.version == 4