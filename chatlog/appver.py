"""Version details of an installed application binary."""

from __future__ import annotations

import os
import plistlib
import sys
from dataclasses import dataclass

from .textutil import must_any_to_int

INFO_FILE = "Info.plist"


@dataclass
class AppInfo:
    """Version information read from an application's metadata."""

    file_path: str
    company_name: str = ""
    file_description: str = ""
    version: int = 0
    full_version: str = ""
    legal_copyright: str = ""
    product_name: str = ""
    product_version: str = ""


def _plist_path(file_path: str) -> str:
    """Locate Info.plist two levels above a binary inside an app bundle."""
    bundle = os.path.dirname(os.path.dirname(os.path.normpath(file_path)))
    if not os.path.isabs(bundle):
        bundle = os.sep + bundle
    return os.path.join(bundle, INFO_FILE)


def read_plist_info(file_path: str) -> AppInfo:
    """Read version details from the Info.plist of the bundle holding file_path.

    Raises OSError when the plist cannot be read and plistlib's
    InvalidFileException when it is malformed.
    """
    with open(_plist_path(file_path), "rb") as handle:
        data = plistlib.load(handle)
    if not isinstance(data, dict):
        raise plistlib.InvalidFileException("Info.plist does not hold a dictionary")
    full_version = str(data.get("CFBundleShortVersionString", "") or "")
    return AppInfo(
        file_path=file_path,
        full_version=full_version,
        version=must_any_to_int(full_version.split(".")[0]),
        company_name=str(data.get("NSHumanReadableCopyright", "") or ""),
    )


def load_app_info(file_path: str) -> AppInfo:
    """Collect version details for the binary at file_path on this platform."""
    if sys.platform == "darwin":
        return read_plist_info(file_path)
    return AppInfo(file_path=file_path)