"""
Release asset location for mmock.

mmock renamed its release assets twice, so the download URL of a version
depends on where it falls in the release history:

    version        linux/x64                         darwin/x64                        darwin/arm64              win32/x64
    < 3.0.1        mmock_<v>_linux_64-bit.tar.gz     mmock_<v>_macOS_64-bit.tar.gz     (none)                    mmock_<v>_windows_64-bit.tar.gz
    3.0.1 - 3.x    mmock_Linux_x86_64.tar.gz         mmock_macOS_x86_64.tar.gz         mmock_macOS_arm64.tar.gz  mmock_Windows_x86_64.zip
    >= 4.0.0       mmock_Linux_x86_64.tar.gz         mmock_Darwin_x86_64.tar.gz        mmock_Darwin_arm64.tar.gz mmock_Windows_x86_64.zip

Each platform key owns an ordered list of NamingRule entries; the rule with
the greatest lower bound not exceeding the requested version wins.
Versions are compared with semantic-versioning precedence (3.0.10 > 3.0.9,
and a prerelease such as 3.0.1-1 sorts below 3.0.1).

Example:
    >>> locate("linux", "x64", "3.0.0")
    'https://github.com/jmartin82/mmock/releases/download/v3.0.0/mmock_3.0.0_linux_64-bit.tar.gz'
    >>> locate("darwin", "x64", "4.2.0")
    'https://github.com/jmartin82/mmock/releases/download/v4.2.0/mmock_Darwin_x86_64.tar.gz'
"""

from dataclasses import dataclass
from typing import Dict, Tuple

from semver import Version

from mmock_setup.core.exceptions import InvalidVersionError, UnsupportedPlatformError
from mmock_setup.mmock.resolver import MMOCK_OWNER, MMOCK_REPO

DOWNLOAD_HOST = "github.com"

# OS aliases accepted from the command line
_OS_ALIASES = {
    "macos": "darwin",
    "osx": "darwin",
    "windows": "win32",
}

# Names used in "Unsupported <os> architecture" messages
_OS_DISPLAY_NAMES = {
    "linux": "linux",
    "darwin": "MacOS",
    "win32": "windows",
}


@dataclass(frozen=True)
class NamingRule:
    """
    Asset naming scheme valid from min_version (inclusive) onwards.

    The scheme stays valid until the next rule's min_version in the same
    platform list.
    """

    min_version: str
    template: str

    @property
    def lower_bound(self) -> Version:
        return Version.parse(self.min_version)

    def asset_name(self, version: str) -> str:
        return self.template.format(version=version)


NAMING_RULES: Dict[Tuple[str, str], Tuple[NamingRule, ...]] = {
    ("linux", "x64"): (
        NamingRule("0.0.0", "mmock_{version}_linux_64-bit.tar.gz"),
        NamingRule("3.0.1", "mmock_Linux_x86_64.tar.gz"),
    ),
    ("darwin", "x64"): (
        NamingRule("0.0.0", "mmock_{version}_macOS_64-bit.tar.gz"),
        NamingRule("3.0.1", "mmock_macOS_x86_64.tar.gz"),
        NamingRule("4.0.0", "mmock_Darwin_x86_64.tar.gz"),
    ),
    # No arm64 assets were published before 3.0.1
    ("darwin", "arm64"): (
        NamingRule("3.0.1", "mmock_macOS_arm64.tar.gz"),
        NamingRule("4.0.0", "mmock_Darwin_arm64.tar.gz"),
    ),
    ("win32", "x64"): (
        NamingRule("0.0.0", "mmock_{version}_windows_64-bit.tar.gz"),
        NamingRule("3.0.1", "mmock_Windows_x86_64.zip"),
    ),
}


def parse_version(version: str) -> Version:
    """
    Parse a concrete version (MAJOR.MINOR.PATCH[-PRERELEASE][+BUILD]).

    Raises:
        InvalidVersionError: If version is not a valid semantic version
    """
    try:
        return Version.parse(version)
    except (TypeError, ValueError) as e:
        raise InvalidVersionError(version) from e


def normalize_os(os_name: str) -> str:
    lowered = os_name.lower()
    return _OS_ALIASES.get(lowered, lowered)


def select_rule(os_name: str, arch: str, version: str) -> NamingRule:
    """
    Pick the naming rule for a platform key and version.

    Raises:
        UnsupportedPlatformError: If the OS, the architecture, or the
            version on that OS/architecture has no release asset
        InvalidVersionError: If version cannot be parsed
    """
    os_name = normalize_os(os_name)

    if os_name not in _OS_DISPLAY_NAMES:
        raise UnsupportedPlatformError(f"Unsupported platform ({os_name})")

    rules = NAMING_RULES.get((os_name, arch))
    if not rules:
        raise UnsupportedPlatformError(
            f"Unsupported {_OS_DISPLAY_NAMES[os_name]} architecture ({arch})"
        )

    target = parse_version(version)
    selected = None
    for rule in rules:
        if rule.lower_bound <= target:
            selected = rule

    if selected is None:
        raise UnsupportedPlatformError(
            f"No mmock release asset for {os_name}/{arch} version {version} "
            f"(available from {rules[0].min_version})"
        )

    return selected


def asset_name(os_name: str, arch: str, version: str) -> str:
    """Release asset file name for a platform key and version."""
    return select_rule(os_name, arch, version).asset_name(version)


def locate(os_name: str, arch: str, version: str) -> str:
    """
    Compute the download URL of the mmock release asset.

    Pure and deterministic: the same arguments always give the same URL.

    Args:
        os_name: 'linux', 'darwin' or 'win32'
        arch: 'x64' or 'arm64' (others are never supported)
        version: Concrete version without prefix (e.g. '3.1.6')

    Returns:
        Download URL of the release asset

    Raises:
        UnsupportedPlatformError: If no asset exists for the combination
        InvalidVersionError: If version cannot be parsed
    """
    name = asset_name(os_name, arch, version)
    return (
        f"https://{DOWNLOAD_HOST}/{MMOCK_OWNER}/{MMOCK_REPO}"
        f"/releases/download/v{version}/{name}"
    )
