"""
mmock version resolution, asset location, installation and verification.
"""

from .resolver import (
    VersionResolver,
    GitHubReleaseClient,
    normalize_version,
    is_latest,
)
from .locator import NamingRule, NAMING_RULES, locate, asset_name, select_rule
from .installer import (
    MMockInstaller,
    InstallResult,
    CacheStatus,
    make_cache_key,
    make_install_dir,
)
from .verifier import MMockVerifier
from .action import run_action, execute

__all__ = [
    "VersionResolver",
    "GitHubReleaseClient",
    "normalize_version",
    "is_latest",
    "NamingRule",
    "NAMING_RULES",
    "locate",
    "asset_name",
    "select_rule",
    "MMockInstaller",
    "InstallResult",
    "CacheStatus",
    "make_cache_key",
    "make_install_dir",
    "MMockVerifier",
    "run_action",
    "execute",
]
