"""
Locate command implementation.

Prints the download URL of the mmock release asset for a version and
platform.
"""

import logging

from mmock_setup.core.exceptions import InvalidVersionError, UnsupportedPlatformError
from mmock_setup.core.platform import detect_platform
from mmock_setup.mmock.locator import locate
from mmock_setup.mmock.resolver import normalize_version

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the locate command.

    Missing --os/--arch values fall back to the current platform.
    """
    current = detect_platform()
    target_os = args.target_os or current.os
    arch = args.arch or current.arch

    try:
        url = locate(target_os, arch, normalize_version(args.mmock_version))
    except (UnsupportedPlatformError, InvalidVersionError) as e:
        logger.error(str(e))
        return 1

    print(url)
    return 0
