"""
Resolve command implementation.

Prints the concrete mmock version for a version spec.
"""

import logging

from mmock_setup.core.exceptions import ResolutionError
from mmock_setup.mmock.resolver import VersionResolver

logger = logging.getLogger(__name__)


def run(args) -> int:
    try:
        version = VersionResolver().resolve(args.spec, args.github_token)
    except ResolutionError as e:
        logger.error(str(e))
        return 1

    print(version)
    return 0
