"""
Top-level action run: resolve, install, check.

Every failure is turned into a failed status carrying the error message;
run_action never raises for expected errors.
"""

import logging
from pathlib import Path
from typing import Optional

from mmock_setup.config.inputs import ActionInputs
from mmock_setup.core.cache_store import CacheStore
from mmock_setup.core.platform import PlatformInfo
from mmock_setup.core.workflow import WorkflowContext
from mmock_setup.mmock.installer import InstallResult, MMockInstaller
from mmock_setup.mmock.resolver import VersionResolver
from mmock_setup.mmock.verifier import MMockVerifier

logger = logging.getLogger(__name__)

INSTALL_GROUP = "💾 Install MMock"
CHECK_GROUP = "🧪 Installation check"


def execute(
    inputs: ActionInputs,
    context: WorkflowContext,
    resolver: Optional[VersionResolver] = None,
    installer: Optional[MMockInstaller] = None,
    verifier: Optional[MMockVerifier] = None,
    platform: Optional[PlatformInfo] = None,
) -> Path:
    """
    Run the three stages in order and return the verified binary path.

    Collaborators default to real implementations built from inputs.
    Errors propagate to the caller.
    """
    resolver = resolver or VersionResolver()
    version = resolver.resolve(inputs.version, inputs.github_token)

    if installer is None:
        installer = MMockInstaller(
            context,
            CacheStore(inputs.cache_root),
            inputs.temp_root,
            platform=platform,
        )

    with context.group(INSTALL_GROUP):
        result: InstallResult = installer.install(version)
        logger.debug(
            f"Install finished: cache {result.cache_status.value}, "
            f"saved={result.cache_saved}"
        )

    with context.group(CHECK_GROUP):
        binary = (verifier or MMockVerifier(context)).verify()

    return binary


def run_action(
    inputs: ActionInputs,
    context: Optional[WorkflowContext] = None,
    **collaborators,
) -> int:
    """
    Run the action and convert failures into a failed status.

    Args:
        inputs: Resolved configuration
        context: Workflow context (default: process environment)
        **collaborators: Optional resolver/installer/verifier/platform overrides

    Returns:
        Exit code: 0 on success, 1 on failure
    """
    context = context or WorkflowContext()

    try:
        execute(inputs, context, **collaborators)
    except Exception as e:
        context.set_failed(str(e))

    return context.exit_code
