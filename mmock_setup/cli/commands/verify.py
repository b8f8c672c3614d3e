"""
Verify command implementation.

Checks the mmock binary found on PATH.
"""

import logging

from mmock_setup.core.exceptions import VerificationError
from mmock_setup.core.workflow import WorkflowContext
from mmock_setup.mmock.verifier import MMockVerifier

logger = logging.getLogger(__name__)


def run(args) -> int:
    context = WorkflowContext()

    try:
        MMockVerifier(context).verify()
    except VerificationError as e:
        context.set_failed(str(e))

    return context.exit_code
