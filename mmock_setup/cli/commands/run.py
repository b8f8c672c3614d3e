"""
Run command implementation.

Runs the full action: resolve, install, verify.
"""

import logging

from mmock_setup.config.inputs import (
    INPUT_CACHE_DIR,
    INPUT_GITHUB_TOKEN,
    INPUT_TEMP_DIR,
    INPUT_VERSION,
    load_inputs,
)
from mmock_setup.core.exceptions import InputError
from mmock_setup.core.workflow import WorkflowContext
from mmock_setup.mmock.action import run_action

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the run command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    context = WorkflowContext()
    overrides = {
        INPUT_VERSION: args.mmock_version,
        INPUT_GITHUB_TOKEN: args.github_token,
        INPUT_TEMP_DIR: args.temp_dir,
        INPUT_CACHE_DIR: args.cache_dir,
    }

    try:
        inputs = load_inputs(context, config_file=args.config, overrides=overrides)
    except (InputError, ValueError, FileNotFoundError) as e:
        context.set_failed(str(e))
        return context.exit_code

    return run_action(inputs, context)
