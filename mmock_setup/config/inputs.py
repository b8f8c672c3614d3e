"""
Action configuration.

ActionInputs gathers everything a run needs (requested version, GitHub
token, temp and cache roots). Values come from, in order of precedence:

1. Explicit overrides (command-line options)
2. Action inputs (INPUT_* environment variables)
3. An optional YAML configuration file
4. Defaults

The resulting object is passed explicitly to the resolver and installer.
"""

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from mmock_setup.core.cache_store import get_default_cache_dir
from mmock_setup.core.exceptions import InputError
from mmock_setup.core.workflow import WorkflowContext

logger = logging.getLogger(__name__)

# Input names as declared by the action
INPUT_VERSION = "version"
INPUT_GITHUB_TOKEN = "github-token"
INPUT_TEMP_DIR = "temp-dir"
INPUT_CACHE_DIR = "cache-dir"

_KNOWN_KEYS = (INPUT_VERSION, INPUT_GITHUB_TOKEN, INPUT_TEMP_DIR, INPUT_CACHE_DIR)


@dataclass(frozen=True)
class ActionInputs:
    """
    Resolved configuration of one run.

    Attributes:
        version: Raw version spec ('latest', '3.1.6', 'v4.2.0', ...)
        github_token: Token for the release-metadata lookup, if any
        temp_dir: Root under which the install directory is created
        cache_dir: Root of the persistent cache store
    """

    version: str
    github_token: Optional[str] = None
    temp_dir: Optional[Path] = None
    cache_dir: Optional[Path] = None

    @property
    def temp_root(self) -> Path:
        return self.temp_dir if self.temp_dir is not None else default_temp_dir()

    @property
    def cache_root(self) -> Path:
        return self.cache_dir if self.cache_dir is not None else get_default_cache_dir()


def default_temp_dir() -> Path:
    """$RUNNER_TEMP under a runner, the system temp directory otherwise."""
    runner_temp = os.environ.get("RUNNER_TEMP")
    if runner_temp:
        return Path(runner_temp)
    return Path(tempfile.gettempdir())


def load_yaml_config(config_file: Path, required: bool = False) -> Dict[str, Any]:
    """
    Load and parse a YAML configuration file.

    Args:
        config_file: Path to YAML configuration file
        required: If True, raise error if file doesn't exist

    Returns:
        Configuration dictionary (empty dict if file doesn't exist and not required)

    Raises:
        FileNotFoundError: If required=True and file doesn't exist
        ValueError: If YAML parsing fails or the document is not a mapping

    Example:
        >>> config = load_yaml_config(Path("mmock-setup.yaml"))
        >>> config.get("version", "latest")
    """
    if not config_file.exists():
        if required:
            raise FileNotFoundError(f"Configuration file not found: {config_file}")
        logger.debug(f"Config file not found (optional): {config_file}")
        return {}

    logger.debug(f"Loading configuration from {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse YAML: {e}")
        raise ValueError(f"Invalid YAML in {config_file}: {e}") from e

    config = config or {}
    if not isinstance(config, dict):
        raise ValueError(f"Configuration in {config_file} must be a mapping")

    unknown = sorted(set(config) - set(_KNOWN_KEYS))
    if unknown:
        logger.warning(f"Ignoring unknown configuration keys: {', '.join(unknown)}")

    return config


def load_inputs(
    context: Optional[WorkflowContext] = None,
    config_file: Optional[Path] = None,
    overrides: Optional[Dict[str, Optional[str]]] = None,
) -> ActionInputs:
    """
    Build ActionInputs from overrides, action inputs and a config file.

    Args:
        context: Workflow context to read INPUT_* variables from
        config_file: Optional YAML configuration file
        overrides: Values keyed by input name; None entries are ignored

    Raises:
        InputError: If no version is supplied by any source
        FileNotFoundError: If config_file is given but does not exist
        ValueError: If config_file is not a valid YAML mapping
    """
    context = context or WorkflowContext()
    file_config = load_yaml_config(config_file, required=True) if config_file else {}
    overrides = overrides or {}

    def pick(name: str) -> str:
        value = overrides.get(name)
        if value:
            return str(value).strip()
        value = context.get_input(name)
        if value:
            return value
        value = file_config.get(name)
        return str(value).strip() if value is not None else ""

    version = pick(INPUT_VERSION)
    if not version:
        raise InputError(INPUT_VERSION)

    temp_dir = pick(INPUT_TEMP_DIR)
    cache_dir = pick(INPUT_CACHE_DIR)

    return ActionInputs(
        version=version,
        github_token=pick(INPUT_GITHUB_TOKEN) or None,
        temp_dir=Path(temp_dir).expanduser() if temp_dir else None,
        cache_dir=Path(cache_dir).expanduser() if cache_dir else None,
    )
