"""
Configuration for mmock-setup runs.
"""

from .inputs import (
    ActionInputs,
    load_inputs,
    load_yaml_config,
    default_temp_dir,
    INPUT_VERSION,
    INPUT_GITHUB_TOKEN,
    INPUT_TEMP_DIR,
    INPUT_CACHE_DIR,
)

__all__ = [
    "ActionInputs",
    "load_inputs",
    "load_yaml_config",
    "default_temp_dir",
    "INPUT_VERSION",
    "INPUT_GITHUB_TOKEN",
    "INPUT_TEMP_DIR",
    "INPUT_CACHE_DIR",
]
