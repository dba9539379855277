# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Execution Configuration

Policies that the reference loader hardcoded, made explicit:
whether cached tensors are reloaded, whether missing resource files fail the
operation, and whether a missing manifest fails `Program.load`.

Example:
    from portablenet.config import ExecutionConfig

    config = ExecutionConfig(force_reload=True)
    ws = Workspace("models/alexnet", config=config)
"""

import logging
import os
from dataclasses import dataclass


DEFAULT_MANIFEST_NAME = "net.json"

_TRUE_VALUES = ("1", "true", "yes", "on")


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


@dataclass
class ExecutionConfig:
    """
    Configuration for loading and executing programs.

    Attributes:
        manifest_name: File name of the manifest inside a bundle directory
        force_reload: Reload Load/LoadImage outputs that already exist
        strict_resources: Fail an operation whose resource file is missing
                          or short; when off, log a warning and keep the
                          zero-filled buffer
        strict_manifest: Raise ResourceError when the manifest cannot be
                         opened; when off, `Program.load` returns a NotFound
                         status and keeps the prior program
        verbose: Verbosity level (0=silent .. 4=debug)
    """

    manifest_name: str = DEFAULT_MANIFEST_NAME
    force_reload: bool = False
    strict_resources: bool = True
    strict_manifest: bool = False
    verbose: int = 2

    @classmethod
    def from_env(cls) -> "ExecutionConfig":
        """Build a config from PORTABLENET_* environment variables."""
        config = cls(
            manifest_name=os.environ.get("PORTABLENET_MANIFEST", DEFAULT_MANIFEST_NAME),
            force_reload=_env_flag("PORTABLENET_FORCE_RELOAD", False),
            strict_resources=_env_flag("PORTABLENET_STRICT_RESOURCES", True),
            strict_manifest=_env_flag("PORTABLENET_STRICT_MANIFEST", False),
        )
        env_verbosity = os.environ.get("PORTABLENET_VERBOSITY")
        if env_verbosity is not None:
            try:
                config.verbose = max(0, min(4, int(env_verbosity)))
            except ValueError:
                pass
        return config

    def log_level(self) -> int:
        """Map `verbose` onto a stdlib logging level."""
        levels = {
            0: logging.CRITICAL + 10,
            1: logging.ERROR,
            2: logging.WARNING,
            3: logging.INFO,
            4: logging.DEBUG,
        }
        return levels[max(0, min(4, self.verbose))]
