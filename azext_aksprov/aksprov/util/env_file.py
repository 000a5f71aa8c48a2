# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

"""
env_file: per-environment key/value persistence.

Values are stored at {env_root}/{env_name}/.env, one KEY="value" entry per line.
Writing a key replaces any previous entry for the same key.
"""

import os
from pathlib import Path
from typing import Dict, Optional

from azure.cli.core.azclierror import FileOperationError, InvalidArgumentValueError
from dotenv import dotenv_values, set_key
from knack.log import get_logger

from .file_operations import normalize_dir

logger = get_logger(__name__)

DEFAULT_ENV_ROOT = ".azure"
ENV_FILE_NAME = ".env"
CONFIG_ROOT_LABEL = "aksprov"
CONFIG_ENV_ROOT_LABEL = "env_root"


def get_env_root(cli_ctx=None) -> str:
    if cli_ctx is not None:
        configured = cli_ctx.config.get(CONFIG_ROOT_LABEL, CONFIG_ENV_ROOT_LABEL, fallback=None)
        if configured:
            return configured
    return os.path.join(".", DEFAULT_ENV_ROOT)


class EnvFile:
    def __init__(self, env_name: str, env_root: Optional[str] = None):
        if not env_name or not env_name.strip():
            raise InvalidArgumentValueError("Environment name cannot be empty.")
        if os.sep in env_name or (os.altsep and os.altsep in env_name) or env_name in [".", ".."]:
            raise InvalidArgumentValueError(f"Invalid environment name '{env_name}'.")

        self.env_name = env_name
        self.env_root = env_root or get_env_root()

    @property
    def env_dir(self) -> Path:
        return Path(self.env_root).joinpath(self.env_name)

    @property
    def path(self) -> Path:
        return self.env_dir.joinpath(ENV_FILE_NAME)

    def exists(self) -> bool:
        return self.path.is_file()

    def read(self) -> Dict[str, Optional[str]]:
        if not self.exists():
            return {}
        return dict(dotenv_values(self.path, encoding="utf-8"))

    def get(self, key: str) -> Optional[str]:
        return self.read().get(key)

    def set(self, key: str, value: str, log_value: bool = True):
        if not key:
            raise InvalidArgumentValueError("Environment key cannot be empty.")
        if value is None:
            value = ""

        normalize_dir(str(self.env_dir))
        if not self.exists():
            self.path.touch()

        success, _, _ = set_key(self.path, key, _quote(str(value)), quote_mode="never", encoding="utf-8")
        if not success:
            raise FileOperationError(f"Unable to update {key} in {self.path}.")

        if log_value:
            logger.info('Updated environment file: %s="%s"', key, value)
        else:
            logger.info("Updated environment file: %s", key)

    def update(self, values: Dict[str, Optional[str]]):
        for key in values:
            if values[key] is None:
                continue
            self.set(key, values[key])


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'
