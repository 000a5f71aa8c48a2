# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

from typing import Dict, Optional

from azure.cli.core.azclierror import FileOperationError

from .util import EnvFile, get_env_root


def show_env(cmd, env_name: str) -> Dict[str, Optional[str]]:
    env_file = EnvFile(env_name=env_name, env_root=get_env_root(cmd.cli_ctx))
    if not env_file.exists():
        raise FileOperationError(f"Environment file {env_file.path} does not exist.")
    return env_file.read()
