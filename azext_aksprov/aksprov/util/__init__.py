# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

from .common import (
    get_timestamp_now_utc,
    is_env_flag_enabled,
    mask_value,
    set_log_level,
    to_alnum_lower,
    to_k8s_name,
    url_safe_hash_phrase,
)
from .env_file import EnvFile, get_env_root
from .file_operations import (
    deserialize_file_content,
    normalize_dir,
    read_file_content,
    write_file_content,
)
from .keys import generate_ssh_key_pair, is_ssh_public_key

__all__ = [
    "EnvFile",
    "deserialize_file_content",
    "generate_ssh_key_pair",
    "get_env_root",
    "get_timestamp_now_utc",
    "is_env_flag_enabled",
    "is_ssh_public_key",
    "mask_value",
    "normalize_dir",
    "read_file_content",
    "set_log_level",
    "to_alnum_lower",
    "to_k8s_name",
    "url_safe_hash_phrase",
    "write_file_content",
]
