# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

"""
common: Defines common utility functions and components.

"""

import logging
from typing import Optional

from knack.log import get_logger

logger = get_logger(__name__)


def get_timestamp_now_utc(format: str = "%Y-%m-%dT%H:%M:%S") -> str:
    from datetime import datetime, timezone

    timestamp = datetime.now(timezone.utc).strftime(format)
    return timestamp


def set_log_level(log_name: str, log_level: int = logging.DEBUG):
    lgr = logging.getLogger(log_name)
    lgr.setLevel(log_level)


def url_safe_hash_phrase(phrase: str) -> str:
    from hashlib import sha256

    return sha256(phrase.encode("utf8")).hexdigest()


def ensure_azure_namespace_path():
    """
    Run prior to importing azure namespace packages (azure.*) to ensure the
    extension root path is configured for package import.
    """

    import os
    import sys

    from azure.cli.core.extension import get_extension_path

    from ...constants import EXTENSION_NAME

    ext_path = get_extension_path(EXTENSION_NAME)
    if not ext_path:
        return

    ext_azure_dir = os.path.join(ext_path, "azure")
    if os.path.isdir(ext_azure_dir):
        import azure

        if getattr(azure, "__path__", None) and ext_azure_dir not in azure.__path__:  # _NamespacePath /w PEP420
            if isinstance(azure.__path__, list):
                azure.__path__.insert(0, ext_azure_dir)
            else:
                azure.__path__.append(ext_azure_dir)

    if sys.path and sys.path[0] != ext_path:
        sys.path.insert(0, ext_path)


def is_env_flag_enabled(env_flag_key: str) -> bool:
    from os import getenv

    return getenv(env_flag_key, "false").lower() in ["true", "1", "y"]


def mask_value(value: Optional[str], visible: int = 8) -> Optional[str]:
    """
    Shortens a sensitive value such as a subscription or client Id for display.
    """
    if not value:
        return value
    if len(value) <= visible:
        return value
    return f"{value[:visible]}..."


def to_k8s_name(name: Optional[str]) -> Optional[str]:
    if not name:
        return name
    sanitized = str(name)
    sanitized = sanitized.lower()
    sanitized = sanitized.replace("_", "-")
    return sanitized


def to_alnum_lower(value: str) -> str:
    return "".join(c for c in value.lower() if c.isalnum())
