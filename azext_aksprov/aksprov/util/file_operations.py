# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

import json
import os
from pathlib import Path, PurePath
from typing import Any, Callable, Optional, Union

import yaml
from azure.cli.core.azclierror import FileOperationError
from knack.log import get_logger

logger = get_logger(__name__)


def normalize_dir(dir_path: Optional[str] = None) -> PurePath:
    if not dir_path:
        dir_path = "."
    if "~" in dir_path:
        dir_path = os.path.expanduser(dir_path)
    dir_path = os.path.abspath(dir_path)
    dir_pure_path = PurePath(dir_path)
    if not os.path.exists(str(dir_pure_path)):
        os.makedirs(dir_pure_path, exist_ok=True)

    return dir_pure_path


def resolve_file_path(file_path: str) -> Path:
    return Path(os.path.abspath(os.path.expanduser(file_path)))


def read_file_content(file_path: str, read_as_binary: bool = False) -> Union[bytes, str]:
    logger.debug("Processing %s", file_path)
    pure_path = resolve_file_path(file_path)

    if not pure_path.exists():
        raise FileOperationError(f"{file_path} does not exist.")

    if not pure_path.is_file():
        raise FileOperationError(f"{file_path} is not a file.")

    if read_as_binary:
        logger.debug("Reading %s as binary", file_path)
        return pure_path.read_bytes()

    # Try with 'utf-8-sig' first, so that BOM in WinOS won't cause trouble.
    for encoding in ["utf-8-sig", "utf-8"]:
        try:
            logger.debug("Reading %s as %s", file_path, encoding)
            return pure_path.read_text(encoding=encoding)
        except (UnicodeError, UnicodeDecodeError):
            pass

    raise FileOperationError(f"Failed to decode file {file_path}.")


def write_file_content(file_path: str, content: Union[bytes, str], mode: Optional[int] = None) -> Path:
    """
    Writes content to file_path, creating parent directories as needed.
    When mode is provided the file is created with that mode and restricted before any content is written.
    A file that fails to write is removed.
    """
    pure_path = resolve_file_path(file_path)
    normalize_dir(str(pure_path.parent))
    if isinstance(content, str):
        content = content.encode("utf-8")

    flags = os.O_WRONLY | os.O_CREAT | os.O_TRUNC | getattr(os, "O_BINARY", 0)
    try:
        fd = os.open(pure_path, flags, 0o666 if mode is None else mode)
    except OSError as e:
        raise FileOperationError(f"Unable to write {file_path}: {e}")

    try:
        with os.fdopen(fd, "wb") as f:
            # an existing file keeps its previous mode through O_TRUNC
            if mode is not None:
                os.chmod(pure_path, mode)
            f.write(content)
    except OSError as e:
        pure_path.unlink(missing_ok=True)
        raise FileOperationError(f"Unable to write {file_path}: {e}")

    logger.debug("Wrote %s", pure_path)
    return pure_path


def deserialize_file_content(file_path: str) -> Any:
    extension = file_path.split(".")[-1]
    valid_extension = extension in ["json", "yaml", "yml"]
    content = read_file_content(file_path)
    result = None
    if not valid_extension or extension == "json":
        # will always be a list or dict
        result = _try_loading_as(
            loader=json.loads, content=content, error_type=json.JSONDecodeError, raise_error=valid_extension
        )
    if (not result and not valid_extension) or extension in ["yaml", "yml"]:
        # can be list, dict, str, int, bool, none
        result = _try_loading_as(
            loader=yaml.safe_load, content=content, error_type=yaml.YAMLError, raise_error=valid_extension
        )
    if result is not None or valid_extension:
        return result
    raise FileOperationError(f"File contents for {file_path} cannot be read.")


def _try_loading_as(loader: Callable, content: str, error_type: Exception, raise_error: bool = True) -> Optional[Any]:
    try:
        return loader(content)
    except error_type as e:
        if raise_error:
            raise FileOperationError(e)
