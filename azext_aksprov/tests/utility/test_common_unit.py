# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

import os

import pytest

from azext_aksprov.aksprov.util.common import (
    is_env_flag_enabled,
    mask_value,
    to_alnum_lower,
    to_k8s_name,
    url_safe_hash_phrase,
)


class TestCliInit(object):
    def test_package_init(self):
        from azext_aksprov.constants import EXTENSION_ROOT

        tests_root = "tests"
        directory_structure = {}

        def _validate_directory(path):
            for entry in os.scandir(path):
                if entry.is_dir(follow_symlinks=False) and all(
                    [not entry.name.startswith("__"), tests_root not in entry.path]
                ):
                    directory_structure[entry.path] = None
                    _validate_directory(entry.path)
                else:
                    if entry.path.endswith("__init__.py"):
                        directory_structure[os.path.dirname(entry.path)] = entry.path

        _validate_directory(EXTENSION_ROOT)

        invalid_directories = []
        for directory in directory_structure:
            if directory_structure[directory] is None:
                invalid_directories.append("Directory: '{}' missing __init__.py".format(directory))

        if invalid_directories:
            pytest.fail(", ".join(invalid_directories))


class TestFileHeaders(object):
    def test_file_headers(self):
        from azext_aksprov.constants import EXTENSION_ROOT

        header = """# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------"""

        files_missing_header = []

        def _validate_directory(path):
            for entry in os.scandir(path):
                if entry.is_dir(follow_symlinks=False):
                    _validate_directory(entry.path)
                else:
                    if entry.is_file() and entry.path.endswith(".py"):
                        contents = None
                        with open(entry.path, "rt", encoding="utf-8") as f:
                            contents = f.read()
                        if contents and not contents.startswith(header):
                            files_missing_header.append(entry.path)

        _validate_directory(EXTENSION_ROOT)
        if files_missing_header:
            pytest.fail(
                "The following files are missing an encoding and license header, or it is improperly formatted:\n"
                "{}".format("\n".join(files_missing_header))
            )


@pytest.mark.parametrize(
    "value, expected",
    [
        ("true", True),
        ("True", True),
        ("1", True),
        ("y", True),
        ("false", False),
        ("0", False),
        ("anything", False),
        (None, False),
    ],
)
def test_is_env_flag_enabled(monkeypatch, value, expected):
    flag_key = "AKSPROV_TEST_FLAG"
    if value is None:
        monkeypatch.delenv(flag_key, raising=False)
    else:
        monkeypatch.setenv(flag_key, value)
    assert is_env_flag_enabled(flag_key) is expected


@pytest.mark.parametrize(
    "value, visible, expected",
    [
        (None, 8, None),
        ("", 8, ""),
        ("short", 8, "short"),
        ("00000000-0000-0000-0000-000000000000", 8, "00000000..."),
        ("abcdef", 3, "abc..."),
    ],
)
def test_mask_value(value, visible, expected):
    assert mask_value(value, visible=visible) == expected


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, None),
        ("", ""),
        ("My_Cluster", "my-cluster"),
        ("already-valid", "already-valid"),
    ],
)
def test_to_k8s_name(value, expected):
    assert to_k8s_name(value) == expected


def test_to_alnum_lower():
    assert to_alnum_lower("Dev-Env_01") == "devenv01"
    assert to_alnum_lower("---") == ""


def test_url_safe_hash_phrase():
    digest = url_safe_hash_phrase("phrase")
    assert len(digest) == 64
    assert digest == url_safe_hash_phrase("phrase")
    assert digest != url_safe_hash_phrase("Phrase")
