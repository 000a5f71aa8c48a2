# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

import sys

import pytest
import responses


@pytest.fixture
def mocked_get_subscription_id(mocker):
    from .generators import get_zeroed_subscription

    patched = mocker.patch("azure.cli.core.commands.client_factory.get_subscription_id", autospec=True)
    patched.return_value = get_zeroed_subscription()
    yield patched


@pytest.fixture
def mocked_azcli_cred_get_token(mocker):
    from unittest.mock import PropertyMock

    patched = mocker.patch(
        "azure.identity._credentials.azure_cli.AzureCliCredential.get_token",
    )
    type(patched()).expires_on = PropertyMock(return_value=sys.maxsize)
    type(patched()).refresh_on = PropertyMock(return_value=sys.maxsize)
    yield patched


@pytest.fixture
def mocked_cmd(mocker, mocked_get_subscription_id, mocked_azcli_cred_get_token, tmp_path):
    class Stub:
        pass

    cloud = Stub()
    cloud.endpoints = Stub()
    cloud.endpoints.resource_manager = "https://management.azure.com/"
    cloud.endpoints.active_directory = "https://login.microsoftonline.com/"
    cloud.endpoints.active_directory_resource_id = "https://management.azure.com/"

    az_cli_mock = mocker.patch("azure.cli.core.AzCli", autospec=True, **{"data": {"command": "az"}, "cloud": cloud})
    # environment files land in a per-test directory
    az_cli_mock.config = mocker.Mock()
    az_cli_mock.config.get.return_value = str(tmp_path.joinpath(".azure"))
    config = {"cli_ctx": az_cli_mock}
    patched = mocker.patch("azure.cli.core.commands.AzCliCommand", autospec=True, **config)
    yield patched


@pytest.fixture
def mocked_responses():
    with responses.RequestsMock() as rsps:
        yield rsps


@pytest.fixture
def env_root(tmp_path):
    yield str(tmp_path.joinpath(".azure"))
