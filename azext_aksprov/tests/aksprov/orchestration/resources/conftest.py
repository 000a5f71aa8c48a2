# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

import pytest

RESOURCES_PATH = "azext_aksprov.aksprov.providers.orchestration.resources"


@pytest.fixture
def mocked_resource_client(mocker):
    patched = mocker.patch(f"{RESOURCES_PATH}.resource_groups.get_resource_client", autospec=True)
    yield patched.return_value


@pytest.fixture
def mocked_compute_client(mocker):
    patched = mocker.patch(f"{RESOURCES_PATH}.ssh_keys.get_compute_mgmt_client", autospec=True)
    yield patched.return_value


@pytest.fixture
def mocked_msi_client(mocker):
    patched = mocker.patch(f"{RESOURCES_PATH}.identities.get_msi_mgmt_client", autospec=True)
    yield patched.return_value


@pytest.fixture
def mocked_aks_client(mocker):
    patched = mocker.patch(f"{RESOURCES_PATH}.clusters.get_aks_mgmt_client", autospec=True)
    yield patched.return_value


@pytest.fixture
def mocked_storage_client(mocker):
    patched = mocker.patch(f"{RESOURCES_PATH}.storage.get_storage_mgmt_client", autospec=True)
    yield patched.return_value


def get_not_found_error():
    from azure.core.exceptions import ResourceNotFoundError

    return ResourceNotFoundError("Resource not found.")
