# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

import pytest

ORCHESTRATION_PATH = "azext_aksprov.aksprov.providers.orchestration"
WORK_PATH = f"{ORCHESTRATION_PATH}.work"


@pytest.fixture
def mocked_get_resource_client(mocker):
    patched = mocker.patch(f"{WORK_PATH}.get_resource_client", autospec=True)
    yield patched


@pytest.fixture
def mocked_permission_manager(mocker):
    patched = mocker.patch(f"{WORK_PATH}.PermissionManager", autospec=True)
    yield patched


@pytest.fixture
def mocked_resources(mocker):
    yield {
        "resource_groups": mocker.patch(f"{WORK_PATH}.ResourceGroups", autospec=True).return_value,
        "ssh_public_keys": mocker.patch(f"{WORK_PATH}.SshPublicKeys", autospec=True).return_value,
        # federated_credentials is an instance attribute
        "identities": mocker.patch(f"{WORK_PATH}.ManagedIdentities").return_value,
        "clusters": mocker.patch(f"{WORK_PATH}.ManagedClusters", autospec=True).return_value,
        "storage_accounts": mocker.patch(f"{WORK_PATH}.StorageAccounts", autospec=True).return_value,
    }


@pytest.fixture
def mocked_ensure_local_ssh_key(mocker):
    patched = mocker.patch(f"{WORK_PATH}.ensure_local_ssh_key", autospec=True)
    yield patched


@pytest.fixture
def mocked_pre_flight(mocker):
    yield {
        "verify_cli_client_connections": mocker.patch(
            f"{ORCHESTRATION_PATH}.host.verify_cli_client_connections", autospec=True
        ),
        "verify_azure_login": mocker.patch(f"{ORCHESTRATION_PATH}.host.verify_azure_login", autospec=True),
        "register_providers": mocker.patch(f"{ORCHESTRATION_PATH}.rp_namespace.register_providers", autospec=True),
        "verify_write_permission_against_rg": mocker.patch(
            f"{ORCHESTRATION_PATH}.permissions.verify_write_permission_against_rg", autospec=True
        ),
    }


@pytest.fixture
def mocked_k8s(mocker):
    yield {
        "load_kubeconfig": mocker.patch(f"{WORK_PATH}.load_kubeconfig", autospec=True),
        "verify_cluster_connectivity": mocker.patch(
            f"{WORK_PATH}.verify_cluster_connectivity", autospec=True, return_value=True
        ),
        "apply_namespaced_service_account": mocker.patch(
            f"{WORK_PATH}.apply_namespaced_service_account", autospec=True
        ),
        "apply_storage_class": mocker.patch(f"{WORK_PATH}.apply_storage_class", autospec=True),
        "apply_namespaced_pvc": mocker.patch(f"{WORK_PATH}.apply_namespaced_pvc", autospec=True),
        "create_namespaced_secret": mocker.patch(f"{WORK_PATH}.create_namespaced_secret", autospec=True),
    }


@pytest.fixture
def mocked_wait_for_terminal_state(mocker):
    patched = mocker.patch(f"{WORK_PATH}.wait_for_terminal_state", autospec=True)
    yield patched


@pytest.fixture
def mocked_sleep(mocker):
    patched = {
        "az_client.sleep": mocker.patch("azext_aksprov.aksprov.util.az_client.sleep", autospec=True),
        "work.sleep": mocker.patch(f"{WORK_PATH}.sleep", autospec=True),
    }
    yield patched


@pytest.fixture
def spy_work_displays(mocker):
    from azext_aksprov.aksprov.providers.orchestration.work import WorkManager

    yield {
        "render_display": mocker.spy(WorkManager, "_render_display"),
        "complete_step": mocker.spy(WorkManager, "_complete_step"),
    }


@pytest.fixture
def mocked_logger(mocker):
    patched = mocker.patch(f"{WORK_PATH}.logger", autospec=True)
    yield patched
