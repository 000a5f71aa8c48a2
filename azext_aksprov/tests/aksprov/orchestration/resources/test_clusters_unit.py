# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

import pytest
from azure.cli.core.azclierror import ResourceNotFoundError, ValidationError

from azext_aksprov.aksprov.providers.orchestration.resources import ManagedClusters

from ....generators import generate_random_string, get_zeroed_subscription
from .conftest import get_not_found_error


def get_mock_cluster(name: str, issuer_url: str = None, node_resource_group: str = None) -> dict:
    cluster = {"name": name, "location": "eastus", "provisioning_state": "Succeeded"}
    if issuer_url:
        cluster["oidc_issuer_profile"] = {"enabled": True, "issuer_url": issuer_url}
    if node_resource_group:
        cluster["node_resource_group"] = node_resource_group
    return cluster


def test_cluster_show(mocked_aks_client):
    name = generate_random_string()
    resource_group_name = generate_random_string()
    mock_cluster = get_mock_cluster(name)
    mocked_aks_client.managed_clusters.get.return_value = mock_cluster

    clusters = ManagedClusters(subscription_id=get_zeroed_subscription())
    assert clusters.show(name=name, resource_group_name=resource_group_name) == mock_cluster
    mocked_aks_client.managed_clusters.get.assert_called_once_with(
        resource_group_name=resource_group_name, resource_name=name
    )

    mocked_aks_client.managed_clusters.get.side_effect = get_not_found_error()
    with pytest.raises(ResourceNotFoundError, match=f"AKS cluster '{name}' not found"):
        clusters.show(name=name, resource_group_name=resource_group_name)


def test_cluster_get_oidc_issuer(mocked_aks_client):
    name = generate_random_string()
    issuer_url = f"https://eastus.oic.prod-aks.azure.com/{generate_random_string()}/"
    mocked_aks_client.managed_clusters.get.return_value = get_mock_cluster(name, issuer_url=issuer_url)

    clusters = ManagedClusters(subscription_id=get_zeroed_subscription())
    assert clusters.get_oidc_issuer(name=name, resource_group_name=generate_random_string()) == issuer_url

    mocked_aks_client.managed_clusters.get.return_value = get_mock_cluster(name)
    with pytest.raises(ValidationError, match="does not expose an OIDC issuer"):
        clusters.get_oidc_issuer(name=name, resource_group_name=generate_random_string())


def test_cluster_get_node_resource_group(mocked_aks_client):
    name = generate_random_string()
    node_resource_group = f"MC_{generate_random_string()}"
    mocked_aks_client.managed_clusters.get.return_value = get_mock_cluster(
        name, node_resource_group=node_resource_group
    )

    clusters = ManagedClusters(subscription_id=get_zeroed_subscription())
    assert clusters.get_node_resource_group(name=name, resource_group_name=generate_random_string()) == (
        node_resource_group
    )

    mocked_aks_client.managed_clusters.get.return_value = get_mock_cluster(name)
    with pytest.raises(ValidationError):
        clusters.get_node_resource_group(name=name, resource_group_name=generate_random_string())


def test_cluster_get_user_kubeconfig(mocker, mocked_aks_client):
    name = generate_random_string()
    resource_group_name = generate_random_string()
    kubeconfig = b"apiVersion: v1\nkind: Config\n"
    credential_result = mocker.Mock(kubeconfigs=[mocker.Mock(value=bytearray(kubeconfig))])
    mocked_aks_client.managed_clusters.list_cluster_user_credentials.return_value = credential_result

    clusters = ManagedClusters(subscription_id=get_zeroed_subscription())
    assert clusters.get_user_kubeconfig(name=name, resource_group_name=resource_group_name) == kubeconfig
    mocked_aks_client.managed_clusters.list_cluster_user_credentials.assert_called_once_with(
        resource_group_name=resource_group_name, resource_name=name
    )

    credential_result.kubeconfigs = []
    with pytest.raises(ResourceNotFoundError):
        clusters.get_user_kubeconfig(name=name, resource_group_name=resource_group_name)
