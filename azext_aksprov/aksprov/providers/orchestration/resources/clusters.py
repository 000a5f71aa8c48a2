# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

from typing import TYPE_CHECKING

from azure.cli.core.azclierror import ResourceNotFoundError, ValidationError
from azure.core.exceptions import ResourceNotFoundError as AzureResourceNotFoundError
from knack.log import get_logger

from ....util.az_client import as_dict, get_aks_mgmt_client

logger = get_logger(__name__)


if TYPE_CHECKING:
    from azure.mgmt.containerservice.operations import ManagedClustersOperations


class ManagedClusters:
    def __init__(self, subscription_id: str):
        self.subscription_id = subscription_id
        self.aks_mgmt_client = get_aks_mgmt_client(subscription_id=subscription_id)
        self.ops: "ManagedClustersOperations" = self.aks_mgmt_client.managed_clusters

    def show(self, name: str, resource_group_name: str) -> dict:
        try:
            return as_dict(self.ops.get(resource_group_name=resource_group_name, resource_name=name))
        except AzureResourceNotFoundError:
            raise ResourceNotFoundError(f"AKS cluster '{name}' not found in resource group '{resource_group_name}'.")

    def get_oidc_issuer(self, name: str, resource_group_name: str) -> str:
        cluster = self.show(name=name, resource_group_name=resource_group_name)
        issuer = (cluster.get("oidc_issuer_profile") or {}).get("issuer_url")
        if not issuer:
            raise ValidationError(
                f"AKS cluster '{name}' does not expose an OIDC issuer. Enable it with --enable-oidc-issuer."
            )
        return issuer

    def get_node_resource_group(self, name: str, resource_group_name: str) -> str:
        cluster = self.show(name=name, resource_group_name=resource_group_name)
        node_resource_group = cluster.get("node_resource_group")
        if not node_resource_group:
            raise ValidationError(f"Unable to determine the node resource group of AKS cluster '{name}'.")
        return node_resource_group

    def get_user_kubeconfig(self, name: str, resource_group_name: str) -> bytes:
        logger.info("Getting AKS credentials for cluster: %s", name)
        credentials = self.ops.list_cluster_user_credentials(
            resource_group_name=resource_group_name, resource_name=name
        )
        kubeconfigs = getattr(credentials, "kubeconfigs", None) or []
        if not kubeconfigs or not kubeconfigs[0].value:
            raise ResourceNotFoundError(f"No user credentials were returned for AKS cluster '{name}'.")
        return bytes(kubeconfigs[0].value)
