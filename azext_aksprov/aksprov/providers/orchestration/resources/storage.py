# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

from typing import TYPE_CHECKING

from azure.cli.core.azclierror import ResourceNotFoundError
from azure.core.exceptions import ResourceNotFoundError as AzureResourceNotFoundError

from ....util.az_client import as_dict, get_storage_mgmt_client

if TYPE_CHECKING:
    from azure.mgmt.storage.operations import StorageAccountsOperations


class StorageAccounts:
    def __init__(self, subscription_id: str):
        self.subscription_id = subscription_id
        self.storage_mgmt_client = get_storage_mgmt_client(subscription_id=subscription_id)
        self.ops: "StorageAccountsOperations" = self.storage_mgmt_client.storage_accounts

    def show(self, name: str, resource_group_name: str) -> dict:
        try:
            return as_dict(self.ops.get_properties(resource_group_name=resource_group_name, account_name=name))
        except AzureResourceNotFoundError:
            raise ResourceNotFoundError(
                f"Storage account '{name}' not found in resource group '{resource_group_name}'."
            )

    def get_primary_key(self, name: str, resource_group_name: str) -> str:
        try:
            result = as_dict(self.ops.list_keys(resource_group_name=resource_group_name, account_name=name))
        except AzureResourceNotFoundError:
            raise ResourceNotFoundError(
                f"Storage account '{name}' not found in resource group '{resource_group_name}'."
            )
        keys = (result or {}).get("keys") or []
        if not keys or not keys[0].get("value"):
            raise ResourceNotFoundError(f"No access keys were returned for storage account '{name}'.")
        return keys[0]["value"]
