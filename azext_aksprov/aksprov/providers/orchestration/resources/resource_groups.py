# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

from typing import TYPE_CHECKING, Optional, Tuple

from azure.core.exceptions import ResourceNotFoundError as AzureResourceNotFoundError
from knack.log import get_logger

from ....util.az_client import as_dict, get_resource_client

logger = get_logger(__name__)


if TYPE_CHECKING:
    from azure.mgmt.resource.resources.operations import ResourceGroupsOperations


class ResourceGroups:
    def __init__(self, subscription_id: str):
        self.subscription_id = subscription_id
        self.resource_client = get_resource_client(subscription_id=subscription_id)
        self.ops: "ResourceGroupsOperations" = self.resource_client.resource_groups

    def show(self, resource_group_name: str) -> Optional[dict]:
        try:
            return as_dict(self.ops.get(resource_group_name=resource_group_name))
        except AzureResourceNotFoundError:
            return None

    def ensure(self, resource_group_name: str, location: str, tags: Optional[dict] = None) -> Tuple[dict, bool]:
        """
        Creates the resource group if it does not exist.
        Returns the resource group and whether it was created.
        """
        logger.info("Creating/verifying resource group: %s", resource_group_name)
        existing = self.show(resource_group_name=resource_group_name)
        if existing:
            logger.info("Resource group '%s' already exists", resource_group_name)
            return existing, False

        logger.info("Creating resource group '%s' in '%s'", resource_group_name, location)
        parameters = {"location": location}
        if tags:
            parameters["tags"] = tags
        result = as_dict(self.ops.create_or_update(resource_group_name=resource_group_name, parameters=parameters))
        logger.info("Resource group '%s' created successfully", resource_group_name)
        return result, True
