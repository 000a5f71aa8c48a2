# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

from typing import TYPE_CHECKING, List, Optional, Tuple

from azure.cli.core.azclierror import ValidationError
from azure.core.exceptions import ResourceNotFoundError as AzureResourceNotFoundError
from knack.log import get_logger

from ....util.az_client import as_dict, get_msi_mgmt_client
from ..common import WORKLOAD_IDENTITY_AUDIENCE

logger = get_logger(__name__)


if TYPE_CHECKING:
    from azure.mgmt.msi.operations import (
        FederatedIdentityCredentialsOperations,
        UserAssignedIdentitiesOperations,
    )


class ManagedIdentities:
    def __init__(self, subscription_id: str):
        self.subscription_id = subscription_id
        self.msi_mgmt_client = get_msi_mgmt_client(subscription_id=subscription_id)
        self.ops: "UserAssignedIdentitiesOperations" = self.msi_mgmt_client.user_assigned_identities
        self.federated_credentials = FederatedCredentials(self.msi_mgmt_client.federated_identity_credentials)

    def show(self, name: str, resource_group_name: str) -> Optional[dict]:
        try:
            return as_dict(self.ops.get(resource_group_name=resource_group_name, resource_name=name))
        except AzureResourceNotFoundError:
            return None

    def ensure(
        self, name: str, resource_group_name: str, location: Optional[str] = None, tags: Optional[dict] = None
    ) -> Tuple[dict, bool]:
        logger.info("Creating/verifying managed identity: %s", name)
        existing = self.show(name=name, resource_group_name=resource_group_name)
        if existing:
            logger.info("Managed identity '%s' already exists", name)
            return existing, False

        if not location:
            raise ValidationError(f"A location is required to create managed identity '{name}'.")

        logger.info("Creating managed identity '%s'", name)
        parameters = {"location": location}
        if tags:
            parameters["tags"] = tags
        result = as_dict(
            self.ops.create_or_update(
                resource_group_name=resource_group_name, resource_name=name, parameters=parameters
            )
        )
        logger.info("Managed identity '%s' created successfully", name)
        return result, True

    @classmethod
    def get_client_id(cls, identity: dict) -> str:
        client_id = (identity or {}).get("client_id")
        if not client_id:
            raise ValidationError(f"Failed to read the client Id of managed identity '{(identity or {}).get('name')}'.")
        return client_id


class FederatedCredentials:
    def __init__(self, ops: "FederatedIdentityCredentialsOperations"):
        self.ops = ops

    def show(self, name: str, identity_name: str, resource_group_name: str) -> Optional[dict]:
        try:
            return as_dict(
                self.ops.get(
                    resource_group_name=resource_group_name,
                    resource_name=identity_name,
                    federated_identity_credential_resource_name=name,
                )
            )
        except AzureResourceNotFoundError:
            return None

    def ensure(
        self,
        name: str,
        identity_name: str,
        resource_group_name: str,
        issuer: str,
        subject: str,
        audiences: Optional[List[str]] = None,
    ) -> Tuple[dict, bool]:
        """
        Creates the federated identity credential if it does not exist.
        An existing credential bound to a different issuer or subject is updated in place.
        """
        audiences = audiences or [WORKLOAD_IDENTITY_AUDIENCE]
        logger.info("Creating/verifying federated identity credential: %s", name)
        existing = self.show(name=name, identity_name=identity_name, resource_group_name=resource_group_name)
        if existing:
            if existing.get("issuer") == issuer and existing.get("subject") == subject:
                logger.info("Federated identity credential '%s' already exists", name)
                return existing, False
            logger.info("Federated identity credential '%s' exists with a different binding, updating", name)

        result = as_dict(
            self.ops.create_or_update(
                resource_group_name=resource_group_name,
                resource_name=identity_name,
                federated_identity_credential_resource_name=name,
                parameters={"issuer": issuer, "subject": subject, "audiences": audiences},
            )
        )
        logger.info("Federated identity credential '%s' applied successfully", name)
        return result, True
