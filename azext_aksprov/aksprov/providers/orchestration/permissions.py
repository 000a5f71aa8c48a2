# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

from typing import Iterable, Optional
from uuid import uuid4

from azure.cli.core.azclierror import ValidationError
from knack.log import get_logger

from ...util.az_client import as_dict, get_authz_client
from .common import PrincipalType

logger = get_logger(__name__)

VALID_PERM_FORMS = frozenset(
    ["*", "*/write", "microsoft.authorization/roleassignments/write", "microsoft.authorization/*/write"]
)


def verify_write_permission_against_rg(subscription_id: str, resource_group_name: str):
    for permission in get_principal_permissions_for_group(
        subscription_id=subscription_id, resource_group_name=resource_group_name
    ):
        permission = as_dict(permission)
        action_result = False
        negate_action_result = False

        for action in permission.get("actions", []):
            if action.lower() in VALID_PERM_FORMS:
                action_result = True
                break

        for not_action in permission.get("not_actions", []):
            if not_action.lower() in VALID_PERM_FORMS:
                negate_action_result = True
                break

        if action_result and not negate_action_result:
            return

    raise ValidationError(
        "The infrastructure deployment assigns a storage role to the workload managed identity which requires\n"
        "the logged-in principal to have permission to write role assignments "
        "(Microsoft.Authorization/roleAssignments/write) against the resource group.\n"
    )


def get_principal_permissions_for_group(subscription_id: str, resource_group_name: str) -> Iterable:
    authz_client = get_authz_client(subscription_id=subscription_id)
    return authz_client.permissions.list_for_resource_group(resource_group_name)


class PermissionManager:
    def __init__(self, subscription_id: str):
        self.authz_client = get_authz_client(
            subscription_id=subscription_id,
        )

    def apply_role_assignment(
        self,
        scope: str,
        principal_id: str,
        role_def_id: str,
        principal_type: str = PrincipalType.SERVICE_PRINCIPAL.value,
    ) -> Optional[dict]:
        role_assignments_iter = self.authz_client.role_assignments.list_for_scope(
            scope=scope, filter=f"principalId eq '{principal_id}'"
        )
        for role_assignment in role_assignments_iter:
            if as_dict(role_assignment).get("role_definition_id", "").lower() == role_def_id.lower():
                logger.debug("Role assignment for principal %s against %s already exists.", principal_id, scope)
                return

        logger.debug("Creating role assignment for principal %s against %s.", principal_id, scope)
        return as_dict(
            self.authz_client.role_assignments.create(
                scope=scope,
                role_assignment_name=str(uuid4()),
                parameters={
                    "role_definition_id": role_def_id,
                    "principal_id": principal_id,
                    "principal_type": principal_type,
                },
            )
        )
