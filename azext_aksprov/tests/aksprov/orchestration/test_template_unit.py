# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

from typing import List

from azext_aksprov.aksprov.providers.orchestration.common import (
    STORAGE_FILE_DATA_SMB_SHARE_CONTRIBUTOR_ROLE_ID,
)
from azext_aksprov.aksprov.providers.orchestration.template import (
    TEMPLATE_BLUEPRINT_INFRA,
    TemplateBlueprint,
)

from ...generators import generate_random_string

EXPECTED_OUTPUTS = frozenset(
    [
        "clusterName",
        "oidcIssuerUrl",
        "nodeResourceGroup",
        "storageAccountName",
        "fileShareName",
        "identityName",
        "identityClientId",
        "identityPrincipalId",
    ]
)


def _get_resources_of_type(type_name: str) -> List[dict]:
    resources = TEMPLATE_BLUEPRINT_INFRA.content["resources"]
    return [resources[key] for key in resources if resources[key]["type"] == type_name]


def test_infra_template_blueprint():
    assert TEMPLATE_BLUEPRINT_INFRA.template_id
    assert set(TEMPLATE_BLUEPRINT_INFRA.content["outputs"]) == EXPECTED_OUTPUTS
    for param in ["clusterName", "identityName", "storageAccountName", "sshPublicKey"]:
        assert "defaultValue" not in TEMPLATE_BLUEPRINT_INFRA.parameters[param]

    clusters = _get_resources_of_type("Microsoft.ContainerService/managedClusters")
    assert len(clusters) == 1
    cluster = clusters[0]
    assert cluster["properties"]["oidcIssuerProfile"] == {"enabled": True}
    assert cluster["properties"]["securityProfile"] == {"workloadIdentity": {"enabled": True}}
    assert cluster["properties"]["storageProfile"]["fileCSIDriver"] == {"enabled": True}
    assert cluster["properties"]["linuxProfile"]["ssh"]["publicKeys"] == [
        {"keyData": "[parameters('sshPublicKey')]"}
    ]

    role_assignment = TEMPLATE_BLUEPRINT_INFRA.content["resources"]["storageRoleAssignment"]
    assert role_assignment["type"] == "Microsoft.Authorization/roleAssignments"
    assert (
        TEMPLATE_BLUEPRINT_INFRA.content["variables"]["STORAGE_FILE_DATA_SMB_SHARE_CONTRIBUTOR"]
        == STORAGE_FILE_DATA_SMB_SHARE_CONTRIBUTOR_ROLE_ID
    )

    shares = _get_resources_of_type("Microsoft.Storage/storageAccounts/fileServices/shares")
    assert shares[0]["properties"]["enabledProtocols"] == "SMB"
    assert len(_get_resources_of_type("Microsoft.ManagedIdentity/userAssignedIdentities")) == 1


def test_template_blueprint_copy():
    template_copy = TEMPLATE_BLUEPRINT_INFRA.copy()
    assert isinstance(template_copy, TemplateBlueprint)
    assert template_copy.content == TEMPLATE_BLUEPRINT_INFRA.content

    resource_key = generate_random_string()
    template_copy.content["resources"][resource_key] = {"type": "Microsoft.Test/resources"}
    template_copy.parameters["clusterName"]["defaultValue"] = generate_random_string()

    assert resource_key not in TEMPLATE_BLUEPRINT_INFRA.content["resources"]
    assert "defaultValue" not in TEMPLATE_BLUEPRINT_INFRA.parameters["clusterName"]
