# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

from copy import deepcopy
from typing import Dict, NamedTuple

from .common import (
    DEFAULT_ADMIN_USERNAME,
    DEFAULT_FILE_SHARE_NAME,
    DEFAULT_FILE_SHARE_QUOTA_GIB,
    DEFAULT_NODE_COUNT,
    DEFAULT_NODE_VM_SIZE,
    STORAGE_FILE_DATA_SMB_SHARE_CONTRIBUTOR_ROLE_ID,
)


class TemplateBlueprint(NamedTuple):
    template_id: str
    content: Dict[str, Dict[str, dict]]

    @property
    def parameters(self) -> dict:
        return self.content["parameters"]

    def copy(self) -> "TemplateBlueprint":
        return TemplateBlueprint(
            template_id=self.template_id,
            content=deepcopy(self.content),
        )


TEMPLATE_BLUEPRINT_INFRA = TemplateBlueprint(
    template_id="aksprov.infra.v1",
    content={
        "$schema": "https://schema.management.azure.com/schemas/2019-04-01/deploymentTemplate.json#",
        "languageVersion": "2.0",
        "contentVersion": "1.0.0.0",
        "parameters": {
            "location": {"type": "string", "defaultValue": "[resourceGroup().location]"},
            "clusterName": {"type": "string"},
            "identityName": {"type": "string"},
            "storageAccountName": {"type": "string", "minLength": 3, "maxLength": 24},
            "fileShareName": {"type": "string", "defaultValue": DEFAULT_FILE_SHARE_NAME},
            "fileShareQuotaGiB": {
                "type": "int",
                "defaultValue": DEFAULT_FILE_SHARE_QUOTA_GIB,
                "minValue": 1,
                "maxValue": 102400,
            },
            "sshPublicKey": {"type": "string"},
            "adminUsername": {"type": "string", "defaultValue": DEFAULT_ADMIN_USERNAME},
            "nodeCount": {"type": "int", "defaultValue": DEFAULT_NODE_COUNT, "minValue": 1, "maxValue": 100},
            "nodeVmSize": {"type": "string", "defaultValue": DEFAULT_NODE_VM_SIZE},
            "kubernetesVersion": {"type": "string", "defaultValue": ""},
            "tags": {"type": "object", "defaultValue": {}},
        },
        "variables": {
            "STORAGE_FILE_DATA_SMB_SHARE_CONTRIBUTOR": STORAGE_FILE_DATA_SMB_SHARE_CONTRIBUTOR_ROLE_ID,
            "VERSIONS": {
                "identity": "2023-01-31",
                "storage": "2023-01-01",
                "cluster": "2024-02-01",
                "roleAssignment": "2022-04-01",
            },
        },
        "resources": {
            "identity": {
                "type": "Microsoft.ManagedIdentity/userAssignedIdentities",
                "apiVersion": "2023-01-31",
                "name": "[parameters('identityName')]",
                "location": "[parameters('location')]",
                "tags": "[parameters('tags')]",
            },
            "storageAccount": {
                "type": "Microsoft.Storage/storageAccounts",
                "apiVersion": "2023-01-01",
                "name": "[parameters('storageAccountName')]",
                "location": "[parameters('location')]",
                "tags": "[parameters('tags')]",
                "kind": "StorageV2",
                "sku": {"name": "Standard_LRS"},
                "properties": {
                    "minimumTlsVersion": "TLS1_2",
                    "supportsHttpsTrafficOnly": True,
                    "allowBlobPublicAccess": False,
                },
            },
            "fileService": {
                "type": "Microsoft.Storage/storageAccounts/fileServices",
                "apiVersion": "2023-01-01",
                "name": "[format('{0}/{1}', parameters('storageAccountName'), 'default')]",
                "dependsOn": ["storageAccount"],
            },
            "fileShare": {
                "type": "Microsoft.Storage/storageAccounts/fileServices/shares",
                "apiVersion": "2023-01-01",
                "name": "[format('{0}/{1}/{2}', parameters('storageAccountName'), 'default', "
                "parameters('fileShareName'))]",
                "properties": {"shareQuota": "[parameters('fileShareQuotaGiB')]", "enabledProtocols": "SMB"},
                "dependsOn": ["fileService"],
            },
            "cluster": {
                "type": "Microsoft.ContainerService/managedClusters",
                "apiVersion": "2024-02-01",
                "name": "[parameters('clusterName')]",
                "location": "[parameters('location')]",
                "tags": "[parameters('tags')]",
                "identity": {"type": "SystemAssigned"},
                "properties": {
                    "dnsPrefix": "[format('{0}-dns', parameters('clusterName'))]",
                    "kubernetesVersion": "[if(empty(parameters('kubernetesVersion')), null(), "
                    "parameters('kubernetesVersion'))]",
                    "agentPoolProfiles": [
                        {
                            "name": "system",
                            "count": "[parameters('nodeCount')]",
                            "vmSize": "[parameters('nodeVmSize')]",
                            "osType": "Linux",
                            "mode": "System",
                        }
                    ],
                    "linuxProfile": {
                        "adminUsername": "[parameters('adminUsername')]",
                        "ssh": {"publicKeys": [{"keyData": "[parameters('sshPublicKey')]"}]},
                    },
                    "oidcIssuerProfile": {"enabled": True},
                    "securityProfile": {"workloadIdentity": {"enabled": True}},
                    "storageProfile": {"fileCSIDriver": {"enabled": True}},
                },
            },
            "storageRoleAssignment": {
                "type": "Microsoft.Authorization/roleAssignments",
                "apiVersion": "2022-04-01",
                "scope": "[format('Microsoft.Storage/storageAccounts/{0}', parameters('storageAccountName'))]",
                "name": "[guid(resourceId('Microsoft.Storage/storageAccounts', parameters('storageAccountName')), "
                "parameters('identityName'), variables('STORAGE_FILE_DATA_SMB_SHARE_CONTRIBUTOR'))]",
                "properties": {
                    "roleDefinitionId": "[subscriptionResourceId('Microsoft.Authorization/roleDefinitions', "
                    "variables('STORAGE_FILE_DATA_SMB_SHARE_CONTRIBUTOR'))]",
                    "principalId": "[reference('identity').principalId]",
                    "principalType": "ServicePrincipal",
                },
                "dependsOn": ["identity", "storageAccount", "cluster"],
            },
        },
        "outputs": {
            "clusterName": {"type": "string", "value": "[parameters('clusterName')]"},
            "oidcIssuerUrl": {"type": "string", "value": "[reference('cluster').oidcIssuerProfile.issuerURL]"},
            "nodeResourceGroup": {"type": "string", "value": "[reference('cluster').nodeResourceGroup]"},
            "storageAccountName": {"type": "string", "value": "[parameters('storageAccountName')]"},
            "fileShareName": {"type": "string", "value": "[parameters('fileShareName')]"},
            "identityName": {"type": "string", "value": "[parameters('identityName')]"},
            "identityClientId": {"type": "string", "value": "[reference('identity').clientId]"},
            "identityPrincipalId": {"type": "string", "value": "[reference('identity').principalId]"},
        },
    },
)
