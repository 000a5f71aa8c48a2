# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

from enum import Enum

# Urls
ARM_ENDPOINT = "https://management.azure.com/"

PROVISIONING_STATE_SUCCESS = "Succeeded"

# Naming
DEFAULT_RESOURCE_GROUP_FORMAT = "contoso-aks-{env_name}-{location}-RG"
CLUSTER_NAME_FORMAT = "aks-{env_name}-{token}-cluster"
STORAGE_ACCOUNT_PREFIX = "st"
STORAGE_ACCOUNT_MAX_LENGTH = 24
RESOURCE_TOKEN_LENGTH = 13
IDENTITY_SUFFIX = "identity"
SERVICE_ACCOUNT_SUFFIX = "wi-sa"
CREDENTIAL_SUFFIX = "fed-cred"

# SSH keys
DEFAULT_SSH_KEY_NAME = "aks-SSKey"
DEFAULT_SSH_KEY_PATH = "~/.ssh/id_rsa"
DEFAULT_ADMIN_USERNAME = "azureuser"

# Cluster
DEFAULT_NODE_COUNT = 2
DEFAULT_NODE_VM_SIZE = "Standard_D2s_v3"

# Storage
DEFAULT_FILE_SHARE_NAME = "aksshare"
DEFAULT_FILE_SHARE_QUOTA_GIB = 100
DEFAULT_STORAGE_CLASS_NAME = "azurefile-csi"
DEFAULT_PVC_NAME = "my-azurefile"
DEFAULT_PVC_STORAGE_REQUEST = "100Gi"
AZURE_FILE_CSI_PROVISIONER = "file.csi.azure.com"
DEFAULT_STORAGE_SECRET_NAME = "azure-secret"
STORAGE_SECRET_ACCOUNT_NAME_KEY = "azurestorageaccountname"
STORAGE_SECRET_ACCOUNT_KEY_KEY = "azurestorageaccountkey"

# Workload identity
WORKLOAD_IDENTITY_AUDIENCE = "api://AzureADTokenExchange"
WORKLOAD_IDENTITY_CLIENT_ID_ANNOTATION = "azure.workload.identity/client-id"
SERVICE_ACCOUNT_SUBJECT_FORMAT = "system:serviceaccount:{namespace}:{service_account_name}"

# Role definitions
ROLE_DEF_FORMAT_STR = "/subscriptions/{subscription_id}/providers/Microsoft.Authorization/roleDefinitions/{role_id}"
STORAGE_FILE_DATA_SMB_SHARE_CONTRIBUTOR_ROLE_ID = "0c867c2a-1d8c-454a-a3db-ab2ea1bdc8bb"


class PrincipalType(Enum):
    SERVICE_PRINCIPAL = "ServicePrincipal"
    USER = "User"
