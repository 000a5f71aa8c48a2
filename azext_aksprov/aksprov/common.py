# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

"""
shared: Define shared data types(enums) and constant strings.

"""

from enum import Enum


class K8sSecretType(Enum):
    """
    Supported k8s secret types.
    """

    opaque = "Opaque"


class EnvKey(Enum):
    """
    Keys written to the per-environment .env file.
    """

    resource_group = "AZURE_RESOURCE_GROUP_NAME"
    ssh_public_key = "SSH_PUBLIC_KEY"
    cluster_name = "AKS_CLUSTER_NAME"
    oidc_issuer = "AKS_OIDC_ISSUER"
    storage_account = "AZURE_STORAGE_ACCOUNT_NAME"
    file_share = "AZURE_FILE_SHARE_NAME"
    identity_name = "USER_ASSIGNED_IDENTITY_NAME"
    identity_client_id = "USER_ASSIGNED_CLIENT_ID"
    service_account_namespace = "SERVICE_ACCOUNT_NAMESPACE"
    service_account_name = "SERVICE_ACCOUNT_NAME"
    federated_credential_name = "FEDERATED_IDENTITY_CREDENTIAL_NAME"


# Set to true to skip pre-flight checks.
NO_PREFLIGHT_ENV_KEY = "AKSPROV_NO_PREFLIGHT"

DEFAULT_SERVICE_ACCOUNT_NAMESPACE = "default"
