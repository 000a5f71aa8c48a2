# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

from .clusters import ManagedClusters
from .identities import FederatedCredentials, ManagedIdentities
from .resource_groups import ResourceGroups
from .ssh_keys import LocalKeyPair, SshPublicKeys, ensure_local_ssh_key
from .storage import StorageAccounts

__all__ = [
    "FederatedCredentials",
    "LocalKeyPair",
    "ManagedClusters",
    "ManagedIdentities",
    "ResourceGroups",
    "SshPublicKeys",
    "StorageAccounts",
    "ensure_local_ssh_key",
]
