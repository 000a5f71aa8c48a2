# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------
"""
Help content for AKS provisioning commands.
"""

from knack.help_files import helps

from .common import NO_PREFLIGHT_ENV_KEY
from .providers.orchestration.common import (
    DEFAULT_PVC_NAME,
    DEFAULT_STORAGE_CLASS_NAME,
    WORKLOAD_IDENTITY_AUDIENCE,
)


def load_aksprov_help():
    helps[
        "aksprov"
    ] = f"""
        type: group
        short-summary: Provision AKS clusters with Azure Files storage and workload identity.
        long-summary: |
            The provisioning workflow runs in three ordered steps per environment:
            pre-provision, deploy and post-provision. Every step is idempotent and records
            its results to the environment file, which later steps read as defaults.

            Pre-flight checks can be skipped by setting the {NO_PREFLIGHT_ENV_KEY}=true environment variable.
    """

    helps[
        "aksprov pre-provision"
    ] = """
        type: command
        short-summary: Prepare the resource group and SSH key material for an environment.
        long-summary: |
            Ensures the resource group exists, ensures a local RSA 4096 key pair exists and
            ensures an Azure SSH public key resource created from the local public key exists.
            Existing local keys are never overwritten.

            Records AZURE_RESOURCE_GROUP_NAME and SSH_PUBLIC_KEY.

        examples:
        - name: Prepare the 'dev' environment in eastus2 using the default resource group name.
          text: >
            az aksprov pre-provision --env-name dev -l eastus2
        - name: Prepare an environment with a custom resource group and key path.
          text: >
            az aksprov pre-provision --env-name dev -l eastus2 -g myResourceGroup
            --ssh-key-path ~/.ssh/aks_dev
    """

    helps[
        "aksprov deploy"
    ] = """
        type: command
        short-summary: Deploy the AKS cluster, storage and workload managed identity.
        long-summary: |
            Deploys a template declaring a user-assigned managed identity, a storage account
            with an Azure Files share, an AKS cluster with OIDC issuer, workload identity and
            the Azure Files CSI driver enabled, and a 'Storage File Data SMB Share Contributor'
            role assignment for the identity against the storage account.

            A what-if evaluation runs before the deployment.

            Records AKS_CLUSTER_NAME, AKS_OIDC_ISSUER, AZURE_STORAGE_ACCOUNT_NAME,
            AZURE_FILE_SHARE_NAME, USER_ASSIGNED_IDENTITY_NAME and USER_ASSIGNED_CLIENT_ID.

        examples:
        - name: Deploy using values recorded by pre-provision.
          text: >
            az aksprov deploy --env-name dev
        - name: Deploy a three node cluster with a specific Kubernetes version.
          text: >
            az aksprov deploy --env-name dev --node-count 3 --k8s-version 1.29
        - name: Deploy with an explicit SSH public key and tags.
          text: >
            az aksprov deploy --env-name dev --ssh-public-key "ssh-rsa AAAA..." --tags team=platform
    """

    helps[
        "aksprov post-provision"
    ] = f"""
        type: command
        short-summary: Bind a K8s service account to the workload managed identity.
        long-summary: |
            Fetches cluster credentials, ensures the managed identity '{{cluster}}-identity' exists,
            ensures the service account '{{cluster}}-wi-sa' carries the identity client Id annotation
            and ensures a federated identity credential '{{cluster}}-fed-cred' trusting the
            cluster OIDC issuer for subject system:serviceaccount:{{namespace}}:{{service account}}
            with audience {WORKLOAD_IDENTITY_AUDIENCE}.

            With --apply-storage the '{DEFAULT_STORAGE_CLASS_NAME}' StorageClass and the
            '{DEFAULT_PVC_NAME}' PersistentVolumeClaim are created or updated.

            Records USER_ASSIGNED_IDENTITY_NAME, USER_ASSIGNED_CLIENT_ID, SERVICE_ACCOUNT_NAMESPACE,
            SERVICE_ACCOUNT_NAME and FEDERATED_IDENTITY_CREDENTIAL_NAME.

        examples:
        - name: Configure workload identity using values recorded by deploy.
          text: >
            az aksprov post-provision --env-name dev
        - name: Configure workload identity in a custom namespace and grant the identity access to a storage account.
          text: >
            az aksprov post-provision --env-name dev -n myapp --storage-account mystorageaccount
        - name: Also apply the default Azure Files StorageClass and PersistentVolumeClaim.
          text: >
            az aksprov post-provision --env-name dev --apply-storage
    """

    helps[
        "aksprov storage-secret"
    ] = """
        type: command
        short-summary: Create a K8s secret holding storage account credentials.
        long-summary: |
            Reads the first access key of the storage account and creates an Opaque secret with
            the keys 'azurestorageaccountname' and 'azurestorageaccountkey'.
            The secret values are never included in the command output.

        examples:
        - name: Create the default 'azure-secret' secret for a storage account in the cluster node resource group.
          text: >
            az aksprov storage-secret -g myResourceGroup -c mycluster --storage-account mystorageaccount
        - name: Recreate the secret using values recorded for an environment.
          text: >
            az aksprov storage-secret --env-name dev --replace
    """

    helps[
        "aksprov env"
    ] = """
        type: group
        short-summary: Inspect recorded environment values.
    """

    helps[
        "aksprov env show"
    ] = """
        type: command
        short-summary: Show the values recorded for an environment.

        examples:
        - name: Show the 'dev' environment.
          text: >
            az aksprov env show --env-name dev
    """
