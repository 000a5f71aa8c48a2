# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

"""
CLI parameter definitions.
"""

from azure.cli.core.commands.parameters import (
    get_location_type,
    get_three_state_flag,
    tags_type,
)

from ._validators import (
    validate_env_name,
    validate_namespace,
    validate_oidc_issuer,
    validate_storage_account_name,
)


def load_aksprov_arguments(self, _):
    """
    Load CLI Args for Knack parser
    """

    with self.argument_context("aksprov") as context:
        context.argument(
            "env_name",
            options_list=["--env-name", "-e"],
            help="Environment name. Values produced by each step are recorded to "
            "{env_root}/{env_name}/.env where env_root defaults to ./.azure and can be changed with "
            "`az config set aksprov.env_root={dir}`.",
            validator=validate_env_name,
        )
        context.argument(
            "location",
            arg_type=get_location_type(self.cli_ctx),
            help="Azure region. Used for resources created by the command and to derive the default "
            "resource group name.",
        )
        context.argument(
            "resource_group_name",
            options_list=["--resource-group", "-g"],
            help="Resource group name. If omitted the value recorded in the environment is used, "
            "otherwise 'contoso-aks-{env_name}-{location}-RG'.",
        )
        context.argument(
            "cluster_name",
            options_list=["--cluster-name", "-c"],
            help="AKS cluster name. If omitted the value recorded in the environment is used, "
            "otherwise 'aks-{env_name}-{token}-cluster'.",
        )
        context.argument(
            "storage_account_name",
            options_list=["--storage-account", "--sa"],
            help="Storage account name.",
            validator=validate_storage_account_name,
        )
        context.argument(
            "namespace",
            options_list=["--namespace", "-n"],
            help="K8s cluster namespace the command should operate against.",
            validator=validate_namespace,
        )
        context.argument(
            "no_progress",
            options_list=["--no-progress"],
            arg_type=get_three_state_flag(),
            help="Disable visual representation of work.",
        )
        context.argument(
            "tags",
            options_list=["--tags"],
            arg_type=tags_type,
        )

    with self.argument_context("aksprov pre-provision") as context:
        context.argument(
            "ssh_key_name",
            options_list=["--ssh-key-name"],
            help="Name of the Azure SSH public key resource.",
            arg_group="SSH",
        )
        context.argument(
            "ssh_key_path",
            options_list=["--ssh-key-path"],
            help="Local private key path. The public key is expected at {path}.pub. "
            "A new RSA 4096 key pair is created when the private key does not exist.",
            arg_group="SSH",
        )

    with self.argument_context("aksprov deploy") as context:
        context.argument(
            "file_share_name",
            options_list=["--file-share"],
            help="Azure Files share name.",
            arg_group="Storage",
        )
        context.argument(
            "file_share_quota",
            options_list=["--share-quota"],
            type=int,
            help="Azure Files share quota in GiB.",
            arg_group="Storage",
        )
        context.argument(
            "node_count",
            options_list=["--node-count"],
            type=int,
            help="Number of nodes in the system node pool.",
            arg_group="Cluster",
        )
        context.argument(
            "node_vm_size",
            options_list=["--node-vm-size"],
            help="VM size of the system node pool.",
            arg_group="Cluster",
        )
        context.argument(
            "kubernetes_version",
            options_list=["--k8s-version"],
            help="Kubernetes version. If omitted the AKS default version is used.",
            arg_group="Cluster",
        )
        context.argument(
            "ssh_public_key",
            options_list=["--ssh-public-key"],
            help="SSH public key for the cluster admin user. "
            "If omitted the key recorded by `az aksprov pre-provision` is used.",
            arg_group="Cluster",
        )

    with self.argument_context("aksprov post-provision") as context:
        context.argument(
            "subscription_id",
            options_list=["--subscription-id"],
            help="Subscription Id hosting the resources. If omitted the current CLI subscription is used.",
        )
        context.argument(
            "oidc_issuer",
            options_list=["--oidc-issuer"],
            help="AKS OIDC issuer URL. If omitted the issuer is read from the cluster.",
            validator=validate_oidc_issuer,
            arg_group="Workload Identity",
        )
        context.argument(
            "storage_account_name",
            options_list=["--storage-account", "--sa"],
            help="Storage account to grant the workload identity 'Storage File Data SMB Share Contributor' on.",
            validator=validate_storage_account_name,
            arg_group="Workload Identity",
        )
        context.argument(
            "apply_storage",
            options_list=["--apply-storage"],
            arg_type=get_three_state_flag(),
            help="Create or update the Azure Files StorageClass and PersistentVolumeClaim on the cluster.",
            arg_group="Cluster Storage",
        )
        context.argument(
            "storage_class_file",
            options_list=["--storage-class-file"],
            help="Path to a json or yaml StorageClass manifest used instead of the default 'azurefile-csi'.",
            arg_group="Cluster Storage",
        )
        context.argument(
            "pvc_file",
            options_list=["--pvc-file"],
            help="Path to a json or yaml PersistentVolumeClaim manifest used instead of the default "
            "'my-azurefile'.",
            arg_group="Cluster Storage",
        )
        context.argument(
            "kubeconfig_file",
            options_list=["--kubeconfig-file"],
            help="When provided the fetched cluster credentials are also written to this path.",
        )

    with self.argument_context("aksprov storage-secret") as context:
        context.argument(
            "storage_resource_group_name",
            options_list=["--storage-rg"],
            help="Resource group of the storage account. If omitted, an account recorded in the environment "
            "uses the environment resource group, otherwise the cluster node resource group is used.",
        )
        context.argument(
            "secret_name",
            options_list=["--secret-name"],
            help="Name of the K8s secret.",
        )
        context.argument(
            "replace",
            options_list=["--replace"],
            arg_type=get_three_state_flag(),
            help="Delete an existing secret of the same name before creating it.",
        )
