# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

from typing import Dict, List, Optional, Tuple

from azure.cli.core.azclierror import InvalidArgumentValueError, RequiredArgumentMissingError

from ...common import DEFAULT_SERVICE_ACCOUNT_NAMESPACE
from ...util import to_alnum_lower, to_k8s_name, url_safe_hash_phrase
from .common import (
    CLUSTER_NAME_FORMAT,
    CREDENTIAL_SUFFIX,
    DEFAULT_FILE_SHARE_NAME,
    DEFAULT_FILE_SHARE_QUOTA_GIB,
    DEFAULT_RESOURCE_GROUP_FORMAT,
    IDENTITY_SUFFIX,
    RESOURCE_TOKEN_LENGTH,
    SERVICE_ACCOUNT_SUBJECT_FORMAT,
    SERVICE_ACCOUNT_SUFFIX,
    STORAGE_ACCOUNT_MAX_LENGTH,
    STORAGE_ACCOUNT_PREFIX,
)
from .template import TEMPLATE_BLUEPRINT_INFRA, TemplateBlueprint


def get_default_resource_group_name(env_name: str, location: str) -> str:
    return DEFAULT_RESOURCE_GROUP_FORMAT.format(env_name=env_name, location=location)


def get_resource_token(subscription_id: str, resource_group_name: str, env_name: str) -> str:
    """
    Stable short token used to make derived resource names unique per environment.
    """
    phrase = f"{subscription_id}/{resource_group_name}/{env_name}".lower()
    return url_safe_hash_phrase(phrase)[:RESOURCE_TOKEN_LENGTH]


def get_default_cluster_name(env_name: str, token: str) -> str:
    return CLUSTER_NAME_FORMAT.format(env_name=to_k8s_name(env_name), token=token)


def get_default_storage_account_name(env_name: str, token: str) -> str:
    return f"{STORAGE_ACCOUNT_PREFIX}{to_alnum_lower(env_name)}{token}"[:STORAGE_ACCOUNT_MAX_LENGTH]


def get_identity_name(cluster_name: str) -> str:
    return f"{cluster_name}-{IDENTITY_SUFFIX}"


def get_service_account_name(cluster_name: str) -> str:
    return to_k8s_name(f"{cluster_name}-{SERVICE_ACCOUNT_SUFFIX}")


def get_credential_name(cluster_name: str) -> str:
    return f"{cluster_name}-{CREDENTIAL_SUFFIX}"


def get_service_account_subject(namespace: str, service_account_name: str) -> str:
    return SERVICE_ACCOUNT_SUBJECT_FORMAT.format(namespace=namespace, service_account_name=service_account_name)


def ensure_https_url(value: Optional[str], moniker: str = "AKS OIDC issuer") -> Optional[str]:
    if value is None:
        return value
    if not value.lower().startswith("https://"):
        raise InvalidArgumentValueError(f"{moniker} must be a valid HTTPS URL.")
    return value


class ProvisionTargets:
    def __init__(
        self,
        subscription_id: str,
        env_name: Optional[str] = None,
        location: Optional[str] = None,
        resource_group_name: Optional[str] = None,
        cluster_name: Optional[str] = None,
        oidc_issuer: Optional[str] = None,
        namespace: str = DEFAULT_SERVICE_ACCOUNT_NAMESPACE,
        storage_account_name: Optional[str] = None,
        file_share_name: str = DEFAULT_FILE_SHARE_NAME,
        file_share_quota: int = DEFAULT_FILE_SHARE_QUOTA_GIB,
        ssh_public_key: Optional[str] = None,
        node_count: Optional[int] = None,
        node_vm_size: Optional[str] = None,
        kubernetes_version: Optional[str] = None,
        tags: Optional[dict] = None,
        **_,
    ):
        self._ensure_not_empty(subscription_id=subscription_id)

        self.env_name = env_name
        self.location = location
        self.subscription_id = subscription_id
        if not resource_group_name and location and env_name:
            resource_group_name = get_default_resource_group_name(env_name=env_name, location=location)
        self.resource_group_name = resource_group_name
        self.resource_token = None
        if env_name:
            self.resource_token = get_resource_token(
                subscription_id=subscription_id, resource_group_name=resource_group_name or "", env_name=env_name
            )
            cluster_name = cluster_name or get_default_cluster_name(env_name=env_name, token=self.resource_token)

        self.cluster_name = cluster_name
        self.oidc_issuer = ensure_https_url(oidc_issuer)
        self.namespace = to_k8s_name(namespace) or DEFAULT_SERVICE_ACCOUNT_NAMESPACE

        self.identity_name = self.service_account_name = self.credential_name = None
        if cluster_name:
            self.identity_name = get_identity_name(cluster_name)
            self.service_account_name = get_service_account_name(cluster_name)
            self.credential_name = get_credential_name(cluster_name)

        self.storage_account_name = storage_account_name
        self.file_share_name = file_share_name
        self.file_share_quota = self._sanitize_int(file_share_quota)
        self.ssh_public_key = ssh_public_key
        self.node_count = self._sanitize_int(node_count)
        self.node_vm_size = node_vm_size
        self.kubernetes_version = kubernetes_version
        self.tags = tags

    @property
    def subject(self) -> str:
        return get_service_account_subject(namespace=self.namespace, service_account_name=self.service_account_name)

    @property
    def default_storage_account_name(self) -> str:
        return get_default_storage_account_name(env_name=self.env_name, token=self.resource_token)

    def ensure_required(self, *attr_names: str):
        self._ensure_not_empty(**{attr_name: getattr(self, attr_name, None) for attr_name in attr_names})

    def _ensure_not_empty(self, **kwargs):
        empty_params: List[str] = [key for key in kwargs if not kwargs[key] or not str(kwargs[key]).strip()]
        if empty_params:
            raise RequiredArgumentMissingError(
                f"The following parameters cannot be empty: {', '.join(empty_params)}"
            )

    def _sanitize_int(self, value: Optional[int]) -> Optional[int]:
        if value is None:
            return value
        return int(value)

    def _handle_apply_targets(
        self, param_to_target: dict, template_blueprint: TemplateBlueprint
    ) -> Tuple[TemplateBlueprint, dict]:
        template_copy = template_blueprint.copy()
        built_in_template_params = template_copy.parameters

        deploy_params = {}

        for param in param_to_target:
            if param in built_in_template_params and param_to_target[param] is not None:
                deploy_params[param] = {"value": param_to_target[param]}

        return template_copy, deploy_params

    def get_infra_template(self) -> Tuple[dict, dict]:
        if not self.ssh_public_key:
            raise RequiredArgumentMissingError(
                "An SSH public key is required to deploy the cluster. "
                "Run 'az aksprov pre-provision' or provide --ssh-public-key."
            )
        if not self.resource_group_name:
            raise RequiredArgumentMissingError("A resource group or location is required to deploy.")

        template, parameters = self._handle_apply_targets(
            param_to_target={
                "location": self.location,
                "clusterName": self.cluster_name,
                "identityName": self.identity_name,
                "storageAccountName": self.storage_account_name or self.default_storage_account_name,
                "fileShareName": self.file_share_name,
                "fileShareQuotaGiB": self.file_share_quota,
                "sshPublicKey": self.ssh_public_key.strip(),
                "nodeCount": self.node_count,
                "nodeVmSize": self.node_vm_size,
                "kubernetesVersion": self.kubernetes_version,
                "tags": self.tags,
            },
            template_blueprint=TEMPLATE_BLUEPRINT_INFRA,
        )

        return template.content, parameters

    def get_template_versions(self) -> Dict[str, str]:
        return dict(TEMPLATE_BLUEPRINT_INFRA.content["variables"]["VERSIONS"])
