# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

from typing import Dict, Optional, Tuple

import yaml
from azure.cli.core.azclierror import AzureResponseError, ValidationError
from knack.log import get_logger
from kubernetes import client, config
from kubernetes.client.exceptions import ApiException
from kubernetes.client.models import V1ObjectMeta
from kubernetes.config.config_exception import ConfigException
from urllib3.exceptions import HTTPError

from ..common import DEFAULT_SERVICE_ACCOUNT_NAMESPACE, K8sSecretType

logger = get_logger(__name__)
generic = client.ApiClient()


def load_kubeconfig(kubeconfig: bytes, kubeconfig_file: Optional[str] = None):
    """
    Load cluster credentials into the kubernetes client, optionally persisting them to kubeconfig_file.
    """
    from ..util import set_log_level, write_file_content
    from ..util.keys import PRIVATE_KEY_FILE_MODE

    # This will ensure --debug works with http(s) k8s interactions
    set_log_level("urllib3.connectionpool")

    try:
        config_dict = yaml.safe_load(kubeconfig)
    except yaml.YAMLError as e:
        raise ValidationError(f"Unable to parse cluster credentials: {e}")
    if not isinstance(config_dict, dict):
        raise ValidationError("Cluster credentials are not a valid kubeconfig.")

    if kubeconfig_file:
        write_file_content(kubeconfig_file, kubeconfig, mode=PRIVATE_KEY_FILE_MODE)
        logger.info("Cluster credentials written to: %s", kubeconfig_file)

    try:
        config.load_kube_config_from_dict(config_dict=config_dict)
    except ConfigException as e:
        raise ValidationError(f"Unable to load cluster credentials: {e}")


def verify_cluster_connectivity() -> bool:
    try:
        version_api = client.VersionApi()
        version_info = version_api.get_code()
    except (ApiException, HTTPError) as e:
        logger.debug(str(e))
        return False
    logger.debug("Connected to Kubernetes API server version %s", version_info.git_version)
    return True


def _raise_from_api_exception(ae: ApiException):
    error_msg = str(ae)
    logger.debug(msg=error_msg)
    raise AzureResponseError(error_msg)


def get_namespaced_service_account(name: str, namespace: str = DEFAULT_SERVICE_ACCOUNT_NAMESPACE) -> Optional[dict]:
    try:
        v1_api = client.CoreV1Api()
        result = v1_api.read_namespaced_service_account(name=name, namespace=namespace)
    except ApiException as ae:
        if int(ae.status) == 404:
            return None
        _raise_from_api_exception(ae)
    return generic.sanitize_for_serialization(obj=result)


def apply_namespaced_service_account(
    name: str, annotations: Dict[str, str], namespace: str = DEFAULT_SERVICE_ACCOUNT_NAMESPACE
) -> Tuple[dict, str]:
    """
    Ensures a service account exists carrying the given annotations.
    Returns the service account and the action taken: created, updated or unchanged.
    """
    existing = get_namespaced_service_account(name=name, namespace=namespace)
    v1_api = client.CoreV1Api()

    if not existing:
        body = client.V1ServiceAccount(metadata=V1ObjectMeta(name=name, namespace=namespace, annotations=annotations))
        try:
            result = v1_api.create_namespaced_service_account(namespace=namespace, body=body)
        except ApiException as ae:
            _raise_from_api_exception(ae)
        return generic.sanitize_for_serialization(obj=result), "created"

    current_annotations = existing.get("metadata", {}).get("annotations") or {}
    if all(current_annotations.get(key) == annotations[key] for key in annotations):
        return existing, "unchanged"

    try:
        result = v1_api.patch_namespaced_service_account(
            name=name, namespace=namespace, body={"metadata": {"annotations": annotations}}
        )
    except ApiException as ae:
        _raise_from_api_exception(ae)
    return generic.sanitize_for_serialization(obj=result), "updated"


def apply_storage_class(body: dict) -> dict:
    name = body["metadata"]["name"]
    storage_api = client.StorageV1Api()
    try:
        result = storage_api.create_storage_class(body=body)
    except ApiException as ae:
        if int(ae.status) != 409:
            _raise_from_api_exception(ae)
        logger.debug("StorageClass %s exists, patching.", name)
        try:
            result = storage_api.patch_storage_class(name=name, body=body)
        except ApiException as patch_ae:
            _raise_from_api_exception(patch_ae)
    return generic.sanitize_for_serialization(obj=result)


def apply_namespaced_pvc(body: dict, namespace: str = DEFAULT_SERVICE_ACCOUNT_NAMESPACE) -> dict:
    name = body["metadata"]["name"]
    v1_api = client.CoreV1Api()
    try:
        result = v1_api.create_namespaced_persistent_volume_claim(namespace=namespace, body=body)
    except ApiException as ae:
        if int(ae.status) != 409:
            _raise_from_api_exception(ae)
        logger.debug("PersistentVolumeClaim %s exists, patching.", name)
        try:
            result = v1_api.patch_namespaced_persistent_volume_claim(name=name, namespace=namespace, body=body)
        except ApiException as patch_ae:
            _raise_from_api_exception(patch_ae)
    return generic.sanitize_for_serialization(obj=result)


def create_namespaced_secret(
    secret_name: str,
    namespace: str,
    data: Dict[str, str],
    secret_type: K8sSecretType = K8sSecretType.opaque,
    delete_first: bool = False,
) -> dict:
    if delete_first:
        delete_namespaced_secret(namespace=namespace, secret_name=secret_name)

    v1_secret = client.V1Secret(metadata=V1ObjectMeta(name=secret_name), type=secret_type.value, string_data=data)

    try:
        v1_api = client.CoreV1Api()
        result = v1_api.create_namespaced_secret(namespace=namespace, body=v1_secret)
    except ApiException as ae:
        if int(ae.status) == 409:
            raise ValidationError(
                f"Secret '{secret_name}' already exists in namespace '{namespace}'. Use --replace to recreate it."
            )
        _raise_from_api_exception(ae)
    return generic.sanitize_for_serialization(obj=result)


def delete_namespaced_secret(namespace: str, secret_name: str):
    try:
        v1_api = client.CoreV1Api()
        v1_api.delete_namespaced_secret(namespace=namespace, name=secret_name)
    except ApiException as ae:
        if int(ae.status) == 404:
            return
        _raise_from_api_exception(ae)
