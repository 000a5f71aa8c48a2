# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

from typing import Any, Dict, Optional, Union

from .common import DEFAULT_SERVICE_ACCOUNT_NAMESPACE, NO_PREFLIGHT_ENV_KEY
from .providers.orchestration.common import (
    DEFAULT_FILE_SHARE_NAME,
    DEFAULT_FILE_SHARE_QUOTA_GIB,
    DEFAULT_NODE_COUNT,
    DEFAULT_NODE_VM_SIZE,
    DEFAULT_SSH_KEY_NAME,
    DEFAULT_SSH_KEY_PATH,
    DEFAULT_STORAGE_SECRET_NAME,
)
from .util import is_env_flag_enabled


def pre_provision(
    cmd,
    env_name: str,
    location: str,
    resource_group_name: Optional[str] = None,
    ssh_key_name: str = DEFAULT_SSH_KEY_NAME,
    ssh_key_path: str = DEFAULT_SSH_KEY_PATH,
    tags: Optional[dict] = None,
    no_progress: Optional[bool] = None,
) -> Union[Dict[str, Any], None]:
    from .providers.orchestration import WorkManager

    no_pre_flight = is_env_flag_enabled(NO_PREFLIGHT_ENV_KEY)

    work_manager = WorkManager(cmd)
    return work_manager.execute_pre_provision(
        show_progress=not no_progress,
        pre_flight=not no_pre_flight,
        env_name=env_name,
        location=location,
        resource_group_name=resource_group_name,
        ssh_key_name=ssh_key_name,
        ssh_key_path=ssh_key_path,
        tags=tags,
    )


def deploy(
    cmd,
    env_name: str,
    location: Optional[str] = None,
    resource_group_name: Optional[str] = None,
    cluster_name: Optional[str] = None,
    storage_account_name: Optional[str] = None,
    file_share_name: str = DEFAULT_FILE_SHARE_NAME,
    file_share_quota: int = DEFAULT_FILE_SHARE_QUOTA_GIB,
    node_count: int = DEFAULT_NODE_COUNT,
    node_vm_size: str = DEFAULT_NODE_VM_SIZE,
    kubernetes_version: Optional[str] = None,
    ssh_public_key: Optional[str] = None,
    tags: Optional[dict] = None,
    no_progress: Optional[bool] = None,
) -> Union[Dict[str, Any], None]:
    from .providers.orchestration import WorkManager

    no_pre_flight = is_env_flag_enabled(NO_PREFLIGHT_ENV_KEY)

    work_manager = WorkManager(cmd)
    return work_manager.execute_deploy(
        show_progress=not no_progress,
        pre_flight=not no_pre_flight,
        env_name=env_name,
        location=location,
        resource_group_name=resource_group_name,
        cluster_name=cluster_name,
        storage_account_name=storage_account_name,
        file_share_name=file_share_name,
        file_share_quota=file_share_quota,
        node_count=node_count,
        node_vm_size=node_vm_size,
        kubernetes_version=kubernetes_version,
        ssh_public_key=ssh_public_key,
        tags=tags,
    )


def post_provision(
    cmd,
    env_name: str,
    location: Optional[str] = None,
    resource_group_name: Optional[str] = None,
    subscription_id: Optional[str] = None,
    cluster_name: Optional[str] = None,
    oidc_issuer: Optional[str] = None,
    namespace: str = DEFAULT_SERVICE_ACCOUNT_NAMESPACE,
    storage_account_name: Optional[str] = None,
    apply_storage: Optional[bool] = None,
    storage_class_file: Optional[str] = None,
    pvc_file: Optional[str] = None,
    kubeconfig_file: Optional[str] = None,
    tags: Optional[dict] = None,
    no_progress: Optional[bool] = None,
) -> Union[Dict[str, Any], None]:
    from .providers.orchestration import WorkManager

    no_pre_flight = is_env_flag_enabled(NO_PREFLIGHT_ENV_KEY)

    work_manager = WorkManager(cmd, subscription_id=subscription_id)
    return work_manager.execute_post_provision(
        show_progress=not no_progress,
        pre_flight=not no_pre_flight,
        env_name=env_name,
        location=location,
        resource_group_name=resource_group_name,
        cluster_name=cluster_name,
        oidc_issuer=oidc_issuer,
        namespace=namespace,
        storage_account_name=storage_account_name,
        apply_storage=apply_storage,
        storage_class_file=storage_class_file,
        pvc_file=pvc_file,
        kubeconfig_file=kubeconfig_file,
        tags=tags,
    )


def create_storage_secret(
    cmd,
    resource_group_name: Optional[str] = None,
    cluster_name: Optional[str] = None,
    storage_account_name: Optional[str] = None,
    storage_resource_group_name: Optional[str] = None,
    secret_name: str = DEFAULT_STORAGE_SECRET_NAME,
    namespace: str = DEFAULT_SERVICE_ACCOUNT_NAMESPACE,
    env_name: Optional[str] = None,
    replace: Optional[bool] = None,
    no_progress: Optional[bool] = None,
) -> Union[Dict[str, Any], None]:
    from .providers.orchestration import WorkManager

    no_pre_flight = is_env_flag_enabled(NO_PREFLIGHT_ENV_KEY)

    work_manager = WorkManager(cmd)
    return work_manager.execute_storage_secret(
        show_progress=not no_progress,
        pre_flight=not no_pre_flight,
        env_name=env_name,
        resource_group_name=resource_group_name,
        cluster_name=cluster_name,
        storage_account_name=storage_account_name,
        storage_resource_group_name=storage_resource_group_name,
        secret_name=secret_name,
        namespace=namespace,
        replace=replace,
    )
