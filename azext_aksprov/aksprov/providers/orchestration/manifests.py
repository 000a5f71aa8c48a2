# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

from typing import Optional

from azure.cli.core.azclierror import InvalidArgumentValueError

from ...util import deserialize_file_content
from .common import (
    AZURE_FILE_CSI_PROVISIONER,
    DEFAULT_PVC_NAME,
    DEFAULT_PVC_STORAGE_REQUEST,
    DEFAULT_STORAGE_CLASS_NAME,
)


def get_storage_class_manifest(file_path: Optional[str] = None) -> dict:
    if file_path:
        return _load_manifest(file_path, kind="StorageClass")

    return {
        "apiVersion": "storage.k8s.io/v1",
        "kind": "StorageClass",
        "metadata": {"name": DEFAULT_STORAGE_CLASS_NAME},
        "provisioner": AZURE_FILE_CSI_PROVISIONER,
        "allowVolumeExpansion": True,
        "reclaimPolicy": "Delete",
        "volumeBindingMode": "Immediate",
        "mountOptions": [
            "dir_mode=0777",
            "file_mode=0777",
            "uid=0",
            "gid=0",
            "mfsymlinks",
            "cache=strict",
            "actimeo=30",
        ],
        "parameters": {"skuName": "Standard_LRS"},
    }


def get_pvc_manifest(file_path: Optional[str] = None, storage_class_name: str = DEFAULT_STORAGE_CLASS_NAME) -> dict:
    if file_path:
        return _load_manifest(file_path, kind="PersistentVolumeClaim")

    return {
        "apiVersion": "v1",
        "kind": "PersistentVolumeClaim",
        "metadata": {"name": DEFAULT_PVC_NAME},
        "spec": {
            "accessModes": ["ReadWriteMany"],
            "storageClassName": storage_class_name,
            "resources": {"requests": {"storage": DEFAULT_PVC_STORAGE_REQUEST}},
        },
    }


def _load_manifest(file_path: str, kind: str) -> dict:
    manifest = deserialize_file_content(file_path)
    if not isinstance(manifest, dict) or manifest.get("kind") != kind:
        raise InvalidArgumentValueError(f"{file_path} does not contain a single {kind} manifest.")
    if not manifest.get("metadata", {}).get("name"):
        raise InvalidArgumentValueError(f"The {kind} manifest in {file_path} requires metadata.name.")
    return manifest
