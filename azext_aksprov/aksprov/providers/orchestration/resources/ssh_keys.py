# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

import os
from typing import TYPE_CHECKING, NamedTuple, Optional, Tuple

from azure.cli.core.azclierror import FileOperationError, ResourceNotFoundError, ValidationError
from azure.core.exceptions import ResourceNotFoundError as AzureResourceNotFoundError
from knack.log import get_logger

from ....util import (
    generate_ssh_key_pair,
    get_timestamp_now_utc,
    is_ssh_public_key,
    read_file_content,
    write_file_content,
)
from ....util.az_client import as_dict, get_compute_mgmt_client
from ....util.keys import PRIVATE_KEY_FILE_MODE, PUBLIC_KEY_FILE_MODE

logger = get_logger(__name__)


if TYPE_CHECKING:
    from azure.mgmt.compute.operations import SshPublicKeysOperations


class LocalKeyPair(NamedTuple):
    private_key_path: str
    public_key_path: str
    public_key: str
    created: bool


def ensure_local_ssh_key(private_key_path: str) -> LocalKeyPair:
    """
    Creates an RSA key pair at private_key_path (and private_key_path.pub) unless
    a private key already exists there. Existing keys are never overwritten.
    """
    private_key_path = os.path.abspath(os.path.expanduser(private_key_path))
    public_key_path = f"{private_key_path}.pub"
    logger.info("Creating/verifying local SSH key pair")

    if os.path.isfile(private_key_path):
        logger.info("Local SSH key already exists at: %s", private_key_path)
        if not os.path.isfile(public_key_path):
            raise ValidationError(
                f"Local SSH private key {private_key_path} exists without a public key at {public_key_path}."
            )
        public_key = read_file_content(public_key_path).strip()
        if not is_ssh_public_key(public_key):
            raise ValidationError(f"{public_key_path} does not contain a valid SSH public key.")
        return LocalKeyPair(private_key_path, public_key_path, public_key, False)

    logger.info("Creating local SSH key pair at: %s", private_key_path)
    comment = f"AKS-SSH-Key-{get_timestamp_now_utc(format='%Y%m%d_%H%M%S')}"
    public_bytes, private_bytes = generate_ssh_key_pair(comment=comment)
    write_file_content(private_key_path, private_bytes, mode=PRIVATE_KEY_FILE_MODE)
    try:
        write_file_content(public_key_path, public_bytes + b"\n", mode=PUBLIC_KEY_FILE_MODE)
    except FileOperationError:
        # a private key without its public key blocks later runs
        os.remove(private_key_path)
        raise
    logger.info("Local SSH key pair created successfully")
    return LocalKeyPair(private_key_path, public_key_path, public_bytes.decode("utf-8"), True)


class SshPublicKeys:
    def __init__(self, subscription_id: str):
        self.compute_mgmt_client = get_compute_mgmt_client(subscription_id=subscription_id)
        self.ops: "SshPublicKeysOperations" = self.compute_mgmt_client.ssh_public_keys

    def show(self, name: str, resource_group_name: str) -> Optional[dict]:
        try:
            return as_dict(self.ops.get(resource_group_name=resource_group_name, ssh_public_key_name=name))
        except AzureResourceNotFoundError:
            return None

    def ensure(self, name: str, resource_group_name: str, location: str, public_key: str) -> Tuple[dict, bool]:
        logger.info("Creating/verifying Azure SSH key: %s", name)
        existing = self.show(name=name, resource_group_name=resource_group_name)
        if existing:
            logger.info("Azure SSH key '%s' already exists", name)
            return existing, False

        logger.info("Creating Azure SSH key '%s'", name)
        result = as_dict(
            self.ops.create(
                resource_group_name=resource_group_name,
                ssh_public_key_name=name,
                parameters={"location": location, "public_key": public_key},
            )
        )
        logger.info("Azure SSH key '%s' created successfully", name)
        return result, True

    def get_public_key(self, name: str, resource_group_name: str) -> str:
        logger.info("Retrieving SSH public key from Azure")
        ssh_key = self.show(name=name, resource_group_name=resource_group_name)
        public_key = (ssh_key or {}).get("public_key")
        if not public_key:
            raise ResourceNotFoundError(f"Failed to retrieve SSH public key '{name}' in '{resource_group_name}'.")
        return public_key.strip()
