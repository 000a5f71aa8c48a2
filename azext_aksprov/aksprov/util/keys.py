# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

"""
keys: ssh key pair utilities.
"""

from typing import Optional, Tuple

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from knack.log import get_logger

DEFAULT_KEY_SIZE = 4096
DEFAULT_PUBLIC_EXPONENT = 65537
PRIVATE_KEY_FILE_MODE = 0o600
PUBLIC_KEY_FILE_MODE = 0o644

logger = get_logger(__name__)


def generate_ssh_key_pair(key_size: int = DEFAULT_KEY_SIZE, comment: Optional[str] = None) -> Tuple[bytes, bytes]:
    """
    Generates an RSA key pair.
    Returns (public key in OpenSSH authorized_keys format, private key in OpenSSH PEM format).
    """
    if not key_size or key_size < 2048:
        key_size = DEFAULT_KEY_SIZE
    key = rsa.generate_private_key(
        public_exponent=DEFAULT_PUBLIC_EXPONENT, key_size=key_size, backend=default_backend()
    )
    private_bytes = key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.OpenSSH,
        encryption_algorithm=serialization.NoEncryption(),
    )
    public_bytes = key.public_key().public_bytes(
        encoding=serialization.Encoding.OpenSSH,
        format=serialization.PublicFormat.OpenSSH,
    )
    if comment:
        public_bytes += f" {comment}".encode("utf-8")

    return (public_bytes, private_bytes)


def is_ssh_public_key(value: Optional[str]) -> bool:
    if not value:
        return False
    try:
        serialization.load_ssh_public_key(value.strip().encode("utf-8"), backend=default_backend())
        return True
    except (ValueError, TypeError, NotImplementedError, UnsupportedAlgorithm) as e:
        logger.debug(f"Unable to load ssh public key: {e}")
        return False
