# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------


from argparse import Namespace
from azure.cli.core.azclierror import InvalidArgumentValueError


def validate_namespace(namespace: Namespace):
    if hasattr(namespace, "namespace") and namespace.namespace:
        import re

        # first and last character must be alphanumeric
        if not re.fullmatch("[a-z0-9]([a-z0-9-]{0,61}[a-z0-9])?", namespace.namespace):
            raise InvalidArgumentValueError(
                f"Invalid namespace specifier '{namespace.namespace}': Limited to 63 total characters, "
                "only lowercase alphanumeric characters and '-' allowed."
            )


def validate_env_name(namespace: Namespace):
    if hasattr(namespace, "env_name") and namespace.env_name:
        import re

        if not re.fullmatch(r"[a-zA-Z0-9][a-zA-Z0-9\-_]{0,63}", namespace.env_name):
            raise InvalidArgumentValueError(
                f"Invalid environment name '{namespace.env_name}'. "
                "Only alphanumeric characters, hyphens and underscores are allowed."
            )


def validate_storage_account_name(namespace: Namespace):
    if hasattr(namespace, "storage_account_name") and namespace.storage_account_name:
        import re

        if not re.fullmatch("[a-z0-9]{3,24}", namespace.storage_account_name):
            raise InvalidArgumentValueError(
                f"Invalid storage account name '{namespace.storage_account_name}'. "
                "Use 3 to 24 lowercase letters and numbers."
            )


def validate_oidc_issuer(namespace: Namespace):
    if hasattr(namespace, "oidc_issuer") and namespace.oidc_issuer:
        from .providers.orchestration.targets import ensure_https_url

        ensure_https_url(namespace.oidc_issuer)
