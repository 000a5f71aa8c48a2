# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

from typing import Optional
from knack.log import get_logger

from ...util.az_client import as_dict, get_resource_client

logger = get_logger(__name__)


RP_NAMESPACE_SET = frozenset(
    [
        "Microsoft.ContainerService",
        "Microsoft.Storage",
        "Microsoft.ManagedIdentity",
        "Microsoft.Compute",
    ]
)


def register_providers(subscription_id: str, resource_provider: Optional[str] = None):
    resource_client = get_resource_client(subscription_id=subscription_id)
    providers_list = resource_client.providers.list()
    required_providers = [resource_provider] if resource_provider else RP_NAMESPACE_SET
    for provider in providers_list:
        provider = as_dict(provider)
        if "namespace" in provider and provider["namespace"] in required_providers:
            if provider.get("registration_state") == "Registered":
                logger.debug("RP %s is already registered.", provider["namespace"])
                continue
            logger.debug("Registering RP %s.", provider["namespace"])
            resource_client.providers.register(provider["namespace"])
