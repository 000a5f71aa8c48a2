# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

from typing import Optional

import pytest
from azure.cli.core.azclierror import ValidationError

from azext_aksprov.aksprov.providers.orchestration.common import WORKLOAD_IDENTITY_AUDIENCE
from azext_aksprov.aksprov.providers.orchestration.resources import ManagedIdentities

from ....generators import generate_random_string, get_zeroed_subscription
from .conftest import get_not_found_error


def get_mock_identity(name: str, location: str = "eastus") -> dict:
    return {
        "name": name,
        "location": location,
        "client_id": generate_random_string(),
        "principal_id": generate_random_string(),
        "tenant_id": generate_random_string(),
    }


def get_mock_federated_credential(name: str, issuer: str, subject: str) -> dict:
    return {
        "name": name,
        "issuer": issuer,
        "subject": subject,
        "audiences": [WORKLOAD_IDENTITY_AUDIENCE],
    }


@pytest.mark.parametrize("exists", [False, True])
@pytest.mark.parametrize("tags", [None, {generate_random_string(): generate_random_string()}])
def test_identity_ensure(mocked_msi_client, exists: bool, tags: Optional[dict]):
    name = generate_random_string()
    resource_group_name = generate_random_string()
    location = generate_random_string()
    mock_identity = get_mock_identity(name, location)
    if exists:
        mocked_msi_client.user_assigned_identities.get.return_value = mock_identity
    else:
        mocked_msi_client.user_assigned_identities.get.side_effect = get_not_found_error()
        mocked_msi_client.user_assigned_identities.create_or_update.return_value = mock_identity

    identities = ManagedIdentities(subscription_id=get_zeroed_subscription())
    result, created = identities.ensure(
        name=name, resource_group_name=resource_group_name, location=location, tags=tags
    )
    assert result == mock_identity
    assert created is not exists
    assert ManagedIdentities.get_client_id(result) == mock_identity["client_id"]
    mocked_msi_client.user_assigned_identities.get.assert_called_once_with(
        resource_group_name=resource_group_name, resource_name=name
    )

    if exists:
        mocked_msi_client.user_assigned_identities.create_or_update.assert_not_called()
        return

    expected_parameters = {"location": location}
    if tags:
        expected_parameters["tags"] = tags
    mocked_msi_client.user_assigned_identities.create_or_update.assert_called_once_with(
        resource_group_name=resource_group_name, resource_name=name, parameters=expected_parameters
    )


def test_identity_ensure_requires_location(mocked_msi_client):
    mocked_msi_client.user_assigned_identities.get.side_effect = get_not_found_error()

    identities = ManagedIdentities(subscription_id=get_zeroed_subscription())
    with pytest.raises(ValidationError, match="A location is required"):
        identities.ensure(name=generate_random_string(), resource_group_name=generate_random_string())
    mocked_msi_client.user_assigned_identities.create_or_update.assert_not_called()


@pytest.mark.parametrize("identity", [None, {}, {"name": "identity", "client_id": None}])
def test_identity_get_client_id_missing(identity):
    with pytest.raises(ValidationError):
        ManagedIdentities.get_client_id(identity)


@pytest.mark.parametrize(
    "existing_binding, expected_changed",
    [
        (None, True),
        ("match", False),
        ("issuer", True),
        ("subject", True),
    ],
)
def test_federated_credential_ensure(mocked_msi_client, existing_binding: Optional[str], expected_changed: bool):
    name = generate_random_string()
    identity_name = generate_random_string()
    resource_group_name = generate_random_string()
    issuer = f"https://oidc.prod-aks.azure.com/{generate_random_string()}/"
    subject = f"system:serviceaccount:default:{generate_random_string(force_lower=True)}"

    desired = get_mock_federated_credential(name, issuer, subject)
    ops = mocked_msi_client.federated_identity_credentials
    if existing_binding is None:
        ops.get.side_effect = get_not_found_error()
    elif existing_binding == "match":
        ops.get.return_value = desired
    elif existing_binding == "issuer":
        ops.get.return_value = get_mock_federated_credential(name, "https://other.issuer/", subject)
    else:
        ops.get.return_value = get_mock_federated_credential(name, issuer, "system:serviceaccount:other:sa")
    ops.create_or_update.return_value = desired

    identities = ManagedIdentities(subscription_id=get_zeroed_subscription())
    result, changed = identities.federated_credentials.ensure(
        name=name,
        identity_name=identity_name,
        resource_group_name=resource_group_name,
        issuer=issuer,
        subject=subject,
    )
    assert result == desired
    assert changed is expected_changed
    ops.get.assert_called_once_with(
        resource_group_name=resource_group_name,
        resource_name=identity_name,
        federated_identity_credential_resource_name=name,
    )

    if not expected_changed:
        ops.create_or_update.assert_not_called()
        return

    ops.create_or_update.assert_called_once_with(
        resource_group_name=resource_group_name,
        resource_name=identity_name,
        federated_identity_credential_resource_name=name,
        parameters={"issuer": issuer, "subject": subject, "audiences": [WORKLOAD_IDENTITY_AUDIENCE]},
    )
