# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

import pytest

from azext_aksprov.aksprov.util.az_client import (
    POLL_RETRIES,
    POLL_WAIT_SEC,
    as_dict,
    get_default_logging_policy,
    wait_for_terminal_state,
)

from ..generators import generate_random_string


@pytest.fixture
def mocked_sleep(mocker):
    yield mocker.patch("azext_aksprov.aksprov.util.az_client.sleep")


def test_as_dict(mocker):
    assert as_dict(None) is None

    plain = {"name": generate_random_string()}
    assert as_dict(plain) is plain

    model = mocker.Mock()
    model.as_dict.return_value = {"client_id": generate_random_string()}
    assert as_dict(model) == model.as_dict.return_value
    model.as_dict.assert_called_once()


@pytest.mark.parametrize("done_after", [1, 3])
def test_wait_for_terminal_state(mocker, mocked_sleep, done_after):
    poller = mocker.Mock()
    poller.done.side_effect = [False] * (done_after - 1) + [True]
    poller.result.return_value = {"properties": {"provisioningState": "Succeeded"}}

    result = wait_for_terminal_state(poller)
    assert result == poller.result.return_value
    assert poller.done.call_count == done_after
    assert mocked_sleep.call_count == done_after
    mocked_sleep.assert_called_with(POLL_WAIT_SEC)


def test_wait_for_terminal_state_exhausts_retries(mocker, mocked_sleep):
    poller = mocker.Mock()
    poller.done.return_value = False

    wait_for_terminal_state(poller, wait_sec=1)
    assert poller.done.call_count == POLL_RETRIES
    mocked_sleep.assert_called_with(1)
    poller.result.assert_called_once()


def test_get_default_logging_policy():
    policy = get_default_logging_policy()
    assert "api-version" in policy.allowed_query_params
    assert "$filter" in policy.allowed_query_params
    assert "x-ms-correlation-request-id" in policy.allowed_header_names
