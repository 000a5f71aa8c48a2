# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

"""
Load CLI commands
"""
from azure.cli.core.commands import CliCommandType

provision_resource_ops = CliCommandType(operations_tmpl="azext_aksprov.aksprov.commands_provision#{}")
env_resource_ops = CliCommandType(operations_tmpl="azext_aksprov.aksprov.commands_env#{}")


def load_aksprov_commands(self, _):
    """
    Load CLI commands
    """
    with self.command_group(
        "aksprov",
        command_type=provision_resource_ops,
        is_preview=True,
    ) as cmd_group:
        cmd_group.command("pre-provision", "pre_provision")
        cmd_group.command("deploy", "deploy")
        cmd_group.command("post-provision", "post_provision")
        cmd_group.command("storage-secret", "create_storage_secret")

    with self.command_group(
        "aksprov env",
        command_type=env_resource_ops,
        is_preview=True,
    ) as cmd_group:
        cmd_group.show_command("show", "show_env")
