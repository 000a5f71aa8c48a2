# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

from azure.cli.core import AzCommandsLoader
from azext_aksprov.constants import VERSION


class AksProvisionCommandsLoader(AzCommandsLoader):
    def __init__(self, cli_ctx=None):
        super(AksProvisionCommandsLoader, self).__init__(cli_ctx=cli_ctx)

    def load_command_table(self, args):
        from azext_aksprov.aksprov._help import load_aksprov_help
        from azext_aksprov.aksprov.command_map import load_aksprov_commands

        load_aksprov_help()
        load_aksprov_commands(self, args)

        return self.command_table

    def load_arguments(self, command):
        from azext_aksprov.aksprov.params import load_aksprov_arguments

        load_aksprov_arguments(self, command)


COMMAND_LOADER_CLS = AksProvisionCommandsLoader

__version__ = VERSION
