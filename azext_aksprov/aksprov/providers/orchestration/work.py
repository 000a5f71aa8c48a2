# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

from enum import IntEnum
from json import dumps
from time import sleep
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple
from uuid import uuid4

from azure.cli.core.azclierror import AzureResponseError, InvalidArgumentValueError, ValidationError
from azure.core.exceptions import HttpResponseError
from knack.log import get_logger
from rich import print
from rich.console import NewLine
from rich.live import Live
from rich.padding import Padding
from rich.progress import Progress, SpinnerColumn, TimeElapsedColumn
from rich.style import Style
from rich.table import Table

from ...common import EnvKey
from ...util import EnvFile, get_env_root, is_ssh_public_key
from ...util.az_client import as_dict, get_resource_client, wait_for_terminal_state
from ..base import (
    apply_namespaced_pvc,
    apply_namespaced_service_account,
    apply_storage_class,
    create_namespaced_secret,
    load_kubeconfig,
    verify_cluster_connectivity,
)
from .common import (
    DEFAULT_SSH_KEY_NAME,
    DEFAULT_SSH_KEY_PATH,
    DEFAULT_STORAGE_SECRET_NAME,
    PROVISIONING_STATE_SUCCESS,
    ROLE_DEF_FORMAT_STR,
    STORAGE_FILE_DATA_SMB_SHARE_CONTRIBUTOR_ROLE_ID,
    STORAGE_SECRET_ACCOUNT_KEY_KEY,
    STORAGE_SECRET_ACCOUNT_NAME_KEY,
    WORKLOAD_IDENTITY_AUDIENCE,
    WORKLOAD_IDENTITY_CLIENT_ID_ANNOTATION,
    PrincipalType,
)
from .manifests import get_pvc_manifest, get_storage_class_manifest
from .permissions import PermissionManager
from .resources import (
    ManagedClusters,
    ManagedIdentities,
    ResourceGroups,
    SshPublicKeys,
    StorageAccounts,
    ensure_local_ssh_key,
)
from .targets import ProvisionTargets

logger = get_logger(__name__)

if TYPE_CHECKING:
    from azure.core.polling import LROPoller


class WorkCategoryKey(IntEnum):
    PRE_FLIGHT = 1
    PRE_PROVISION = 2
    DEPLOY_INFRA = 3
    CLUSTER_ACCESS = 4
    WORKLOAD_IDENTITY = 5
    CLUSTER_STORAGE = 6


class WorkStepKey(IntEnum):
    REG_RP = 1
    ENUMERATE_PRE_FLIGHT = 2
    ENSURE_RESOURCE_GROUP = 3
    ENSURE_LOCAL_SSH_KEY = 4
    ENSURE_AZURE_SSH_KEY = 5
    WHAT_IF_INFRA = 6
    DEPLOY_INFRA = 7
    FETCH_CREDENTIALS = 8
    VERIFY_CLUSTER = 9
    ENSURE_IDENTITY = 10
    ENSURE_ROLE_ASSIGNMENT = 11
    ENSURE_SERVICE_ACCOUNT = 12
    ENSURE_FEDERATED_CREDENTIAL = 13
    APPLY_STORAGE_CLASS = 14
    APPLY_PVC = 15
    READ_STORAGE_KEY = 16
    CREATE_SECRET = 17


class WorkRecord:
    def __init__(self, title: str, description: Optional[str] = None):
        self.title = title
        self.description = description


def get_user_msg_warn_ra(prefix: str, principal_id: str, scope: str) -> str:
    return (
        f"{prefix}\n\n"
        f"The workload managed identity with principal Id '{principal_id}' needs\n"
        "'Storage File Data SMB Share Contributor' or equivalent roles against scope:\n"
        f"'{scope}'\n\n"
        "Please handle this step before using the file share."
    )


def get_pod_spec_hint(service_account_name: str, client_id: str) -> str:
    return (
        "To use workload identity, pods should set:\n"
        f"  spec.serviceAccountName: {service_account_name}\n"
        "  metadata.labels: azure.workload.identity/use: \"true\"\n"
        f"The workload identity webhook injects AZURE_CLIENT_ID={client_id} into the pod."
    )


class WorkDisplay:
    def __init__(self):
        self._categories: Dict[int, Tuple[WorkRecord, bool]] = {}
        self._steps: Dict[int, Dict[int, WorkRecord]] = {}

    def add_category(
        self, category: WorkCategoryKey, title: str, skipped: bool = False, description: Optional[str] = None
    ):
        self._categories[category] = (WorkRecord(title, description), skipped)
        self._steps[category] = {}

    def add_step(self, category: WorkCategoryKey, step: WorkStepKey, title: str, description: Optional[str] = None):
        self._steps[category][step] = WorkRecord(title, description)

    @property
    def categories(self) -> Dict[int, Tuple[WorkRecord, bool]]:
        return self._categories

    @property
    def steps(self) -> Dict[int, Dict[int, WorkRecord]]:
        return self._steps


class WorkManager:
    def __init__(self, cmd, subscription_id: Optional[str] = None):
        from azure.cli.core.commands.client_factory import get_subscription_id

        self.cmd = cmd
        self.subscription_id: str = subscription_id or get_subscription_id(cli_ctx=cmd.cli_ctx)
        self.env_root = get_env_root(cmd.cli_ctx)
        self.resource_client = get_resource_client(subscription_id=self.subscription_id)
        self.permission_manager = PermissionManager(subscription_id=self.subscription_id)
        self.resource_groups = ResourceGroups(subscription_id=self.subscription_id)
        self.ssh_public_keys = SshPublicKeys(subscription_id=self.subscription_id)
        self.identities = ManagedIdentities(subscription_id=self.subscription_id)
        self.clusters = ManagedClusters(subscription_id=self.subscription_id)
        self.storage_accounts = StorageAccounts(subscription_id=self.subscription_id)

    def _bootstrap_ux(self, show_progress: bool = False):
        self._display = WorkDisplay()
        self._live = Live(None, transient=False, refresh_per_second=8, auto_refresh=show_progress)
        self._progress_bar = Progress(
            SpinnerColumn(),
            *Progress.get_default_columns(),
            "Elapsed:",
            TimeElapsedColumn(),
            transient=False,
        )
        self._show_progress = show_progress
        self._progress_shown = False

    def _bootstrap_work(self, show_progress: bool, pre_flight: bool, required: Tuple[str, ...] = (), **kwargs):
        self._targets = ProvisionTargets(subscription_id=self.subscription_id, **kwargs)
        self._targets.ensure_required(*required)
        self._env_file: Optional[EnvFile] = None
        if self._targets.env_name:
            self._env_file = EnvFile(env_name=self._targets.env_name, env_root=self.env_root)

        self._bootstrap_ux(show_progress=show_progress)
        self._work_id = uuid4().hex
        self._work_format_str = f"aksprov.{{op}}.{self._work_id}"
        self._pre_flight = pre_flight

        self._completed_steps: Dict[int, int] = {}
        self._active_step: int = 0
        self._result_payload = {}
        self._warnings: List[str] = []
        self._build_pre_flight_display()

    def _apply_env_defaults(self, kwargs: dict, key_map: Dict[str, EnvKey]):
        """
        Fill missing arguments from values previously recorded in the environment file.
        """
        env_name = kwargs.get("env_name")
        if not env_name:
            return
        env_values = EnvFile(env_name=env_name, env_root=self.env_root).read()
        for kwarg_key in key_map:
            if not kwargs.get(kwarg_key) and env_values.get(key_map[kwarg_key].value):
                logger.debug("Using %s from environment '%s'.", key_map[kwarg_key].value, env_name)
                kwargs[kwarg_key] = env_values[key_map[kwarg_key].value]

    def _record(self, values: Dict[str, Optional[str]]):
        if self._env_file:
            self._env_file.update(values)

    def _build_pre_flight_display(self):
        self._display.add_category(WorkCategoryKey.PRE_FLIGHT, "Pre-Flight", skipped=not self._pre_flight)
        self._display.add_step(WorkCategoryKey.PRE_FLIGHT, WorkStepKey.REG_RP, "Ensure registered resource providers")
        self._display.add_step(
            WorkCategoryKey.PRE_FLIGHT, WorkStepKey.ENUMERATE_PRE_FLIGHT, "Enumerate pre-flight checks"
        )

    def _format_template_desc(self) -> str:
        version_map = self._targets.get_template_versions()
        display_desc = "[dim]"
        for moniker in version_map:
            display_desc += f"• {moniker}: {version_map[moniker]}\n"
        return display_desc[:-1]

    def _do_pre_flight(self):
        from .host import verify_azure_login, verify_cli_client_connections
        from .rp_namespace import register_providers

        # Ensure connection to ARM if needed. Show remediation error message otherwise.
        self._render_display()
        verify_cli_client_connections()

        if not self._pre_flight:
            return

        # WorkStepKey.REG_RP
        self._render_display(category=WorkCategoryKey.PRE_FLIGHT, active_step=WorkStepKey.REG_RP)
        register_providers(self.subscription_id)
        self._complete_step(
            category=WorkCategoryKey.PRE_FLIGHT,
            completed_step=WorkStepKey.REG_RP,
            active_step=WorkStepKey.ENUMERATE_PRE_FLIGHT,
        )

        # WorkStepKey.ENUMERATE_PRE_FLIGHT
        verify_azure_login()
        self._complete_step(category=WorkCategoryKey.PRE_FLIGHT, completed_step=WorkStepKey.ENUMERATE_PRE_FLIGHT)

    def _run(self, work):
        try:
            self._do_pre_flight()
            work()
            return self._get_user_result()
        except HttpResponseError as e:
            raise AzureResponseError(e.message)
        except KeyboardInterrupt:
            return
        finally:
            self._stop_display()

    def execute_pre_provision(
        self,
        ssh_key_name: str = DEFAULT_SSH_KEY_NAME,
        ssh_key_path: str = DEFAULT_SSH_KEY_PATH,
        show_progress: bool = True,
        pre_flight: bool = True,
        **kwargs,
    ):
        self._bootstrap_work(
            show_progress=show_progress,
            pre_flight=pre_flight,
            required=("env_name", "location", "resource_group_name"),
            **kwargs,
        )
        self._ssh_key_name = ssh_key_name or DEFAULT_SSH_KEY_NAME
        self._ssh_key_path = ssh_key_path or DEFAULT_SSH_KEY_PATH

        self._display.add_category(WorkCategoryKey.PRE_PROVISION, "Pre-Provision")
        self._display.add_step(
            WorkCategoryKey.PRE_PROVISION,
            WorkStepKey.ENSURE_RESOURCE_GROUP,
            f"Ensure resource group [cyan]{self._targets.resource_group_name}",
        )
        self._display.add_step(
            WorkCategoryKey.PRE_PROVISION, WorkStepKey.ENSURE_LOCAL_SSH_KEY, "Ensure local SSH key pair"
        )
        self._display.add_step(
            WorkCategoryKey.PRE_PROVISION,
            WorkStepKey.ENSURE_AZURE_SSH_KEY,
            f"Ensure Azure SSH key [cyan]{self._ssh_key_name}",
        )

        return self._run(self._do_pre_provision)

    def _do_pre_provision(self):
        # WorkStepKey.ENSURE_RESOURCE_GROUP
        self._render_display(category=WorkCategoryKey.PRE_PROVISION, active_step=WorkStepKey.ENSURE_RESOURCE_GROUP)
        _, rg_created = self.resource_groups.ensure(
            resource_group_name=self._targets.resource_group_name,
            location=self._targets.location,
            tags=self._targets.tags,
        )
        self._record({EnvKey.resource_group.value: self._targets.resource_group_name})
        self._complete_step(
            category=WorkCategoryKey.PRE_PROVISION,
            completed_step=WorkStepKey.ENSURE_RESOURCE_GROUP,
            active_step=WorkStepKey.ENSURE_LOCAL_SSH_KEY,
        )

        # WorkStepKey.ENSURE_LOCAL_SSH_KEY
        local_key = ensure_local_ssh_key(self._ssh_key_path)
        self._complete_step(
            category=WorkCategoryKey.PRE_PROVISION,
            completed_step=WorkStepKey.ENSURE_LOCAL_SSH_KEY,
            active_step=WorkStepKey.ENSURE_AZURE_SSH_KEY,
        )

        # WorkStepKey.ENSURE_AZURE_SSH_KEY
        _, key_created = self.ssh_public_keys.ensure(
            name=self._ssh_key_name,
            resource_group_name=self._targets.resource_group_name,
            location=self._targets.location,
            public_key=local_key.public_key,
        )
        public_key = self.ssh_public_keys.get_public_key(
            name=self._ssh_key_name, resource_group_name=self._targets.resource_group_name
        )
        if public_key.split()[:2] != local_key.public_key.split()[:2]:
            self._warnings.append(
                f"The Azure SSH key '{self._ssh_key_name}' does not match the local public key at "
                f"'{local_key.public_key_path}'.\nCluster nodes will only accept the private key paired "
                "with the Azure SSH key."
            )
        self._record({EnvKey.ssh_public_key.value: public_key})
        self._complete_step(category=WorkCategoryKey.PRE_PROVISION, completed_step=WorkStepKey.ENSURE_AZURE_SSH_KEY)

        self._result_payload = {
            "resourceGroup": {"name": self._targets.resource_group_name, "created": rg_created},
            "localSshKey": {
                "privateKeyPath": local_key.private_key_path,
                "publicKeyPath": local_key.public_key_path,
                "created": local_key.created,
            },
            "azureSshKey": {"name": self._ssh_key_name, "created": key_created},
            "envFile": str(self._env_file.path),
        }

    def execute_deploy(
        self,
        show_progress: bool = True,
        pre_flight: bool = True,
        **kwargs,
    ):
        self._apply_env_defaults(
            kwargs,
            {"resource_group_name": EnvKey.resource_group, "ssh_public_key": EnvKey.ssh_public_key},
        )
        self._bootstrap_work(
            show_progress=show_progress,
            pre_flight=pre_flight,
            required=("env_name", "resource_group_name"),
            **kwargs,
        )
        if not is_ssh_public_key(self._targets.ssh_public_key):
            raise InvalidArgumentValueError(
                "A valid SSH public key is required. Run 'az aksprov pre-provision' or provide --ssh-public-key."
            )

        self._display.add_category(
            WorkCategoryKey.DEPLOY_INFRA, "Deploy Infrastructure", False, self._format_template_desc()
        )
        self._display.add_step(
            WorkCategoryKey.DEPLOY_INFRA,
            WorkStepKey.ENSURE_RESOURCE_GROUP,
            f"Ensure resource group [cyan]{self._targets.resource_group_name}",
        )
        self._display.add_step(WorkCategoryKey.DEPLOY_INFRA, WorkStepKey.WHAT_IF_INFRA, "What-If evaluation")
        self._display.add_step(
            WorkCategoryKey.DEPLOY_INFRA,
            WorkStepKey.DEPLOY_INFRA,
            f"Create cluster [cyan]{self._targets.cluster_name}",
        )

        return self._run(self._do_deploy)

    def _do_deploy(self):
        from .permissions import verify_write_permission_against_rg

        # WorkStepKey.ENSURE_RESOURCE_GROUP
        self._render_display(category=WorkCategoryKey.DEPLOY_INFRA, active_step=WorkStepKey.ENSURE_RESOURCE_GROUP)
        if self._targets.location:
            self.resource_groups.ensure(
                resource_group_name=self._targets.resource_group_name,
                location=self._targets.location,
                tags=self._targets.tags,
            )
        elif not self.resource_groups.show(resource_group_name=self._targets.resource_group_name):
            raise ValidationError(
                f"Resource group '{self._targets.resource_group_name}' does not exist. "
                "Provide --location or run 'az aksprov pre-provision'."
            )
        self._complete_step(
            category=WorkCategoryKey.DEPLOY_INFRA,
            completed_step=WorkStepKey.ENSURE_RESOURCE_GROUP,
            active_step=WorkStepKey.WHAT_IF_INFRA,
        )

        # WorkStepKey.WHAT_IF_INFRA
        if self._pre_flight:
            verify_write_permission_against_rg(
                subscription_id=self.subscription_id, resource_group_name=self._targets.resource_group_name
            )
        infra_work_name = self._work_format_str.format(op="infra")
        infra_content, infra_parameters = self._targets.get_infra_template()
        self._deploy_template(
            content=infra_content,
            parameters=infra_parameters,
            deployment_name=infra_work_name,
            what_if=True,
        )
        self._complete_step(
            category=WorkCategoryKey.DEPLOY_INFRA,
            completed_step=WorkStepKey.WHAT_IF_INFRA,
            active_step=WorkStepKey.DEPLOY_INFRA,
        )

        # WorkStepKey.DEPLOY_INFRA
        infra_poller = self._deploy_template(
            content=infra_content,
            parameters=infra_parameters,
            deployment_name=infra_work_name,
        )
        # Pattern needs work, it is this way to dynamically update UI
        self._display.categories[WorkCategoryKey.DEPLOY_INFRA][0].title = (
            f"[link={self._get_deployment_link(infra_work_name)}]"
            f"{self._display.categories[WorkCategoryKey.DEPLOY_INFRA][0].title}[/link]"
        )
        self._render_display(category=WorkCategoryKey.DEPLOY_INFRA)
        deployment = as_dict(wait_for_terminal_state(infra_poller))
        outputs = self._get_deployment_outputs(deployment)
        self._complete_step(category=WorkCategoryKey.DEPLOY_INFRA, completed_step=WorkStepKey.DEPLOY_INFRA)

        self._record(
            {
                EnvKey.cluster_name.value: outputs.get("clusterName"),
                EnvKey.oidc_issuer.value: outputs.get("oidcIssuerUrl"),
                EnvKey.storage_account.value: outputs.get("storageAccountName"),
                EnvKey.file_share.value: outputs.get("fileShareName"),
                EnvKey.identity_name.value: outputs.get("identityName"),
                EnvKey.identity_client_id.value: outputs.get("identityClientId"),
            }
        )
        self._result_payload = {
            "deploymentName": infra_work_name,
            "resourceGroup": self._targets.resource_group_name,
            "outputs": outputs,
            "envFile": str(self._env_file.path),
        }

    def _get_deployment_outputs(self, deployment: dict) -> Dict[str, str]:
        properties = (deployment or {}).get("properties", {})
        provisioning_state = properties.get("provisioning_state")
        if provisioning_state and provisioning_state.lower() != PROVISIONING_STATE_SUCCESS.lower():
            raise AzureResponseError(dumps(properties.get("error") or deployment, indent=2))

        outputs = properties.get("outputs") or {}
        return {name: outputs[name].get("value") for name in outputs}

    def execute_post_provision(
        self,
        apply_storage: bool = False,
        storage_class_file: Optional[str] = None,
        pvc_file: Optional[str] = None,
        kubeconfig_file: Optional[str] = None,
        show_progress: bool = True,
        pre_flight: bool = True,
        **kwargs,
    ):
        self._apply_env_defaults(
            kwargs,
            {"resource_group_name": EnvKey.resource_group, "cluster_name": EnvKey.cluster_name},
        )
        self._bootstrap_work(
            show_progress=show_progress,
            pre_flight=pre_flight,
            required=("env_name", "subscription_id", "resource_group_name", "cluster_name", "namespace"),
            **kwargs,
        )
        self._apply_storage = apply_storage
        self._storage_class_file = storage_class_file
        self._pvc_file = pvc_file
        self._kubeconfig_file = kubeconfig_file
        self._build_cluster_access_display()

        self._display.add_category(WorkCategoryKey.WORKLOAD_IDENTITY, "Workload Identity")
        self._display.add_step(
            WorkCategoryKey.WORKLOAD_IDENTITY,
            WorkStepKey.ENSURE_IDENTITY,
            f"Ensure managed identity [cyan]{self._targets.identity_name}",
        )
        if self._targets.storage_account_name:
            self._display.add_step(
                WorkCategoryKey.WORKLOAD_IDENTITY,
                WorkStepKey.ENSURE_ROLE_ASSIGNMENT,
                f"Ensure storage role assignment on [cyan]{self._targets.storage_account_name}",
            )
        self._display.add_step(
            WorkCategoryKey.WORKLOAD_IDENTITY,
            WorkStepKey.ENSURE_SERVICE_ACCOUNT,
            f"Ensure service account [cyan]{self._targets.namespace}/{self._targets.service_account_name}",
        )
        self._display.add_step(
            WorkCategoryKey.WORKLOAD_IDENTITY,
            WorkStepKey.ENSURE_FEDERATED_CREDENTIAL,
            f"Ensure federated credential [cyan]{self._targets.credential_name}",
        )

        self._display.add_category(WorkCategoryKey.CLUSTER_STORAGE, "Cluster Storage", skipped=not apply_storage)
        self._display.add_step(WorkCategoryKey.CLUSTER_STORAGE, WorkStepKey.APPLY_STORAGE_CLASS, "Apply StorageClass")
        self._display.add_step(WorkCategoryKey.CLUSTER_STORAGE, WorkStepKey.APPLY_PVC, "Apply PersistentVolumeClaim")

        return self._run(self._do_post_provision)

    def _build_cluster_access_display(self):
        self._display.add_category(WorkCategoryKey.CLUSTER_ACCESS, f"Cluster [cyan]{self._targets.cluster_name}")
        self._display.add_step(WorkCategoryKey.CLUSTER_ACCESS, WorkStepKey.FETCH_CREDENTIALS, "Fetch user credentials")
        self._display.add_step(WorkCategoryKey.CLUSTER_ACCESS, WorkStepKey.VERIFY_CLUSTER, "Verify API server access")

    def _do_cluster_access(self):
        # WorkStepKey.FETCH_CREDENTIALS
        self._render_display(category=WorkCategoryKey.CLUSTER_ACCESS, active_step=WorkStepKey.FETCH_CREDENTIALS)
        kubeconfig = self.clusters.get_user_kubeconfig(
            name=self._targets.cluster_name, resource_group_name=self._targets.resource_group_name
        )
        load_kubeconfig(kubeconfig, kubeconfig_file=self._kubeconfig_file)
        self._complete_step(
            category=WorkCategoryKey.CLUSTER_ACCESS,
            completed_step=WorkStepKey.FETCH_CREDENTIALS,
            active_step=WorkStepKey.VERIFY_CLUSTER,
        )

        # WorkStepKey.VERIFY_CLUSTER
        if not verify_cluster_connectivity():
            self._warnings.append(
                f"Unable to reach the Kubernetes API server of cluster '{self._targets.cluster_name}'.\n"
                "Subsequent cluster operations may fail."
            )
        self._complete_step(category=WorkCategoryKey.CLUSTER_ACCESS, completed_step=WorkStepKey.VERIFY_CLUSTER)

    def _do_post_provision(self):
        from .targets import ensure_https_url

        oidc_issuer = self._targets.oidc_issuer or self.clusters.get_oidc_issuer(
            name=self._targets.cluster_name, resource_group_name=self._targets.resource_group_name
        )
        oidc_issuer = ensure_https_url(oidc_issuer)

        self._do_cluster_access()

        # WorkStepKey.ENSURE_IDENTITY
        self._render_display(category=WorkCategoryKey.WORKLOAD_IDENTITY, active_step=WorkStepKey.ENSURE_IDENTITY)
        location = self._targets.location
        if not location and not self.identities.show(
            name=self._targets.identity_name, resource_group_name=self._targets.resource_group_name
        ):
            # identity is created alongside its resource group
            resource_group = self.resource_groups.show(resource_group_name=self._targets.resource_group_name)
            location = (resource_group or {}).get("location")
        identity, _ = self.identities.ensure(
            name=self._targets.identity_name,
            resource_group_name=self._targets.resource_group_name,
            location=location,
            tags=self._targets.tags,
        )
        client_id = self.identities.get_client_id(identity)
        self._record(
            {
                EnvKey.identity_name.value: self._targets.identity_name,
                EnvKey.identity_client_id.value: client_id,
            }
        )
        self._complete_step(category=WorkCategoryKey.WORKLOAD_IDENTITY, completed_step=WorkStepKey.ENSURE_IDENTITY)

        # WorkStepKey.ENSURE_ROLE_ASSIGNMENT
        if self._targets.storage_account_name:
            self._render_display(
                category=WorkCategoryKey.WORKLOAD_IDENTITY, active_step=WorkStepKey.ENSURE_ROLE_ASSIGNMENT
            )
            self._apply_storage_role_assignment(principal_id=identity.get("principal_id"))
            self._complete_step(
                category=WorkCategoryKey.WORKLOAD_IDENTITY, completed_step=WorkStepKey.ENSURE_ROLE_ASSIGNMENT
            )

        # WorkStepKey.ENSURE_SERVICE_ACCOUNT
        self._render_display(
            category=WorkCategoryKey.WORKLOAD_IDENTITY, active_step=WorkStepKey.ENSURE_SERVICE_ACCOUNT
        )
        _, sa_action = apply_namespaced_service_account(
            name=self._targets.service_account_name,
            namespace=self._targets.namespace,
            annotations={WORKLOAD_IDENTITY_CLIENT_ID_ANNOTATION: client_id},
        )
        logger.info(
            "Service account '%s/%s' %s", self._targets.namespace, self._targets.service_account_name, sa_action
        )
        self._record(
            {
                EnvKey.service_account_namespace.value: self._targets.namespace,
                EnvKey.service_account_name.value: self._targets.service_account_name,
            }
        )
        self._complete_step(
            category=WorkCategoryKey.WORKLOAD_IDENTITY, completed_step=WorkStepKey.ENSURE_SERVICE_ACCOUNT
        )

        # WorkStepKey.ENSURE_FEDERATED_CREDENTIAL
        self._render_display(
            category=WorkCategoryKey.WORKLOAD_IDENTITY, active_step=WorkStepKey.ENSURE_FEDERATED_CREDENTIAL
        )
        self.identities.federated_credentials.ensure(
            name=self._targets.credential_name,
            identity_name=self._targets.identity_name,
            resource_group_name=self._targets.resource_group_name,
            issuer=oidc_issuer,
            subject=self._targets.subject,
            audiences=[WORKLOAD_IDENTITY_AUDIENCE],
        )
        self._record({EnvKey.federated_credential_name.value: self._targets.credential_name})
        self._complete_step(
            category=WorkCategoryKey.WORKLOAD_IDENTITY, completed_step=WorkStepKey.ENSURE_FEDERATED_CREDENTIAL
        )

        storage_result = None
        if self._apply_storage:
            storage_result = self._do_cluster_storage()

        self._result_payload = {
            "cluster": self._targets.cluster_name,
            "oidcIssuer": oidc_issuer,
            "identity": {"name": self._targets.identity_name, "clientId": client_id},
            "serviceAccount": {
                "name": self._targets.service_account_name,
                "namespace": self._targets.namespace,
                "action": sa_action,
            },
            "federatedCredential": {"name": self._targets.credential_name, "subject": self._targets.subject},
            "podSpecHint": get_pod_spec_hint(self._targets.service_account_name, client_id),
            "envFile": str(self._env_file.path),
        }
        if storage_result:
            self._result_payload["storage"] = storage_result

    def _apply_storage_role_assignment(self, principal_id: Optional[str]):
        scope = (
            f"/subscriptions/{self.subscription_id}/resourceGroups/{self._targets.resource_group_name}"
            f"/providers/Microsoft.Storage/storageAccounts/{self._targets.storage_account_name}"
        )
        if not principal_id:
            raise ValidationError(f"Unable to determine the principal Id of '{self._targets.identity_name}'.")
        try:
            self.permission_manager.apply_role_assignment(
                scope=scope,
                principal_id=principal_id,
                role_def_id=ROLE_DEF_FORMAT_STR.format(
                    subscription_id=self.subscription_id,
                    role_id=STORAGE_FILE_DATA_SMB_SHARE_CONTRIBUTOR_ROLE_ID,
                ),
                principal_type=PrincipalType.SERVICE_PRINCIPAL.value,
            )
        except HttpResponseError as e:
            self._warnings.append(
                get_user_msg_warn_ra(
                    prefix=f"Role assignment failed with:\n{str(e)}",
                    principal_id=principal_id,
                    scope=scope,
                )
            )

    def _do_cluster_storage(self) -> dict:
        # WorkStepKey.APPLY_STORAGE_CLASS
        self._render_display(category=WorkCategoryKey.CLUSTER_STORAGE, active_step=WorkStepKey.APPLY_STORAGE_CLASS)
        storage_class = apply_storage_class(body=get_storage_class_manifest(self._storage_class_file))
        storage_class_name = storage_class["metadata"]["name"]
        logger.info("StorageClass '%s' created/updated successfully", storage_class_name)
        self._complete_step(
            category=WorkCategoryKey.CLUSTER_STORAGE,
            completed_step=WorkStepKey.APPLY_STORAGE_CLASS,
            active_step=WorkStepKey.APPLY_PVC,
        )

        # WorkStepKey.APPLY_PVC
        pvc = apply_namespaced_pvc(
            body=get_pvc_manifest(self._pvc_file, storage_class_name=storage_class_name),
            namespace=self._targets.namespace,
        )
        logger.info("PersistentVolumeClaim '%s' created/updated successfully", pvc["metadata"]["name"])
        self._complete_step(category=WorkCategoryKey.CLUSTER_STORAGE, completed_step=WorkStepKey.APPLY_PVC)

        return {"storageClass": storage_class_name, "persistentVolumeClaim": pvc["metadata"]["name"]}

    def execute_storage_secret(
        self,
        storage_account_name: Optional[str] = None,
        secret_name: str = DEFAULT_STORAGE_SECRET_NAME,
        storage_resource_group_name: Optional[str] = None,
        replace: bool = False,
        show_progress: bool = True,
        pre_flight: bool = True,
        **kwargs,
    ):
        kwargs["storage_account_name"] = storage_account_name
        self._apply_env_defaults(
            kwargs,
            {
                "resource_group_name": EnvKey.resource_group,
                "cluster_name": EnvKey.cluster_name,
                "storage_account_name": EnvKey.storage_account,
            },
        )
        if not storage_account_name and not storage_resource_group_name:
            # Accounts recorded by deploy live in the environment resource group.
            storage_resource_group_name = kwargs.get("resource_group_name")
        self._bootstrap_work(
            show_progress=show_progress,
            pre_flight=pre_flight,
            required=("resource_group_name", "cluster_name", "storage_account_name", "namespace"),
            **kwargs,
        )
        self._secret_name = secret_name
        self._storage_resource_group_name = storage_resource_group_name
        self._replace_secret = replace
        self._kubeconfig_file = None
        self._build_cluster_access_display()

        self._display.add_category(WorkCategoryKey.CLUSTER_STORAGE, "Storage Secret")
        self._display.add_step(
            WorkCategoryKey.CLUSTER_STORAGE,
            WorkStepKey.READ_STORAGE_KEY,
            f"Read access key of [cyan]{self._targets.storage_account_name}",
        )
        self._display.add_step(
            WorkCategoryKey.CLUSTER_STORAGE,
            WorkStepKey.CREATE_SECRET,
            f"Create secret [cyan]{self._targets.namespace}/{secret_name}",
        )

        return self._run(self._do_storage_secret)

    def _do_storage_secret(self):
        self._do_cluster_access()

        # WorkStepKey.READ_STORAGE_KEY
        self._render_display(category=WorkCategoryKey.CLUSTER_STORAGE, active_step=WorkStepKey.READ_STORAGE_KEY)
        storage_rg = self._storage_resource_group_name
        if not storage_rg:
            storage_rg = self.clusters.get_node_resource_group(
                name=self._targets.cluster_name, resource_group_name=self._targets.resource_group_name
            )
            logger.info("Node resource group is: %s", storage_rg)
        storage_key = self.storage_accounts.get_primary_key(
            name=self._targets.storage_account_name, resource_group_name=storage_rg
        )
        logger.info("Storage key retrieved successfully")
        self._complete_step(
            category=WorkCategoryKey.CLUSTER_STORAGE,
            completed_step=WorkStepKey.READ_STORAGE_KEY,
            active_step=WorkStepKey.CREATE_SECRET,
        )

        # WorkStepKey.CREATE_SECRET
        secret = create_namespaced_secret(
            secret_name=self._secret_name,
            namespace=self._targets.namespace,
            data={
                STORAGE_SECRET_ACCOUNT_NAME_KEY: self._targets.storage_account_name,
                STORAGE_SECRET_ACCOUNT_KEY_KEY: storage_key,
            },
            delete_first=self._replace_secret,
        )
        self._complete_step(category=WorkCategoryKey.CLUSTER_STORAGE, completed_step=WorkStepKey.CREATE_SECRET)

        metadata = secret.get("metadata", {})
        self._result_payload = {
            "name": metadata.get("name"),
            "namespace": metadata.get("namespace"),
            "creationTimestamp": metadata.get("creationTimestamp"),
            "type": secret.get("type"),
            "storageResourceGroup": storage_rg,
            "dataKeys": sorted((secret.get("data") or {}).keys()),
        }

    def _deploy_template(
        self,
        content: dict,
        parameters: dict,
        deployment_name: str,
        what_if: bool = False,
    ) -> Optional["LROPoller"]:
        deployment_params = {"properties": {"mode": "Incremental", "template": content, "parameters": parameters}}
        if what_if:
            what_if_poller = self.resource_client.deployments.begin_what_if(
                resource_group_name=self._targets.resource_group_name,
                deployment_name=deployment_name,
                parameters=deployment_params,
            )
            terminal_what_if_deployment = as_dict(wait_for_terminal_state(what_if_poller))
            if (
                "status" in terminal_what_if_deployment
                and terminal_what_if_deployment["status"].lower() != PROVISIONING_STATE_SUCCESS.lower()
            ):
                raise AzureResponseError(dumps(terminal_what_if_deployment, indent=2))
            return

        return self.resource_client.deployments.begin_create_or_update(
            resource_group_name=self._targets.resource_group_name,
            deployment_name=deployment_name,
            parameters=deployment_params,
        )

    def _complete_step(
        self, category: WorkCategoryKey, completed_step: WorkStepKey, active_step: Optional[WorkStepKey] = None
    ):
        self._completed_steps[completed_step] = 1
        self._render_display(category, active_step=active_step)

    def _render_display(self, category: Optional[WorkCategoryKey] = None, active_step: Optional[WorkStepKey] = None):
        if active_step:
            self._active_step = active_step

        if self._show_progress:
            grid = Table.grid(expand=False)
            grid.add_column()
            header_grid = Table.grid(expand=False)
            header_grid.add_column()

            header_grid.add_row(NewLine(1))
            header_grid.add_row(
                "[light_slate_gray]AKS Provisioning",
                style=Style(bold=True),
            )
            if self._env_file:
                header_grid.add_row(f"Environment: [cyan]{self._env_file.env_name}")
            header_grid.add_row(f"Workflow Id: [dark_orange3]{self._work_id}")
            header_grid.add_row(NewLine(1))

            content_grid = Table.grid(expand=False)
            content_grid.add_column(max_width=3)
            content_grid.add_column(max_width=72)

            active_cat_str = "[cyan]->[/cyan] "
            active_step_str = "[cyan]*[/cyan]"
            complete_str = "[green]:heavy_check_mark:[/green]"
            for c in self._display.categories:
                cat_prefix = active_cat_str if c == category else ""
                content_grid.add_row(
                    cat_prefix,
                    f"{self._display.categories[c][0].title} "
                    f"{'[[dark_khaki]skipped[/dark_khaki]]' if self._display.categories[c][1] else ''}",
                )
                if self._display.categories[c][0].description:
                    content_grid.add_row(
                        "",
                        Padding(
                            self._display.categories[c][0].description,
                            (0, 0, 0, 4),
                        ),
                    )
                for s in self._display.steps.get(c, {}):
                    if s in self._completed_steps:
                        step_prefix = complete_str
                    elif s == self._active_step:
                        step_prefix = active_step_str
                    else:
                        step_prefix = "-"

                    content_grid.add_row(
                        "",
                        Padding(
                            f"{step_prefix} {self._display.steps[c][s].title} ",
                            (0, 0, 0, 2),
                        ),
                    )
            content_grid.add_row(NewLine(1), NewLine(1))

            footer_grid = Table.grid(expand=False)
            footer_grid.add_column()

            footer_grid.add_row(self._progress_bar)
            footer_grid.add_row(NewLine(1))

            grid.add_row(header_grid)
            grid.add_row(content_grid)
            grid.add_row(footer_grid)

            if not self._progress_shown:
                self._task_id = self._progress_bar.add_task(description="Work.", total=None)
                self._progress_shown = True
            self._live.update(grid)
            sleep(0.5)  # min presentation delay

        if self._show_progress and not self._live.is_started:
            self._live.start(True)

    def _stop_display(self):
        if self._show_progress and self._live.is_started:
            if self._progress_shown:
                self._progress_bar.update(self._task_id, description="Done.")
                sleep(0.5)
            self._live.stop()

    def _get_user_result(self) -> Optional[dict]:
        if self._show_progress:
            self._stop_display()
            hint = self._result_payload.get("podSpecHint")
            if hint:
                print(Padding(hint, (0, 0, 1, 2)))

        if self._warnings:
            for w in self._warnings:
                logger.warning(w + "\n")

        return self._result_payload

    def _get_deployment_link(self, deployment_name: str) -> str:
        return (
            "https://portal.azure.com/#blade/HubsExtension/DeploymentDetailsBlade/id/"
            f"%2Fsubscriptions%2F{self.subscription_id}%2FresourceGroups%2F{self._targets.resource_group_name}"
            f"%2Fproviders%2FMicrosoft.Resources%2Fdeployments%2F{deployment_name}"
        )
