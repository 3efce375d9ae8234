"""Kubernetes ConfigMap access and the mapRoles YAML codec."""

from __future__ import annotations

import logging

import yaml
from kubernetes import client, config
from kubernetes.client.exceptions import ApiException
from pydantic import ValidationError

from sso_role_sync.config import SERVICE_ACCOUNT_NAMESPACE_FILE
from sso_role_sync.schemas import RoleMapping, RoleMappingsFormatError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Client bootstrap
# ---------------------------------------------------------------------------

def get_core_v1_api() -> client.CoreV1Api:
    """CoreV1Api from in-cluster config, falling back to the local kubeconfig."""
    logger.debug("Initialising Kubernetes in-cluster client")
    try:
        config.load_incluster_config()
    except config.ConfigException:
        logger.debug("Failed to initialise in-cluster client, falling back to kubeconfig")
        config.load_kube_config()
        logger.debug("Successfully initialised kubeconfig client")
    else:
        logger.debug("Successfully initialised in-cluster client")
    return client.CoreV1Api()


def get_current_namespace(path: str = SERVICE_ACCOUNT_NAMESPACE_FILE) -> str:
    """Namespace the pod runs in, read from its service account mount."""
    logger.info("Getting current namespace")
    with open(path) as f:
        namespace = f.read().strip()
    logger.debug(f"Current namespace: {namespace}")
    return namespace


# ---------------------------------------------------------------------------
# ConfigMap read / write
# ---------------------------------------------------------------------------

def get_configmap(api, name: str, namespace: str) -> client.V1ConfigMap:
    """
    Read a ConfigMap.

    Raises:
        ApiException: If the ConfigMap is missing (status 404) or the read fails.
    """
    logger.info(f"Retrieving ConfigMap {name} from namespace {namespace}")
    try:
        configmap = api.read_namespaced_config_map(name=name, namespace=namespace)
    except ApiException as e:
        if e.status == 404:
            logger.error(f"ConfigMap {name} not found in namespace {namespace}")
        else:
            logger.error(f"Error getting {name} config-map from namespace {namespace}. {e.reason}")
        raise

    logger.info(f"Successfully retrieved ConfigMap {name} from namespace {namespace}")
    return configmap


def set_configmap(api, name: str, namespace: str, data: dict[str, str]) -> None:
    """Create the ConfigMap if it does not exist, otherwise replace it."""
    logger.info(f"Setting ConfigMap {name} in namespace {namespace}")

    body = client.V1ConfigMap(
        api_version="v1",
        kind="ConfigMap",
        metadata=client.V1ObjectMeta(name=name, namespace=namespace),
        data=data,
    )

    try:
        api.read_namespaced_config_map(name=name, namespace=namespace)
    except ApiException as e:
        if e.status != 404:
            raise
        api.create_namespaced_config_map(namespace=namespace, body=body)
    else:
        api.replace_namespaced_config_map(name=name, namespace=namespace, body=body)

    logger.info(f"Successfully set ConfigMap {name} in namespace {namespace}")


# ---------------------------------------------------------------------------
# mapRoles codec
# ---------------------------------------------------------------------------

def load_role_mappings(text: str | None) -> list[RoleMapping]:
    """Decode mapRoles YAML. Missing or empty data yields no mappings."""
    if not text:
        return []
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise RoleMappingsFormatError(f"Failed to parse mapRoles YAML: {e}", original_error=e)

    if data is None:
        return []
    if not isinstance(data, list):
        raise RoleMappingsFormatError(f"mapRoles must be a list, got {type(data).__name__}")

    try:
        return [RoleMapping.model_validate(entry) for entry in data]
    except ValidationError as e:
        raise RoleMappingsFormatError(f"Invalid role mapping in mapRoles: {e}", original_error=e)


def dump_role_mappings(role_mappings: list[RoleMapping]) -> str:
    return yaml.safe_dump(
        [m.to_dict() for m in role_mappings],
        default_flow_style=False,
        sort_keys=False,
    )
