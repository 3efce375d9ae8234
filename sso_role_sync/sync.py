"""
Reconciliation pass and the polling loop around it.

A pass reads mapRoles from the source ConfigMap, resolves permission sets
against the SSO roles currently in IAM, and writes the result to the
destination ConfigMap. Passes run back to back on one thread; the next one
starts only after the previous one returned.
"""

from __future__ import annotations

import logging
import threading

from sso_role_sync.aws import get_account_id, list_sso_roles
from sso_role_sync.config import MAP_ROLES_KEY, SyncConfig
from sso_role_sync.configmap import (
    dump_role_mappings,
    get_configmap,
    get_current_namespace,
    load_role_mappings,
    set_configmap,
)
from sso_role_sync.mapping import transform_role_mappings
from sso_role_sync.schemas import RoleMapping

logger = logging.getLogger(__name__)


def run_once(sync_config: SyncConfig, core_api, iam_client, sts_client) -> list[RoleMapping]:
    """Run a single reconciliation pass and return the mappings written."""
    src_namespace = sync_config.src_namespace or get_current_namespace()

    configmap = get_configmap(core_api, sync_config.src_configmap, src_namespace)
    data = dict(configmap.data or {})
    role_mappings = load_role_mappings(data.get(MAP_ROLES_KEY))
    logger.info(f"Read {len(role_mappings)} role mappings from {src_namespace}/{sync_config.src_configmap}")

    iam_roles = list_sso_roles(iam_client)
    account_id = get_account_id(sts_client)

    updated = transform_role_mappings(role_mappings, iam_roles, account_id)

    data[MAP_ROLES_KEY] = dump_role_mappings(updated)
    set_configmap(core_api, sync_config.dst_configmap, sync_config.dst_namespace, data)
    return updated


def run_forever(
    sync_config: SyncConfig,
    core_api,
    iam_client,
    sts_client,
    stop_event: threading.Event,
) -> int:
    """
    Run a pass now and then every ``sync_config.interval`` seconds until
    *stop_event* is set. Returns the number of completed passes.

    An error in a pass propagates and ends the loop.
    """
    passes = 0
    while not stop_event.is_set():
        logger.info(f"Starting reconciliation pass {passes + 1}")
        run_once(sync_config, core_api, iam_client, sts_client)
        passes += 1
        logger.info(f"Reconciliation pass {passes} complete, next in {sync_config.interval}s")
        stop_event.wait(sync_config.interval)

    logger.info(f"Stop requested, exiting after {passes} passes")
    return passes
