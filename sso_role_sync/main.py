#!/usr/bin/env python3
"""
SSO Role Sync - Resolves SSO permission sets in aws-auth mapRoles to IAM role ARNs.

Usage:
    sso-role-sync [--src-configmap NAME] [--src-namespace NS]
                  [--dst-configmap NAME] [--dst-namespace NS]
                  [--aws-region REGION] [--interval SECONDS] [--once] [--debug]
"""

import argparse
import logging
import os
import signal
import sys
import threading

from pydantic import ValidationError

from sso_role_sync.aws import get_iam_client, get_sts_client
from sso_role_sync.config import (
    DEFAULT_AWS_REGION,
    DEFAULT_CONFIGMAP,
    DEFAULT_DST_NAMESPACE,
    DEFAULT_INTERVAL,
    SyncConfig,
)
from sso_role_sync.configmap import get_core_v1_api
from sso_role_sync.sync import run_forever, run_once
from sso_role_sync.utils import classify_error, configure_logging

logger = logging.getLogger(__name__)


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").lower() in ("1", "true", "yes")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Translate SSO permission set names in aws-auth mapRoles into IAM role ARNs"
    )
    parser.add_argument(
        "--src-configmap",
        default=os.environ.get("SRC_CONFIGMAP", DEFAULT_CONFIGMAP),
        help="ConfigMap to read mapRoles from and perform the transformation upon",
    )
    parser.add_argument(
        "--src-namespace",
        default=os.environ.get("SRC_NAMESPACE") or None,
        help="Namespace of the source ConfigMap. Defaults to the namespace of the pod",
    )
    parser.add_argument(
        "--dst-configmap",
        default=os.environ.get("DST_CONFIGMAP", DEFAULT_CONFIGMAP),
        help="ConfigMap to write the transformed mapRoles to",
    )
    parser.add_argument(
        "--dst-namespace",
        default=os.environ.get("DST_NAMESPACE", DEFAULT_DST_NAMESPACE),
        help="Namespace of the destination ConfigMap",
    )
    parser.add_argument(
        "--aws-region",
        default=os.environ.get("AWS_REGION", DEFAULT_AWS_REGION),
        help="AWS region to use when interacting with IAM and STS",
    )
    parser.add_argument(
        "--interval",
        type=int,
        default=os.environ.get("SYNC_INTERVAL", str(DEFAULT_INTERVAL)),
        help="Seconds between reconciliation passes",
    )
    parser.add_argument("--once", action="store_true", help="Run a single pass and exit")
    parser.add_argument(
        "--debug",
        action="store_true",
        default=_env_flag("DEBUG"),
        help="Enable debug logging",
    )
    return parser


def parse_config(argv=None) -> SyncConfig:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return SyncConfig(**vars(args))
    except ValidationError as e:
        parser.error(str(e))


def main(argv=None) -> int:
    sync_config = parse_config(argv)
    configure_logging(sync_config.debug)

    logger.info("Starting process...")

    stop_event = threading.Event()

    def _request_stop(signum, frame):
        logger.info(f"Received signal {signum}, stopping after the current pass")
        stop_event.set()

    signal.signal(signal.SIGTERM, _request_stop)
    signal.signal(signal.SIGINT, _request_stop)

    try:
        core_api = get_core_v1_api()
        iam_client = get_iam_client(sync_config.aws_region)
        sts_client = get_sts_client(sync_config.aws_region)

        if sync_config.once:
            run_once(sync_config, core_api, iam_client, sts_client)
        else:
            run_forever(sync_config, core_api, iam_client, sts_client, stop_event)
    except Exception as e:
        err = classify_error(e)
        logger.error(f"Reconciliation failed ({err.category}): {err.message}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
