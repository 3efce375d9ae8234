"""AWS lookups: SSO-provisioned IAM roles and the caller's account id."""

from __future__ import annotations

import logging

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from sso_role_sync.config import DEFAULT_AWS_REGION, LIST_ROLES_PAGE_SIZE, SSO_ROLE_PATH_PREFIX
from sso_role_sync.schemas import IAMRole

logger = logging.getLogger(__name__)


def get_iam_client(region: str = DEFAULT_AWS_REGION):
    return boto3.client("iam", region_name=region)


def get_sts_client(region: str = DEFAULT_AWS_REGION):
    return boto3.client("sts", region_name=region)


def list_sso_roles(iam_client, path_prefix: str = SSO_ROLE_PATH_PREFIX) -> list[IAMRole]:
    """
    Return every IAM role under *path_prefix*, following pagination.

    Raises:
        ClientError, BotoCoreError: If a page cannot be fetched.
    """
    logger.info("Retrieving SSO roles from AWS IAM...")

    paginator = iam_client.get_paginator("list_roles")
    pages = paginator.paginate(
        PathPrefix=path_prefix,
        PaginationConfig={"PageSize": LIST_ROLES_PAGE_SIZE},
    )

    roles = []
    try:
        for page_num, page in enumerate(pages, start=1):
            logger.debug(f"Paginating through IAM Roles (page {page_num})...")
            roles.extend(IAMRole.from_api(r) for r in page["Roles"])
    except (ClientError, BotoCoreError) as e:
        logger.error(f"Error occurred while paginating through roles: {e}")
        raise

    logger.info(f"{len(roles)} SSO roles retrieved from AWS IAM")
    return roles


def get_account_id(sts_client) -> str:
    """Account id of the credentials in use."""
    logger.debug("Reading AWS Account ID...")
    account_id = sts_client.get_caller_identity()["Account"]
    logger.debug(f"Retrieved {account_id} as AWS Account ID")
    return account_id
