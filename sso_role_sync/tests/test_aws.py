"""Tests for sso_role_sync/aws.py."""

from unittest.mock import MagicMock

import boto3
import pytest
from botocore.exceptions import ClientError
from moto import mock_aws

from conftest import ACCOUNT_ID, SSO_PATH, TRUST_POLICY
from sso_role_sync.aws import get_account_id, get_iam_client, get_sts_client, list_sso_roles
from sso_role_sync.schemas import IAMRole


# ── clients ──────────────────────────────────────────────────────────

class TestClients:
    def test_region(self):
        # IAM is global; its endpoint resolves to aws-global, the configured region is kept
        assert get_iam_client("eu-west-1")._client_config.region_name == "eu-west-1"
        assert get_sts_client("eu-west-1").meta.region_name == "eu-west-1"


# ── list_sso_roles ───────────────────────────────────────────────────

class TestListSSORoles:
    def test_only_sso_path(self, iam_client):
        roles = list_sso_roles(iam_client)
        assert sorted(r.name for r in roles) == [
            "AWSReservedSSO_devops_0123456789abcdef",
            "AWSReservedSSO_sre_0123456789abcdef",
        ]

    def test_role_fields(self, iam_client):
        roles = {r.name: r for r in list_sso_roles(iam_client)}
        devops = roles["AWSReservedSSO_devops_0123456789abcdef"]
        assert devops == IAMRole(
            name="AWSReservedSSO_devops_0123456789abcdef",
            path=SSO_PATH,
            arn=f"arn:aws:iam::{ACCOUNT_ID}:role{SSO_PATH}AWSReservedSSO_devops_0123456789abcdef",
        )

    def test_follows_pagination(self, iam_client):
        for i in range(12):
            iam_client.create_role(
                RoleName=f"AWSReservedSSO_team{i:02d}_0123456789abcdef",
                Path=SSO_PATH,
                AssumeRolePolicyDocument=TRUST_POLICY,
            )
        assert len(list_sso_roles(iam_client)) == 14

    def test_no_roles(self):
        with mock_aws():
            assert list_sso_roles(boto3.client("iam", region_name="us-east-1")) == []

    def test_error_propagates(self):
        iam_client = MagicMock()
        iam_client.get_paginator.return_value.paginate.return_value = iter_raising(
            ClientError({"Error": {"Code": "AccessDenied", "Message": "denied"}}, "ListRoles")
        )
        with pytest.raises(ClientError):
            list_sso_roles(iam_client)


def iter_raising(exc):
    yield {"Roles": []}
    raise exc


# ── get_account_id ───────────────────────────────────────────────────

class TestGetAccountId:
    def test_caller_account(self):
        with mock_aws():
            assert get_account_id(boto3.client("sts", region_name="us-east-1")) == ACCOUNT_ID
