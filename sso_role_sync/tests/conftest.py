"""Shared fixtures for sso_role_sync tests."""

import json

import boto3
import pytest
from moto import mock_aws

from sso_role_sync.schemas import IAMRole, RoleMapping

ACCOUNT_ID = "123456789012"
SSO_PATH = "/aws-reserved/sso.amazonaws.com/eu-west-1/"

TRUST_POLICY = json.dumps({
    "Version": "2012-10-17",
    "Statement": [{"Effect": "Allow", "Principal": {"Service": "sso.amazonaws.com"}, "Action": "sts:AssumeRole"}],
})


@pytest.fixture(autouse=True)
def _aws_env(monkeypatch):
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")


def sso_role(permission_set: str, suffix: str = "0123456789abcdef", path: str = SSO_PATH) -> IAMRole:
    name = f"AWSReservedSSO_{permission_set}_{suffix}"
    return IAMRole(name=name, path=path, arn=f"arn:aws:iam::{ACCOUNT_ID}:role{path}{name}")


def resolved_arn(permission_set: str, suffix: str = "0123456789abcdef") -> str:
    return f"arn:aws:iam::{ACCOUNT_ID}:role/AWSReservedSSO_{permission_set}_{suffix}"


@pytest.fixture
def sso_roles():
    return [sso_role("devops"), sso_role("sre")]


@pytest.fixture
def devops_mapping():
    return RoleMapping(permission_set="devops", username="devops:{{SessionName}}", groups=["system:masters"])


@pytest.fixture
def iam_client():
    """Mocked IAM with two SSO roles and one unrelated role."""
    with mock_aws():
        client = boto3.client("iam", region_name="us-east-1")
        for permission_set in ("devops", "sre"):
            client.create_role(
                RoleName=f"AWSReservedSSO_{permission_set}_0123456789abcdef",
                Path=SSO_PATH,
                AssumeRolePolicyDocument=TRUST_POLICY,
            )
        client.create_role(RoleName="AWSReservedSSO_admin_0123456789abcdef", AssumeRolePolicyDocument=TRUST_POLICY)
        yield client
