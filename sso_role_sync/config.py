"""Runtime settings and fixed constants for the SSO role mapping sync."""

from __future__ import annotations

from pydantic import BaseModel, Field

SSO_ROLE_PATH_PREFIX = "/aws-reserved/sso.amazonaws.com/"
LIST_ROLES_PAGE_SIZE = 10

MAP_ROLES_KEY = "mapRoles"
ACCOUNT_ID_PLACEHOLDER = "$ACCOUNTID"

SERVICE_ACCOUNT_NAMESPACE_FILE = "/var/run/secrets/kubernetes.io/serviceaccount/namespace"

DEFAULT_CONFIGMAP = "aws-auth"
DEFAULT_DST_NAMESPACE = "kube-system"
DEFAULT_AWS_REGION = "us-east-1"
DEFAULT_INTERVAL = 300


class SyncConfig(BaseModel):
    src_configmap: str = DEFAULT_CONFIGMAP
    src_namespace: str | None = None  # None -> namespace of the running pod
    dst_configmap: str = DEFAULT_CONFIGMAP
    dst_namespace: str = DEFAULT_DST_NAMESPACE
    aws_region: str = DEFAULT_AWS_REGION
    interval: int = Field(default=DEFAULT_INTERVAL, gt=0)  # seconds between passes
    once: bool = False
    debug: bool = False
