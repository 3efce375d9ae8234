"""Shared helpers: error classification and logging setup."""

from __future__ import annotations

import logging

import botocore.exceptions
from kubernetes.client.exceptions import ApiException
from kubernetes.config import ConfigException
from pydantic import ValidationError

from sso_role_sync.schemas import InvalidPermissionSetError, RoleMappingsFormatError, SyncError


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

AWS_AUTH_CODES = frozenset({
    "AccessDenied",
    "AccessDeniedException",
    "ExpiredToken",
    "ExpiredTokenException",
    "InvalidClientTokenId",
    "UnrecognizedClientException",
})
AWS_TRANSIENT_CODES = frozenset({
    "Throttling",
    "ThrottlingException",
    "RequestLimitExceeded",
    "ServiceUnavailable",
    "ServiceUnavailableException",
})


# ---------------------------------------------------------------------------
# Error classification
# ---------------------------------------------------------------------------

def classify_error(exc: Exception) -> SyncError:
    """Map an exception raised during a sync pass to a SyncError with a category."""
    if isinstance(exc, SyncError):
        return exc
    if isinstance(exc, (InvalidPermissionSetError, RoleMappingsFormatError)):
        return SyncError("invalid_input", str(exc))
    if isinstance(exc, botocore.exceptions.ClientError):
        code = exc.response["Error"]["Code"]
        if code in AWS_AUTH_CODES:
            return SyncError("aws_auth", str(exc))
        if code in AWS_TRANSIENT_CODES:
            return SyncError("aws_transient", str(exc))
        return SyncError("unknown", str(exc))
    if isinstance(exc, botocore.exceptions.NoCredentialsError):
        return SyncError("aws_auth", str(exc))
    if isinstance(exc, botocore.exceptions.EndpointConnectionError):
        return SyncError("aws_transient", str(exc))
    if isinstance(exc, ApiException):
        if exc.status == 404:
            return SyncError("kubernetes_not_found", f"{exc.status} {exc.reason}")
        if exc.status in (401, 403):
            return SyncError("kubernetes_auth", f"{exc.status} {exc.reason}")
        return SyncError("kubernetes", f"{exc.status} {exc.reason}")
    if isinstance(exc, (ConfigException, ValidationError, FileNotFoundError)):
        return SyncError("config", str(exc))
    if isinstance(exc, (TimeoutError, ConnectionError)):
        return SyncError("connection", str(exc))
    return SyncError("unknown", str(exc))


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

def configure_logging(debug: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=LOG_FORMAT,
        force=True,
    )
    # botocore and the kubernetes client are noisy at DEBUG
    for name in ("botocore", "boto3", "urllib3", "kubernetes"):
        logging.getLogger(name).setLevel(logging.WARNING)
