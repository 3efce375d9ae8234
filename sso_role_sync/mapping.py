"""
Role mapping reconciliation.

Resolves SSO permission set names in aws-auth role mappings to the ARNs of the
IAM roles AWS SSO provisions for them (``AWSReservedSSO_<name>_<suffix>``).
Everything here is pure: callers fetch roles and mappings, this module only
transforms them.
"""

from __future__ import annotations

import logging
import re

from sso_role_sync.config import ACCOUNT_ID_PLACEHOLDER
from sso_role_sync.schemas import (
    IAMRole,
    InvalidPermissionSetError,
    PermissionSetNotFoundError,
    RoleMapping,
)

logger = logging.getLogger(__name__)

# Characters AWS accepts in a permission set name
PERMISSION_SET_NAME_RE = re.compile(r"[\w+=,.@-]{1,32}", re.ASCII)


def sso_role_name_pattern(permission_set: str) -> re.Pattern:
    """Pattern matching the IAM role name of *permission_set*.

    Raises:
        InvalidPermissionSetError: If the name uses characters AWS does not allow.
    """
    if not PERMISSION_SET_NAME_RE.fullmatch(permission_set):
        raise InvalidPermissionSetError(permission_set)
    return re.compile(rf"AWSReservedSSO_{re.escape(permission_set)}_[A-Za-z0-9]{{16}}")


def remove_path_from_role_arn(arn: str, path: str) -> str:
    """Collapse the IAM path inside a role ARN.

    ``arn:aws:iam::1:role/aws-reserved/sso.amazonaws.com/x`` with path
    ``/aws-reserved/sso.amazonaws.com/`` becomes ``arn:aws:iam::1:role/x``.
    """
    if not path:
        return arn
    return arn.replace(path, "/")


def translate_permission_set_to_arn(mapping: RoleMapping, iam_roles: list[IAMRole]) -> RoleMapping:
    """
    Return a copy of *mapping* with its permission set resolved to a role ARN.

    The first role whose name matches the permission set wins. The returned
    mapping has ``role_arn`` set (path removed) and ``permission_set`` cleared.

    Raises:
        PermissionSetNotFoundError: If no role matches. InvalidPermissionSetError,
            a subclass, when the name itself cannot belong to a permission set.
    """
    logger.debug(f"Translating {mapping.permission_set} permission set to ARN")

    pattern = sso_role_name_pattern(mapping.permission_set)
    role = next((r for r in iam_roles if pattern.fullmatch(r.name)), None)
    if role is None:
        raise PermissionSetNotFoundError(mapping.permission_set)

    logger.debug(
        f"Found IAM role {role.name} with ARN {role.arn} which matches {mapping.permission_set} permission set"
    )
    return mapping.model_copy(deep=True, update={
        "role_arn": remove_path_from_role_arn(role.arn, role.path),
        "permission_set": "",
    })


def transform_role_mappings(
    role_mappings: list[RoleMapping],
    iam_roles: list[IAMRole],
    account_id: str,
) -> list[RoleMapping]:
    """
    Replace permission set names with role ARNs across *role_mappings*.

    Mappings that already carry a role ARN (or no permission set) pass through,
    with ``$ACCOUNTID`` substituted by *account_id*. Mappings whose permission
    set has no IAM role, or whose name is not a valid permission set name, are
    dropped and logged. Order is preserved.
    """
    logger.info("Translating permissionSets to RoleARNs in RoleMappings...")

    updated = []
    for mapping in role_mappings:
        if not mapping.permission_set or mapping.role_arn:
            if ACCOUNT_ID_PLACEHOLDER in mapping.role_arn:
                logger.info(f"Replacing {ACCOUNT_ID_PLACEHOLDER} with actual account ID in {mapping.role_arn}")
                mapping = mapping.model_copy(deep=True, update={
                    "role_arn": mapping.role_arn.replace(ACCOUNT_ID_PLACEHOLDER, account_id),
                })
            else:
                logger.debug(f"Role mapping does not need to be translated: {mapping.to_dict()}")
            updated.append(mapping)
            continue

        try:
            translated = translate_permission_set_to_arn(mapping, iam_roles)
        except PermissionSetNotFoundError as e:
            logger.warning(
                f"Role that would correspond to {mapping.permission_set} permission set not found. "
                f"Removing mapping from the list: {e}"
            )
            continue

        logger.debug(f"Role mapping successfully translated: {translated.to_dict()}")
        updated.append(translated)

    logger.info(f"Translation finished: {len(updated)} of {len(role_mappings)} mappings kept")
    return updated
