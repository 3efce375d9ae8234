"""Role mapping models and the error types raised while reconciling them."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class SyncError(Exception):
    def __init__(self, category: str, message: str):
        self.category = category
        self.message = message
        super().__init__(f"[{category}] {message}")


class PermissionSetNotFoundError(Exception):
    """Raised when no SSO role in IAM corresponds to a permission set."""

    def __init__(self, permission_set: str, message: str = None):
        self.permission_set = permission_set
        super().__init__(message or f"permission set {permission_set} not found in AWS IAM service")


class InvalidPermissionSetError(PermissionSetNotFoundError):
    """Raised when a permission set name uses characters AWS does not allow, so no role can match it."""

    def __init__(self, permission_set: str):
        super().__init__(permission_set, f"invalid permission set name: {permission_set!r}")


class RoleMappingsFormatError(ValueError):
    """Raised when mapRoles data cannot be decoded into role mappings."""

    def __init__(self, message: str, original_error: Exception = None):
        self.message = message
        self.original_error = original_error
        super().__init__(self.message)


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

class RoleMapping(BaseModel):
    """One entry of the aws-auth ``mapRoles`` list.

    ``permission_set`` is an extension of the EKS format: it names an SSO
    permission set whose IAM role ARN is filled in during reconciliation.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, coerce_numbers_to_str=True)

    role_arn: str = Field(default="", alias="rolearn")
    permission_set: str = Field(default="", alias="permissionSet")
    username: str = ""
    groups: list[str] = Field(default_factory=list)
    user_id: str = Field(default="", alias="userid")

    @field_validator("role_arn", "permission_set", "username", "user_id", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return "" if value is None else value

    @field_validator("groups", mode="before")
    @classmethod
    def _none_as_no_groups(cls, value):
        return [] if value is None else value

    def to_dict(self) -> dict:
        """Serializable form; empty rolearn, permissionSet and userid are omitted."""
        data = {}
        if self.role_arn:
            data["rolearn"] = self.role_arn
        if self.permission_set:
            data["permissionSet"] = self.permission_set
        data["username"] = self.username
        data["groups"] = list(self.groups)
        if self.user_id:
            data["userid"] = self.user_id
        return data


class IAMRole(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    path: str
    arn: str

    @classmethod
    def from_api(cls, role: dict) -> IAMRole:
        """Build from a ``list_roles`` response entry."""
        return cls(name=role["RoleName"], path=role["Path"], arn=role["Arn"])
