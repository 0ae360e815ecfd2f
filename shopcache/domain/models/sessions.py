"""
Session projections stored in the cache.

These are the response-ready views of relational entities: what a resolver
would return, not what the database holds. They serialize with camelCase
field names so other services reading the same keys see the same payloads.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SessionModel(BaseModel):
    """Base for cached projections: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, coerce_numbers_to_str=True
    )


class PermissionSession(SessionModel):
    id: str
    name: str
    description: str | None = None
    can_create: bool = False
    can_read: bool = False
    can_update: bool = False
    can_delete: bool = False


class RoleSummary(SessionModel):
    id: str
    name: str
    default_permissions: list[Any] = Field(default_factory=list)


class CreatedBySession(SessionModel):
    id: str
    name: str
    roles: list[RoleSummary] = Field(default_factory=list)


class RoleSession(SessionModel):
    """Role as returned by role queries. ``name`` is upper-cased."""

    id: str
    name: str
    description: str | None = None
    default_permissions: list[PermissionSession] = Field(default_factory=list)
    system_delete_protection: bool = False
    system_update_protection: bool = False
    created_by: CreatedBySession | None = None
    created_at: str | None = None
    deleted_at: str | None = None


class UserSessionById(SessionModel):
    """User profile cached by id. Never carries the password hash."""

    id: str
    avatar: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    email: str
    email_verified: bool = False
    gender: str | None = None
    roles: list[str] = Field(default_factory=list)
    permissions: list[PermissionSession] = Field(default_factory=list)
    can_update_permissions: bool = True
    can_update_role: bool = True
    is_account_activated: bool = False
    temp_updated_email: str | None = None
    temp_email_verified: bool = False
    created_at: str | None = None
    deleted_at: str | None = None


class UserSessionByEmail(UserSessionById):
    """User cached by email for login. Includes the password hash; session store only."""

    password: str | None = None


class UserSession(SessionModel):
    """Identity carried by an access token, cached per session id."""

    id: str
    avatar: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    email: str
    email_verified: bool = False
    gender: str | None = None
    roles: list[str] = Field(default_factory=list)
    is_account_activated: bool = False
    session_id: str


class LockoutSession(SessionModel):
    locked_at: int  # epoch milliseconds
    duration: int  # seconds


class LoginAttempts(SessionModel):
    attempts: int = 0


class AddressBookSession(SessionModel):
    """Address book entry. Unknown columns are kept as-is."""

    model_config = ConfigDict(extra="allow")

    id: str
    type: str | None = None
    is_default: bool = False


class TaxExemptionSession(SessionModel):
    """Tax exemption record of a user. Unknown columns are kept as-is."""

    model_config = ConfigDict(extra="allow")

    id: str
    status: str | None = None
    expiry_date: Any = None  # date or ISO string
