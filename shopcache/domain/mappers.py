"""
Projection step applied before anything is cached.

Callers hand over rows they already loaded from the relational store, either
as ORM objects (snake_case attributes) or as mappings (snake_case or
camelCase keys). Nothing here performs I/O: related rows such as a role's
creator must already be loaded on the entity.
"""

from collections.abc import Iterable, Mapping
from datetime import UTC, date, datetime
from typing import Any

from pydantic.alias_generators import to_camel

from .models.sessions import (
    CreatedBySession,
    PermissionSession,
    RoleSession,
    RoleSummary,
    UserSession,
    UserSessionByEmail,
    UserSessionById,
)

_MISSING = object()


def field(entity: Any, name: str, default: Any = None) -> Any:
    """Read ``name`` from an object or mapping, trying snake_case then camelCase."""
    for candidate in (name, to_camel(name)):
        if isinstance(entity, Mapping):
            value = entity.get(candidate, _MISSING)
        else:
            value = getattr(entity, candidate, _MISSING)
        if value is not _MISSING:
            return value
    return default


def to_iso(value: Any) -> str | None:
    """Render a timestamp the way JavaScript's ``toISOString`` does (UTC, ms, ``Z``)."""
    if value is None or value == "":
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(UTC).replace(tzinfo=None)
        return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"
    if isinstance(value, date):
        return f"{value.isoformat()}T00:00:00.000Z"
    return str(value)


def map_permissions(permissions: Iterable[Any] | None) -> list[PermissionSession]:
    if not permissions:
        return []
    return [
        PermissionSession(
            id=str(field(p, "id")),
            name=field(p, "name"),
            description=field(p, "description"),
            can_create=bool(field(p, "can_create", False)),
            can_read=bool(field(p, "can_read", False)),
            can_update=bool(field(p, "can_update", False)),
            can_delete=bool(field(p, "can_delete", False)),
        )
        for p in permissions
    ]


def _role_names(roles: Iterable[Any] | None) -> list[str]:
    names = []
    for role in roles or []:
        name = role if isinstance(role, str) else field(role, "name", "")
        names.append(name.upper())
    return names


def map_role_summaries(roles: Iterable[Any] | None) -> list[RoleSummary]:
    return [
        RoleSummary(
            id=str(field(r, "id")),
            name=field(r, "name"),
            default_permissions=list(field(r, "default_permissions") or []),
        )
        for r in roles or []
    ]


def map_role_to_response(role: Any) -> RoleSession:
    creator = field(role, "created_by")
    created_by = None
    if creator:
        full_name = f"{field(creator, 'first_name', '')} {field(creator, 'last_name', '')}"
        created_by = CreatedBySession(
            id=str(field(creator, "id")),
            name=full_name,
            roles=map_role_summaries(field(creator, "roles")),
        )

    return RoleSession(
        id=str(field(role, "id")),
        name=field(role, "name").upper(),
        description=field(role, "description"),
        default_permissions=map_permissions(field(role, "default_permissions")),
        system_delete_protection=bool(field(role, "system_delete_protection", False)),
        system_update_protection=bool(field(role, "system_update_protection", False)),
        created_by=created_by,
        created_at=to_iso(field(role, "created_at")),
        deleted_at=to_iso(field(role, "deleted_at")),
    )


def _user_profile(user: Any) -> dict[str, Any]:
    return {
        "id": str(field(user, "id")),
        "avatar": field(user, "avatar"),
        "first_name": field(user, "first_name"),
        "last_name": field(user, "last_name"),
        "email": field(user, "email"),
        "email_verified": bool(field(user, "email_verified", False)),
        "gender": field(user, "gender"),
        "roles": _role_names(field(user, "roles")),
        "permissions": map_permissions(field(user, "permissions")),
        "can_update_permissions": bool(field(user, "can_update_permissions", True)),
        "can_update_role": bool(field(user, "can_update_role", True)),
        "is_account_activated": bool(field(user, "is_account_activated", False)),
        "temp_updated_email": field(user, "temp_updated_email"),
        "temp_email_verified": bool(field(user, "temp_email_verified", False)),
        "created_at": to_iso(field(user, "created_at")),
        "deleted_at": to_iso(field(user, "deleted_at")),
    }


def map_user_to_response_by_id(user: Any) -> UserSessionById:
    return UserSessionById(**_user_profile(user))


def map_user_to_response_by_email(user: Any) -> UserSessionByEmail:
    # password hash is kept for credential checks during login
    return UserSessionByEmail(**_user_profile(user), password=field(user, "password"))


def map_user_to_token_data(user: Any) -> UserSession:
    return UserSession(
        id=str(field(user, "id")),
        avatar=field(user, "avatar"),
        first_name=field(user, "first_name"),
        last_name=field(user, "last_name"),
        email=field(user, "email"),
        email_verified=bool(field(user, "email_verified", False)),
        gender=field(user, "gender"),
        roles=_role_names(field(user, "roles")),
        is_account_activated=bool(field(user, "is_account_activated", False)),
        session_id=str(field(user, "session_id")),
    )
