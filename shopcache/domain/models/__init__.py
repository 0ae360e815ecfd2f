from .sessions import (
    AddressBookSession,
    CreatedBySession,
    LockoutSession,
    LoginAttempts,
    PermissionSession,
    RoleSession,
    RoleSummary,
    SessionModel,
    TaxExemptionSession,
    UserSession,
    UserSessionByEmail,
    UserSessionById,
)

__all__ = [
    "AddressBookSession",
    "CreatedBySession",
    "LockoutSession",
    "LoginAttempts",
    "PermissionSession",
    "RoleSession",
    "RoleSummary",
    "SessionModel",
    "TaxExemptionSession",
    "UserSession",
    "UserSessionByEmail",
    "UserSessionById",
]
