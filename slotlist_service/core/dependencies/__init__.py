"""FastAPI dependencies shared across features.

    from slotlist_service.core.dependencies import AuthUserDep, DBSessionDep
"""

from slotlist_service.core.dependencies.auth import (
    AuthUserDep,
    JWTCodecDep,
    OptionalAuthUser,
    get_auth_user,
    get_auth_user_optional,
    require_acl,
    require_permissions,
)
from slotlist_service.core.dependencies.database import DBSessionDep, get_db_session

__all__ = [
    "AuthUserDep",
    "DBSessionDep",
    "JWTCodecDep",
    "OptionalAuthUser",
    "get_auth_user",
    "get_auth_user_optional",
    "get_db_session",
    "require_acl",
    "require_permissions",
]
