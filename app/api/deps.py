from app.services.auth_dependencies import (
    Anonymous,
    Authenticated,
    RequestContext,
    _get_db,
    optional_auth,
    require_admin,
    require_role,
    require_user_auth,
)

get_db = _get_db


__all__ = [
    "Anonymous",
    "Authenticated",
    "RequestContext",
    "get_db",
    "optional_auth",
    "require_admin",
    "require_role",
    "require_user_auth",
]
