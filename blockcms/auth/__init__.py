from blockcms.auth.guards import (
    AllPermissions,
    AnyPermission,
    AuthRequirement,
    Permission,
    Role,
    auth_guard,
)
from blockcms.auth.services import (
    UserPermissions,
    assign_role_to_user,
    get_user_permissions,
    has_all_permissions,
    has_any_permission,
    has_permission,
    remove_role_from_user,
    resolve_permissions,
    sync_roles_to_database,
)

__all__ = [
    "AllPermissions",
    "AnyPermission",
    "AuthRequirement",
    "Permission",
    "Role",
    "UserPermissions",
    "assign_role_to_user",
    "auth_guard",
    "get_user_permissions",
    "has_all_permissions",
    "has_any_permission",
    "has_permission",
    "remove_role_from_user",
    "resolve_permissions",
    "sync_roles_to_database",
]
