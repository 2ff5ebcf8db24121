from blockcms.db.models.collections import News, Project, Service
from blockcms.db.models.media import Media
from blockcms.db.models.page import Page
from blockcms.db.models.role import Permission, Role, role_permissions, user_roles
from blockcms.db.models.user import User

__all__ = [
    "Media",
    "News",
    "Page",
    "Permission",
    "Project",
    "Role",
    "Service",
    "User",
    "role_permissions",
    "user_roles",
]
