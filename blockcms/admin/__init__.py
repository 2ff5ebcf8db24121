from blockcms.admin.collections import CollectionAdminController
from blockcms.admin.media import MediaAdminController
from blockcms.admin.pages import PageAdminController
from blockcms.admin.roles import RoleAdminController
from blockcms.admin.users import UserAdminController

ADMIN_CONTROLLERS = [
    PageAdminController,
    CollectionAdminController,
    MediaAdminController,
    RoleAdminController,
    UserAdminController,
]

__all__ = [
    "ADMIN_CONTROLLERS",
    "CollectionAdminController",
    "MediaAdminController",
    "PageAdminController",
    "RoleAdminController",
    "UserAdminController",
]
