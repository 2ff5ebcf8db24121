"""Default role and permission catalogue.

These definitions are written to the database by ``sync_roles_to_database``
at startup and by ``blockcms sync-roles``. Operators can add more roles and
permissions through the admin API afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field

MANAGE_USERS = "manage_users"
MANAGE_ROLES = "manage_roles"
MANAGE_PERMISSIONS = "manage_permissions"
MANAGE_CONTENT = "manage_content"
PUBLISH_CONTENT = "publish_content"
MANAGE_MEDIA = "manage_media"

PERMISSION_DESCRIPTIONS: dict[str, str] = {
    MANAGE_USERS: "Create, edit and delete users",
    MANAGE_ROLES: "Create, edit and delete roles",
    MANAGE_PERMISSIONS: "Create and assign permissions",
    MANAGE_CONTENT: "Create and edit pages, services, projects and news",
    PUBLISH_CONTENT: "Publish and archive pages",
    MANAGE_MEDIA: "Manage the media library",
}


@dataclass
class RoleDefinition:
    """Definition of a role with its permissions."""

    name: str
    permissions: set[str] = field(default_factory=set)
    description: str | None = None


def create_role(name: str, *permissions: str, description: str | None = None) -> RoleDefinition:
    return RoleDefinition(name=name, permissions=set(permissions), description=description)


ADMIN = create_role(
    "admin",
    *PERMISSION_DESCRIPTIONS,
    description="Full access to every part of the admin",
)

EDITOR = create_role(
    "editor",
    MANAGE_CONTENT,
    MANAGE_MEDIA,
    description="Edits content and media but cannot publish",
)

PUBLISHER = create_role(
    "publisher",
    PUBLISH_CONTENT,
    MANAGE_CONTENT,
    description="Edits and publishes content",
)

ROLE_DEFINITIONS: dict[str, RoleDefinition] = {
    role.name: role for role in [ADMIN, EDITOR, PUBLISHER]
}

