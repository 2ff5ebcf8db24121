from advanced_alchemy.base import UUIDAuditBase


class Base(UUIDAuditBase):
    """Declarative base: UUID ``id`` plus ``created_at``/``updated_at`` columns."""

    __abstract__ = True
