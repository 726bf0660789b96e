# src/chetana/services/roles.py
"""Single place that decides whether an identity has moderator rights."""

from __future__ import annotations

from collections.abc import Iterable

from chetana.core.settings import settings


class RoleRegistry:
    """Admin lookup over a configured set of identities.

    Identities may be forum handles (``u/xxxxxx``), the shared ``admin``
    handle, or account emails; comparison is exact after trimming, except
    emails which compare case-insensitively.
    """

    def __init__(self, admin_identities: Iterable[str]) -> None:
        self._admins = {self._normalize(identity) for identity in admin_identities if identity}

    @staticmethod
    def _normalize(identity: str) -> str:
        identity = identity.strip()
        return identity.lower() if "@" in identity else identity

    def is_admin(self, identity: str | None) -> bool:
        """Return True when ``identity`` belongs to an administrator."""
        if not identity:
            return False
        return self._normalize(identity) in self._admins


_registry: RoleRegistry | None = None


def get_role_registry() -> RoleRegistry:
    """Return the process-wide registry built from settings."""
    global _registry
    if _registry is None:
        _registry = RoleRegistry(settings.admin_identities)
    return _registry


def is_admin(identity: str | None) -> bool:
    """Return True when ``identity`` is an administrator."""
    return get_role_registry().is_admin(identity)
