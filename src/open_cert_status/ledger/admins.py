"""Administrator lookup for revocation state changes."""

import threading
from typing import Optional, Protocol
from uuid import UUID

from ..core.models import AdminIdentity


class AdminDirectory(Protocol):
    """Resolves admin identifiers."""

    def find_one_by_id(self, admin_id: UUID) -> Optional[AdminIdentity]: ...


class InMemoryAdminDirectory:
    """Admin directory held in process memory."""

    def __init__(self, admins: Optional[list[AdminIdentity]] = None):
        self._lock = threading.Lock()
        self._admins: dict[UUID, AdminIdentity] = {a.id: a for a in admins or []}

    def add_admin(self, admin_id: UUID, name: str = "", enabled: bool = True) -> AdminIdentity:
        """Register an admin.

        Args:
            admin_id: Admin identifier
            name: Human-readable name
            enabled: Whether the admin is active (default True)

        Returns:
            The stored AdminIdentity
        """
        admin = AdminIdentity(id=admin_id, name=name, enabled=enabled)
        with self._lock:
            self._admins[admin.id] = admin
        return admin

    def remove_admin(self, admin_id: UUID) -> None:
        """Remove an admin; unknown ids are ignored."""
        with self._lock:
            self._admins.pop(admin_id, None)

    def find_one_by_id(self, admin_id: UUID) -> Optional[AdminIdentity]:
        """Get an admin by id.

        Returns:
            AdminIdentity if found and enabled, None otherwise
        """
        with self._lock:
            admin = self._admins.get(admin_id)
        if admin and admin.enabled:
            return admin
        return None

    def list_admins(self) -> list[AdminIdentity]:
        """List all admins (including disabled ones)."""
        with self._lock:
            return list(self._admins.values())
