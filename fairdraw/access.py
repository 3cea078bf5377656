"""Single-admin authorization gate."""

from __future__ import annotations

import logging

from .errors import InvalidInput, Unauthorized
from .models.utils import normalize_identity

logger = logging.getLogger(__name__)


class AccessControl:
    """Holds the admin identity fixed at provisioning time.

    The identity cannot be rotated; build a new instance from the deployment
    record instead.
    """

    __slots__ = ("_admin",)

    def __init__(self, admin: str) -> None:
        self._admin = normalize_identity(admin)

    @property
    def admin(self) -> str:
        return self._admin

    def is_admin(self, identity: str) -> bool:
        try:
            return normalize_identity(identity) == self._admin
        except InvalidInput:
            return False

    def require_admin(self, identity: str, *, action: str) -> None:
        """Raise :class:`Unauthorized` unless ``identity`` is the admin."""
        if not self.is_admin(identity):
            logger.warning("Rejected %s by non-admin identity %r", action, identity)
            raise Unauthorized(f"{action} requires the admin identity")


__all__ = ["AccessControl"]
