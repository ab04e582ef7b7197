"""
Access Control — Admin identity and the global pause flag.

Admin and pause changes are infrastructure-level events: they are
journaled as attestations by the registry but never appear in any
part's history.
"""

from __future__ import annotations

from .errors import NotAuthorizedError, ZeroAddressError
from .states import NULL_IDENTITY, Identity


class AccessControl:
    """
    Holds the privileged actor and the pause switch.

    ``require_*`` methods raise; plain predicates never do.
    """

    def __init__(
        self,
        admin: Identity,
        paused: bool = False,
        null_identity: Identity = NULL_IDENTITY,
    ) -> None:
        if not admin or admin == null_identity:
            raise ValueError(f"Admin must be a real identity, got {admin!r}")
        self._admin = admin
        self._paused = paused
        self._null_identity = null_identity

    @property
    def admin(self) -> Identity:
        return self._admin

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def null_identity(self) -> Identity:
        return self._null_identity

    def is_admin(self, caller: Identity) -> bool:
        return caller == self._admin

    def is_null(self, identity: Identity) -> bool:
        return identity == self._null_identity

    def require_admin(self, caller: Identity) -> None:
        if not self.is_admin(caller):
            raise NotAuthorizedError(caller)

    def require_real_identity(self, identity: Identity) -> None:
        if not isinstance(identity, str):
            raise TypeError(f"identity must be str, got {type(identity).__name__}")
        if not identity or self.is_null(identity):
            raise ZeroAddressError(identity)

    def set_paused(self, caller: Identity, pause: bool) -> bool:
        self.require_admin(caller)
        self._paused = pause
        return self._paused

    def transfer_admin(self, caller: Identity, new_admin: Identity) -> bool:
        self.require_admin(caller)
        self.require_real_identity(new_admin)
        self._admin = new_admin
        return True
