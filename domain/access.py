"""
Domain: Access context.

Administrator rights are passed explicitly into every mutating call instead of
living in ambient session state. The credential check that grants them happens
outside the engine (see api/dependencies.py).
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import UnauthorizedError


@dataclass(frozen=True, slots=True)
class AccessContext:
    """
    Who is calling, and whether they hold administrator rights.

    user_id namespaces the caller's collections; it is not an authentication proof.
    """

    user_id: str
    is_admin: bool = False

    @staticmethod
    def viewer(user_id: str) -> "AccessContext":
        return AccessContext(user_id=user_id, is_admin=False)

    @staticmethod
    def administrator(user_id: str) -> "AccessContext":
        return AccessContext(user_id=user_id, is_admin=True)

    def require_admin(self, action: str) -> None:
        if not self.is_admin:
            raise UnauthorizedError(action)
