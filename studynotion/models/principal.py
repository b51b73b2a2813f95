from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True, slots=True)
class Principal:
    """Authenticated identity extracted from a validated JWT.

    The token is issued by the upstream auth service; ``user_id`` is the
    account id (``sub`` claim) and ``roles`` its account types.
    """

    user_id: str
    roles: frozenset[str]

    @property
    def account_id(self) -> UUID:
        return UUID(self.user_id)

    def has_role(self, role: str) -> bool:
        return role in self.roles

