from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import User


class UserRepository(Protocol):
    """Repository interface for users.

    Services depend on this protocol, never on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_username(self, *, subdomain: str, username: str) -> Optional[User]:
        raise NotImplementedError

    def list_workers(self, *, subdomain: str) -> Sequence[User]:
        raise NotImplementedError
