from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: an admin or worker account of one tenant.

    Plain data object; no database access here.
    """

    user_id: int
    full_name: str
    username: str
    password_hash: str
    role: Role
    subdomain: str
    dept_id: Optional[int] = None
    photo: Optional[str] = None
    is_active: bool = True

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
