from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from werkzeug.security import check_password_hash

from ..common.validators import require_non_empty, require_tenant
from ..core.constants import DEFAULT_TOKEN_MAX_AGE_SECONDS
from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from .model import User
from .repository import UserRepository

INVALID_CREDENTIALS = "Invalid username or password"


@dataclass(frozen=True)
class SessionUser:
    """The caller of a request, as resolved from its bearer token."""

    user_id: int
    full_name: str
    username: str
    role: Role
    subdomain: str
    dept_id: Optional[int] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @classmethod
    def from_user(cls, user: User) -> "SessionUser":
        return cls(
            user_id=user.user_id,
            full_name=user.full_name,
            username=user.username,
            role=user.role,
            subdomain=user.subdomain,
            dept_id=user.dept_id,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "name": self.full_name,
            "username": self.username,
            "role": self.role.value,
            "subdomain": self.subdomain,
            "dept_id": self.dept_id,
        }


class TokenService:
    """Signs and verifies bearer tokens carrying only the user id."""

    _salt = "task-tracker-auth"

    def __init__(self, secret_key: str, *, max_age_seconds: int = DEFAULT_TOKEN_MAX_AGE_SECONDS):
        self._serializer = URLSafeTimedSerializer(secret_key, salt=self._salt)
        self._max_age = int(max_age_seconds)

    def issue(self, user_id: int) -> str:
        return self._serializer.dumps({"uid": int(user_id)})

    def verify(self, token: str) -> int:
        try:
            payload = self._serializer.loads(token, max_age=self._max_age)
        except SignatureExpired:
            raise AuthenticationError("Session expired, login again.")
        except BadSignature:
            raise AuthenticationError("Not authorized, token failed")
        try:
            return int(payload["uid"])
        except (KeyError, TypeError, ValueError):
            raise AuthenticationError("Not authorized, token failed")


class AuthService:
    """Use case: authenticate users and resolve bearer tokens."""

    def __init__(self, users: UserRepository, tokens: TokenService):
        self._users = users
        self._tokens = tokens

    def authenticate(self, *, subdomain: str, username: str, password: str) -> SessionUser:
        subdomain = require_tenant(subdomain)
        username = require_non_empty(username, INVALID_CREDENTIALS)

        user = self._users.get_by_username(subdomain=subdomain, username=username)
        if not user or not user.is_active:
            raise AuthenticationError(INVALID_CREDENTIALS)

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # placeholder or corrupted hashes
            ok = False
        if not ok:
            raise AuthenticationError(INVALID_CREDENTIALS)

        return SessionUser.from_user(user)

    def issue_token(self, user: SessionUser) -> str:
        return self._tokens.issue(user.user_id)

    def resolve_token(self, token: str) -> SessionUser:
        user = self._users.get_by_id(self._tokens.verify(token))
        if not user or not user.is_active:
            raise AuthenticationError("Not authorized, user not found")
        return SessionUser.from_user(user)
