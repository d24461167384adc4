from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Optional, Sequence

from ..common.datetime_utils import now_utc
from ..common.validators import require_non_empty, require_tenant
from ..core.exceptions import AuthorizationError, InternalError, NotFoundError, ValidationError
from ..users.service import SessionUser
from .model import Attachment, Comment
from .repository import CommentRepository

LOG = logging.getLogger(__name__)

COMMENT_NOT_FOUND = "Comment not found"


def parse_attachment(value: Any) -> Optional[Attachment]:
    """Accept ``{data, name, type}`` or nothing; anything else is rejected."""
    if value in (None, {}):
        return None
    if not isinstance(value, dict) or not isinstance(value.get("data"), str) or not value["data"]:
        raise ValidationError("Attachment must carry data, name and type")
    return Attachment(
        data=value["data"],
        name=str(value.get("name") or ""),
        type=str(value.get("type") or ""),
    )


class CommentService:
    """Use cases of worker/admin comment threads."""

    def __init__(self, comments: CommentRepository, *, clock: Callable[[], datetime] = now_utc):
        self._comments = comments
        self._clock = clock

    def _get_visible(self, comment_id: int, caller: SessionUser) -> Comment:
        comment = self._comments.get_by_id(int(comment_id))
        # Comments of other tenants are reported as missing.
        if not comment or comment.subdomain != caller.subdomain:
            raise NotFoundError(COMMENT_NOT_FOUND)
        return comment

    # -------- Queries --------
    def list_by_worker(self, worker_id: int, *, caller: Optional[SessionUser] = None) -> Sequence[Comment]:
        comments = self._comments.list_by_worker(int(worker_id))
        if caller is not None:
            comments = [c for c in comments if c.subdomain == caller.subdomain]
        return comments

    def list_mine(self, caller: SessionUser) -> Sequence[Comment]:
        comments = self._comments.list_by_worker(caller.user_id)
        LOG.debug("Found %d comments for worker %s", len(comments), caller.user_id)
        return comments

    def list_by_tenant(self, subdomain: Optional[str], *, caller: Optional[SessionUser] = None) -> Sequence[Comment]:
        subdomain = require_tenant(subdomain)
        if caller is not None and caller.subdomain != subdomain:
            raise AuthorizationError("Not authorized for this company")
        return [c.with_worker_fallback() for c in self._comments.list_by_tenant(subdomain)]

    def list_unread_admin_replies(self, caller: SessionUser) -> Sequence[Comment]:
        return self._comments.list_with_unread_admin_replies(caller.user_id)

    # -------- Commands --------
    def create(
        self,
        *,
        worker_id: int,
        subdomain: Optional[str],
        text: Optional[str],
        attachment: Any = None,
        caller: Optional[SessionUser] = None,
    ) -> Comment:
        text = require_non_empty(text, "Comment text is missing")
        subdomain = require_tenant(subdomain)
        if caller is not None and caller.subdomain != subdomain:
            raise AuthorizationError("Not authorized for this company")
        parsed_attachment = parse_attachment(attachment)

        try:
            comment_id = self._comments.create(
                worker_id=int(worker_id),
                subdomain=subdomain,
                text=text,
                attachment=parsed_attachment,
                now=self._clock(),
            )
            comment = self._comments.get_by_id(comment_id)
        except Exception as e:
            LOG.exception("Comment creation failed for worker %s", worker_id)
            raise InternalError("Failed to create comment") from e

        if comment is None:
            raise InternalError("Failed to create comment")
        LOG.info("Comment %s created by worker %s in %s", comment.comment_id, worker_id, subdomain)
        return comment

    def add_reply(self, *, comment_id: int, text: Optional[str], caller: SessionUser) -> Comment:
        text = require_non_empty(text, "Please add text to your reply")
        comment = self._get_visible(comment_id, caller)

        self._comments.append_reply(
            comment_id=comment.comment_id,
            text=text,
            is_admin_reply=caller.is_admin,
            subdomain=comment.subdomain,
            now=self._clock(),
        )
        updated = self._comments.get_by_id(comment.comment_id)
        if updated is None:
            raise NotFoundError(COMMENT_NOT_FOUND)
        return updated

    def mark_read(self, *, comment_id: int, caller: SessionUser) -> None:
        comment = self._get_visible(comment_id, caller)
        if not self._comments.mark_read(comment.comment_id, now=self._clock()):
            raise NotFoundError(COMMENT_NOT_FOUND)

    def mark_comment_admin_replies_read(self, *, comment_id: int, caller: SessionUser) -> None:
        comment = self._get_visible(comment_id, caller)
        if not self._comments.mark_admin_replies_read(comment.comment_id, now=self._clock()):
            raise NotFoundError(COMMENT_NOT_FOUND)

    def mark_all_admin_replies_read(self, caller: SessionUser) -> int:
        modified = self._comments.mark_all_admin_replies_read(caller.user_id, now=self._clock())
        LOG.info("Marked admin replies as read for worker %s (%d comments)", caller.user_id, modified)
        return modified
