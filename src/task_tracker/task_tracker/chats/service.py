from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Optional

from ..common.datetime_utils import now_utc
from ..common.validators import require_int_list, require_non_empty, require_tenant
from ..comments.model import Comment
from ..comments.repository import CommentRepository
from ..comments.service import CommentService
from ..core.enums import ChatFilter
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.repository import UserRepository
from ..users.service import SessionUser
from . import inbox
from .model import ChatGroup, ChatSummary, MessageDay
from .repository import ChatRepository

LOG = logging.getLogger(__name__)

NO_THREAD_MESSAGE = "Could not find a conversation thread to reply to."


class AdminChatService:
    """Admin inbox built on comment threads.

    Read state, hidden chats and groups are stored per tenant on the server.
    """

    def __init__(
        self,
        comments: CommentRepository,
        chats: ChatRepository,
        users: UserRepository,
        comment_service: CommentService,
        *,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._comments = comments
        self._chats = chats
        self._users = users
        self._comment_service = comment_service
        self._clock = clock

    def _tenant(self, subdomain: Optional[str], caller: SessionUser) -> str:
        subdomain = require_tenant(subdomain)
        if caller.subdomain != subdomain:
            raise AuthorizationError("Not authorized for this company")
        return subdomain

    def _worker_comments(self, subdomain: str, worker_id: int) -> list[Comment]:
        if int(worker_id) in self._chats.list_hidden_workers(subdomain=subdomain):
            raise NotFoundError("Chat not found")
        return [c for c in self._comments.list_by_worker(int(worker_id)) if c.subdomain == subdomain]

    def _visible_worker_chats(self, subdomain: str, reader_id: int) -> list[ChatSummary]:
        return inbox.build_worker_chats(
            self._comments.list_by_tenant(subdomain),
            hidden_worker_ids=self._chats.list_hidden_workers(subdomain=subdomain),
            read_cursors=self._chats.get_read_cursors(subdomain=subdomain, reader_id=reader_id),
        )

    # -------- Queries --------
    def list_chats(
        self,
        *,
        caller: SessionUser,
        subdomain: Optional[str],
        chat_filter: Optional[str] = None,
        search: str = "",
    ) -> list[ChatSummary]:
        selected = inbox.parse_chat_filter(chat_filter)
        subdomain = self._tenant(subdomain, caller)

        chats = inbox.group_chats(self._chats.list_groups(subdomain=subdomain))
        if selected != ChatFilter.GROUPS:
            chats += self._visible_worker_chats(subdomain, caller.user_id)
        return inbox.filter_chats(chats, selected, search)

    def conversation(self, *, caller: SessionUser, subdomain: Optional[str], worker_id: int) -> list[MessageDay]:
        subdomain = self._tenant(subdomain, caller)
        comments = self._worker_comments(subdomain, worker_id)
        return inbox.group_by_day(inbox.merge_messages(comments))

    # -------- Commands --------
    def reply(self, *, caller: SessionUser, subdomain: Optional[str], worker_id: int, text: Optional[str]) -> Comment:
        text = require_non_empty(text, "Please add text to your reply")
        subdomain = self._tenant(subdomain, caller)

        thread = inbox.latest_thread(self._worker_comments(subdomain, worker_id))
        if thread is None:
            raise NotFoundError(NO_THREAD_MESSAGE)

        comment = self._comment_service.add_reply(comment_id=thread.comment_id, text=text, caller=caller)
        # Replying counts as having read the conversation.
        self._chats.set_read_cursors(
            subdomain=subdomain, reader_id=caller.user_id, worker_ids=[int(worker_id)], at=self._clock()
        )
        return comment

    def mark_chat_read(self, *, caller: SessionUser, subdomain: Optional[str], worker_id: int) -> None:
        subdomain = self._tenant(subdomain, caller)
        self._chats.set_read_cursors(
            subdomain=subdomain, reader_id=caller.user_id, worker_ids=[int(worker_id)], at=self._clock()
        )

    def read_all(self, *, caller: SessionUser, subdomain: Optional[str]) -> int:
        subdomain = self._tenant(subdomain, caller)
        worker_ids = [c.chat_id for c in self._visible_worker_chats(subdomain, caller.user_id)]
        if worker_ids:
            self._chats.set_read_cursors(
                subdomain=subdomain, reader_id=caller.user_id, worker_ids=worker_ids, at=self._clock()
            )
        LOG.info("Admin %s marked %d chats as read in %s", caller.user_id, len(worker_ids), subdomain)
        return len(worker_ids)

    def hide_workers(self, *, caller: SessionUser, subdomain: Optional[str], worker_ids: Any) -> int:
        worker_ids = require_int_list(worker_ids, "No workers selected")
        subdomain = self._tenant(subdomain, caller)
        unique_ids = sorted(set(worker_ids))
        self._chats.hide_workers(subdomain=subdomain, worker_ids=unique_ids, at=self._clock())
        return len(unique_ids)

    def unhide_worker(self, *, caller: SessionUser, subdomain: Optional[str], worker_id: int) -> None:
        subdomain = self._tenant(subdomain, caller)
        if not self._chats.unhide_worker(subdomain=subdomain, worker_id=int(worker_id)):
            raise NotFoundError("Hidden chat not found")

    def create_group(
        self,
        *,
        caller: SessionUser,
        subdomain: Optional[str],
        name: Optional[str],
        member_ids: Any,
    ) -> ChatGroup:
        name = require_non_empty(name, "Group name is required")
        member_ids = require_int_list(member_ids, "Select at least one member")
        subdomain = self._tenant(subdomain, caller)

        known = {w.user_id for w in self._users.list_workers(subdomain=subdomain)}
        unknown = sorted(set(member_ids) - known)
        if unknown:
            raise ValidationError(f"Unknown workers: {', '.join(str(i) for i in unknown)}")

        group_id = self._chats.create_group(
            subdomain=subdomain,
            name=name,
            member_ids=sorted(set(member_ids)),
            created_by=caller.user_id,
            at=self._clock(),
        )
        for group in self._chats.list_groups(subdomain=subdomain):
            if group.group_id == group_id:
                LOG.info("Chat group %s created in %s", group_id, subdomain)
                return group
        raise NotFoundError("Group not found")

    def delete_group(self, *, caller: SessionUser, subdomain: Optional[str], group_id: int) -> None:
        subdomain = self._tenant(subdomain, caller)
        if not self._chats.delete_group(subdomain=subdomain, group_id=int(group_id)):
            raise NotFoundError("Group not found")
