from __future__ import annotations

from typing import Iterable

from ..common.datetime_utils import to_iso
from .model import ChatGroup, ChatMessage, ChatSummary, MessageDay


def chat_to_dict(chat: ChatSummary) -> dict:
    return {
        "id": chat.chat_id,
        "isGroup": chat.is_group,
        "name": chat.name,
        "username": chat.username,
        "photo": chat.photo,
        "department": chat.department_name,
        "members": list(chat.member_ids),
        "unreadCount": chat.unread_count,
        "lastActivityAt": to_iso(chat.last_activity_at),
    }


def chats_to_list(chats: Iterable[ChatSummary]) -> list[dict]:
    return [chat_to_dict(c) for c in chats]


def message_to_dict(message: ChatMessage) -> dict:
    attachment = None
    if message.attachment is not None:
        attachment = {
            "data": message.attachment.data,
            "name": message.attachment.name,
            "type": message.attachment.type,
        }
    return {
        "id": message.message_id,
        "commentId": message.comment_id,
        "sender": message.sender.value,
        "isWorker": message.is_worker,
        "text": message.text,
        "isNew": message.is_new,
        "attachment": attachment,
        "createdAt": to_iso(message.created_at),
    }


def days_to_list(days: Iterable[MessageDay]) -> list[dict]:
    return [{"date": d.label, "messages": [message_to_dict(m) for m in d.messages]} for d in days]


def group_to_dict(group: ChatGroup) -> dict:
    return {
        "id": group.group_id,
        "name": group.name,
        "members": list(group.member_ids),
        "createdBy": group.created_by,
        "createdAt": to_iso(group.created_at),
    }
