"""Wire format of comments: camelCase keys, ISO-8601 UTC timestamps."""

from __future__ import annotations

from typing import Iterable, Optional

from ..common.datetime_utils import parse_iso_datetime, to_iso
from .model import Attachment, Comment, Reply, WorkerRef


def worker_to_dict(worker: Optional[WorkerRef]) -> Optional[dict]:
    if worker is None:
        return None
    return {
        "id": worker.worker_id,
        "name": worker.name,
        "username": worker.username,
        "photo": worker.photo,
        "department": {"name": worker.department_name} if worker.department_name is not None else None,
    }


def reply_to_dict(reply: Reply) -> dict:
    return {
        "id": reply.reply_id,
        "text": reply.text,
        "isAdminReply": reply.is_admin_reply,
        "isNew": reply.is_new,
        "subdomain": reply.subdomain,
        "createdAt": to_iso(reply.created_at),
    }


def comment_to_dict(comment: Comment) -> dict:
    attachment = None
    if comment.attachment is not None:
        attachment = {
            "data": comment.attachment.data,
            "name": comment.attachment.name,
            "type": comment.attachment.type,
        }
    return {
        "id": comment.comment_id,
        "workerId": comment.worker_id,
        "worker": worker_to_dict(comment.worker),
        "subdomain": comment.subdomain,
        "text": comment.text,
        "attachment": attachment,
        "isNew": comment.is_new,
        "hasUnreadAdminReply": comment.has_unread_admin_reply,
        "lastReplyTimestamp": to_iso(comment.last_reply_at),
        "replies": [reply_to_dict(r) for r in comment.replies],
        "createdAt": to_iso(comment.created_at),
        "updatedAt": to_iso(comment.updated_at),
    }


def comments_to_list(comments: Iterable[Comment]) -> list[dict]:
    return [comment_to_dict(c) for c in comments]


def _worker_from_dict(data: Optional[dict]) -> Optional[WorkerRef]:
    if not data:
        return None
    department = data.get("department") or {}
    return WorkerRef(
        worker_id=data.get("id"),
        name=data.get("name") or "",
        username=data.get("username"),
        photo=data.get("photo"),
        department_name=department.get("name"),
    )


def comment_from_dict(data: dict) -> Comment:
    """Rebuild a ``Comment`` from its JSON form (used by the HTTP client)."""
    comment_id = int(data["id"])
    attachment = data.get("attachment")
    replies = tuple(
        Reply(
            reply_id=int(r["id"]),
            comment_id=comment_id,
            text=r.get("text") or "",
            is_admin_reply=bool(r.get("isAdminReply")),
            is_new=bool(r.get("isNew")),
            subdomain=r.get("subdomain") or data.get("subdomain") or "",
            created_at=parse_iso_datetime(r["createdAt"]),
        )
        for r in data.get("replies") or []
    )
    created_at = parse_iso_datetime(data["createdAt"])
    return Comment(
        comment_id=comment_id,
        worker_id=int(data.get("workerId") or 0),
        subdomain=data.get("subdomain") or "",
        text=data.get("text") or "",
        created_at=created_at,
        updated_at=parse_iso_datetime(data["updatedAt"]) if data.get("updatedAt") else created_at,
        is_new=bool(data.get("isNew")),
        has_unread_admin_reply=bool(data.get("hasUnreadAdminReply")),
        last_reply_at=parse_iso_datetime(data["lastReplyTimestamp"]) if data.get("lastReplyTimestamp") else None,
        attachment=(
            Attachment(data=attachment["data"], name=attachment.get("name") or "", type=attachment.get("type") or "")
            if attachment
            else None
        ),
        replies=replies,
        worker=_worker_from_dict(data.get("worker")),
    )
