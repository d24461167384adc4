from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import RouteGuards, current_user, json_body
from ..container import Container
from .serializers import comment_to_dict, comments_to_list


def register(app: Flask, container: Container, guards: RouteGuards) -> None:
    service = container.comment_service

    @app.route("/comments", methods=["POST"], endpoint="create_comment")
    @guards.worker_only
    def create_comment():
        data = json_body()
        caller = current_user()
        comment = service.create(
            worker_id=caller.user_id,
            subdomain=data.get("subdomain"),
            text=data.get("text"),
            attachment=data.get("attachment"),
            caller=caller,
        )
        return jsonify(comment_to_dict(comment)), 201

    # Fixed paths are registered before the /comments/<subdomain> catch-all.
    @app.route("/comments/me", methods=["GET"], endpoint="my_comments")
    @guards.worker_only
    def my_comments():
        return jsonify(comments_to_list(service.list_mine(current_user())))

    @app.route("/comments/unread-admin-replies", methods=["GET"], endpoint="unread_admin_replies")
    @guards.worker_only
    def unread_admin_replies():
        return jsonify(comments_to_list(service.list_unread_admin_replies(current_user())))

    @app.route("/comments/mark-admin-replies-read", methods=["PUT"], endpoint="mark_admin_replies_read")
    @guards.protect
    def mark_admin_replies_read():
        modified = service.mark_all_admin_replies_read(current_user())
        return jsonify({"message": "Admin replies marked as read", "modified": modified})

    @app.route("/comments/<subdomain>", methods=["GET"], endpoint="tenant_comments")
    @guards.admin_only
    def tenant_comments(subdomain: str):
        return jsonify(comments_to_list(service.list_by_tenant(subdomain, caller=current_user())))

    @app.route("/comments/worker/<int:worker_id>", methods=["GET"], endpoint="worker_comments")
    @guards.admin_only
    def worker_comments(worker_id: int):
        return jsonify(comments_to_list(service.list_by_worker(worker_id, caller=current_user())))

    @app.route("/comments/<int:comment_id>/replies", methods=["POST"], endpoint="add_reply")
    @guards.protect
    def add_reply(comment_id: int):
        comment = service.add_reply(comment_id=comment_id, text=json_body().get("text"), caller=current_user())
        return jsonify(comment_to_dict(comment)), 201

    @app.route("/comments/<int:comment_id>/read", methods=["PUT"], endpoint="mark_comment_read")
    @guards.protect
    def mark_comment_read(comment_id: int):
        service.mark_read(comment_id=comment_id, caller=current_user())
        return jsonify({"message": "Comment marked as read"})

    @app.route(
        "/comments/<int:comment_id>/mark-admin-replies-read",
        methods=["PUT"],
        endpoint="mark_comment_admin_replies_read",
    )
    @guards.protect
    def mark_comment_admin_replies_read(comment_id: int):
        service.mark_comment_admin_replies_read(comment_id=comment_id, caller=current_user())
        return jsonify({"message": "Admin replies marked as read for this comment"})
