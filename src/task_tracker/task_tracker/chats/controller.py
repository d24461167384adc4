from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import RouteGuards, current_user, json_body
from ..comments.serializers import comment_to_dict
from ..container import Container
from .serializers import chats_to_list, days_to_list, group_to_dict


def register(app: Flask, container: Container, guards: RouteGuards) -> None:
    service = container.admin_chat_service

    @app.route("/chats/<subdomain>", methods=["GET"], endpoint="list_chats")
    @guards.admin_only
    def list_chats(subdomain: str):
        chats = service.list_chats(
            caller=current_user(),
            subdomain=subdomain,
            chat_filter=request.args.get("filter"),
            search=request.args.get("search", ""),
        )
        return jsonify(chats_to_list(chats))

    @app.route("/chats/<subdomain>/read-all", methods=["PUT"], endpoint="read_all_chats")
    @guards.admin_only
    def read_all_chats(subdomain: str):
        modified = service.read_all(caller=current_user(), subdomain=subdomain)
        return jsonify({"message": "All chats marked as read", "modified": modified})

    @app.route("/chats/<subdomain>/workers/<int:worker_id>/messages", methods=["GET"], endpoint="chat_messages")
    @guards.admin_only
    def chat_messages(subdomain: str, worker_id: int):
        days = service.conversation(caller=current_user(), subdomain=subdomain, worker_id=worker_id)
        return jsonify(days_to_list(days))

    @app.route("/chats/<subdomain>/workers/<int:worker_id>/replies", methods=["POST"], endpoint="chat_reply")
    @guards.admin_only
    def chat_reply(subdomain: str, worker_id: int):
        comment = service.reply(
            caller=current_user(),
            subdomain=subdomain,
            worker_id=worker_id,
            text=json_body().get("text"),
        )
        return jsonify(comment_to_dict(comment)), 201

    @app.route("/chats/<subdomain>/workers/<int:worker_id>/read", methods=["PUT"], endpoint="chat_mark_read")
    @guards.admin_only
    def chat_mark_read(subdomain: str, worker_id: int):
        service.mark_chat_read(caller=current_user(), subdomain=subdomain, worker_id=worker_id)
        return jsonify({"message": "Chat marked as read"})

    @app.route("/chats/<subdomain>/hidden", methods=["POST"], endpoint="hide_chats")
    @guards.admin_only
    def hide_chats(subdomain: str):
        hidden = service.hide_workers(
            caller=current_user(),
            subdomain=subdomain,
            worker_ids=json_body().get("worker_ids"),
        )
        return jsonify({"message": "Chats deleted", "hidden": hidden})

    @app.route("/chats/<subdomain>/hidden/<int:worker_id>", methods=["DELETE"], endpoint="unhide_chat")
    @guards.admin_only
    def unhide_chat(subdomain: str, worker_id: int):
        service.unhide_worker(caller=current_user(), subdomain=subdomain, worker_id=worker_id)
        return jsonify({"message": "Chat restored"})

    @app.route("/chats/<subdomain>/groups", methods=["POST"], endpoint="create_chat_group")
    @guards.admin_only
    def create_chat_group(subdomain: str):
        data = json_body()
        group = service.create_group(
            caller=current_user(),
            subdomain=subdomain,
            name=data.get("name"),
            member_ids=data.get("member_ids"),
        )
        return jsonify(group_to_dict(group)), 201

    @app.route("/chats/<subdomain>/groups/<int:group_id>", methods=["DELETE"], endpoint="delete_chat_group")
    @guards.admin_only
    def delete_chat_group(subdomain: str, group_id: int):
        service.delete_group(caller=current_user(), subdomain=subdomain, group_id=group_id)
        return jsonify({"message": "Group deleted"})
