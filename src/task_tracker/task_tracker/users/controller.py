from __future__ import annotations

import logging

from flask import Flask, jsonify

from ..common.http import RouteGuards, current_user, json_body
from ..container import Container

LOG = logging.getLogger(__name__)


def register(app: Flask, container: Container, guards: RouteGuards) -> None:
    @app.route("/auth/login", methods=["POST"], endpoint="auth_login")
    def login():
        data = json_body()
        user = container.auth_service.authenticate(
            subdomain=data.get("subdomain"),
            username=data.get("username"),
            password=data.get("password") or "",
        )
        LOG.info("User %s logged in to %s", user.user_id, user.subdomain)
        return jsonify({"token": container.auth_service.issue_token(user), "user": user.to_dict()})

    @app.route("/auth/me", methods=["GET"], endpoint="auth_me")
    @guards.protect
    def me():
        return jsonify(current_user().to_dict())
