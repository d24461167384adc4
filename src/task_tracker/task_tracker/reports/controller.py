from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import RouteGuards, current_user
from ..container import Container
from .serializers import daily_to_list, productivity_to_dict


def register(app: Flask, container: Container, guards: RouteGuards) -> None:
    service = container.report_service

    @app.route("/attendance/<subdomain>/workers/<int:worker_id>", methods=["GET"], endpoint="worker_attendance")
    @guards.admin_only
    def worker_attendance(subdomain: str, worker_id: int):
        days = service.daily_view(
            subdomain=subdomain,
            worker_id=worker_id,
            from_date=request.args.get("from"),
            to_date=request.args.get("to"),
            caller=current_user(),
        )
        return jsonify(daily_to_list(days))

    @app.route(
        "/attendance/<subdomain>/workers/<int:worker_id>/productivity",
        methods=["GET"],
        endpoint="worker_productivity",
    )
    @guards.admin_only
    def worker_productivity(subdomain: str, worker_id: int):
        report = service.productivity(
            subdomain=subdomain,
            worker_id=worker_id,
            from_date=request.args.get("from"),
            to_date=request.args.get("to"),
            batch_name=request.args.get("batch"),
            caller=current_user(),
        )
        return jsonify(productivity_to_dict(report))
