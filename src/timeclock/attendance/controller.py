from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_user_id, json_error, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    def _transition(action, message: str, *, status: int = 200):
        try:
            record = action(current_user_id())
        except Exception as e:
            return json_error(e)
        return jsonify({"message": message, "attendance": record.to_dict()}), status

    def _year_month() -> tuple[int, int]:
        year, month = service.current_year_month()
        return request.args.get("year", year, type=int), request.args.get("month", month, type=int)

    @app.route("/api/attendance/punch-in", methods=["POST"], endpoint="attendance_punch_in")
    @login_required
    def punch_in():
        return _transition(service.punch_in, "Punched in successfully", status=201)

    @app.route("/api/attendance/punch-out", methods=["POST"], endpoint="attendance_punch_out")
    @login_required
    def punch_out():
        return _transition(service.punch_out, "Punched out successfully")

    @app.route("/api/attendance/break-start", methods=["POST"], endpoint="attendance_break_start")
    @login_required
    def break_start():
        return _transition(service.start_break, "Break started")

    @app.route("/api/attendance/break-end", methods=["POST"], endpoint="attendance_break_end")
    @login_required
    def break_end():
        return _transition(service.end_break, "Break ended")

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    def today():
        try:
            record = service.get_today(current_user_id())
        except Exception as e:
            return json_error(e)
        return jsonify({"attendance": record.to_dict() if record else None})

    @app.route("/api/attendance/history", methods=["GET"], endpoint="attendance_history")
    @login_required
    def history():
        try:
            year, month = _year_month()
            records = service.get_monthly_history(current_user_id(), year, month)
        except Exception as e:
            return json_error(e)
        return jsonify({"records": [r.to_dict() for r in records]})

    @app.route("/api/attendance/summary", methods=["GET"], endpoint="attendance_summary")
    @login_required
    def summary():
        try:
            year, month = _year_month()
            stats = service.get_monthly_summary(current_user_id(), year, month)
        except Exception as e:
            return json_error(e)
        return jsonify({"summary": stats.to_dict()})
