from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import admin_required, client_address, current_user_id, json_error
from ..container import Container
from ..core.exceptions import ValidationError

# Request body key -> AttendanceService.admin_upsert field
_CORRECTION_FIELDS = {
    "punchIn": "punch_in",
    "punchOut": "punch_out",
    "breaks": "breaks",
    "totalBreakMinutes": "total_break_minutes",
    "totalWorkMinutes": "total_work_minutes",
    "status": "status",
    "isOnBreak": "is_on_break",
}


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/dashboard", methods=["GET"], endpoint="admin_dashboard")
    @admin_required
    def dashboard():
        try:
            stats = container.admin_service.get_dashboard_stats()
        except Exception as e:
            return json_error(e)
        return jsonify(stats.to_dict())

    @app.route("/api/admin/employees", methods=["GET"], endpoint="admin_employees")
    @admin_required
    def employees():
        try:
            items = container.admin_service.list_employees()
        except Exception as e:
            return json_error(e)
        return jsonify({"employees": [emp.to_dict() for emp in items]})

    @app.route("/api/admin/employees/status", methods=["GET"], endpoint="admin_employees_status")
    @admin_required
    def employees_status():
        try:
            items = container.admin_service.get_employees_with_status()
        except Exception as e:
            return json_error(e)
        return jsonify({"employees": items})

    @app.route("/api/admin/employees/<int:employee_id>", methods=["DELETE"], endpoint="admin_deactivate_employee")
    @admin_required
    def deactivate_employee(employee_id: int):
        try:
            container.admin_service.deactivate_employee(employee_id)
        except Exception as e:
            return json_error(e)
        return jsonify({"message": "Employee removed"})

    @app.route("/api/admin/attendance/correct", methods=["POST"], endpoint="admin_correct_attendance")
    @admin_required
    def correct_attendance():
        body = request.get_json(silent=True) or {}
        if not body.get("userId") or not body.get("date"):
            return jsonify({"message": "userId and date are required"}), 400

        fields = {field: body[key] for key, field in _CORRECTION_FIELDS.items() if key in body}
        try:
            try:
                employee_id = int(body["userId"])
            except (TypeError, ValueError):
                raise ValidationError("userId must be a number")
            record = container.attendance_service.admin_upsert(employee_id, str(body["date"]), fields)
        except Exception as e:
            return json_error(e)
        return jsonify({"message": "Attendance record updated", "attendance": record.to_dict()})

    @app.route("/api/admin/export/<int:employee_id>", methods=["GET"], endpoint="admin_export_csv")
    @admin_required
    def export_csv(employee_id: int):
        try:
            export = container.csv_report_service.export_employee_attendance(
                employee_id=employee_id,
                start_date=request.args.get("startDate", ""),
                end_date=request.args.get("endDate", ""),
                requested_by=current_user_id(),
                origin_address=client_address(),
            )
        except Exception as e:
            return json_error(e)

        return app.response_class(
            export.csv_text,
            mimetype="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{export.filename}"'},
        )
