from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..access.guard import current_session
from ..common.datetime_utils import parse_iso_date
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..container import Container
from .service import record_to_dict

logger = logging.getLogger(__name__)


def _optional_date(value):
    if not value:
        return None
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError("Tanggal harus berformat YYYY-MM-DD")


def register(app: Flask, container: Container) -> None:
    @app.route("/staff/attendance", methods=["GET", "POST"], endpoint="staff_attendance")
    def staff_attendance():
        s = current_session()
        try:
            if request.method == "GET":
                record = container.attendance_service.get_for_day(s.uid, _optional_date(request.args.get("date")))
                return jsonify({"success": True, "record": record_to_dict(record) if record else None})

            data = request.get_json(silent=True) or request.form.to_dict()
            record = container.attendance_service.record(
                s,
                status=data.get("status", ""),
                notes=data.get("notes"),
                day=_optional_date(data.get("date")),
            )
            return jsonify({"success": True, "record": record_to_dict(record)})
        except AuthorizationError as e:
            return jsonify({"success": False, "message": str(e)}), 403
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except Exception:
            logger.exception("Saving attendance failed for %s", s.uid)
            return jsonify({"success": False, "message": "Gagal menyimpan kehadiran"}), 500

    @app.route("/staff/attendance/recap", endpoint="staff_attendance_recap")
    def staff_attendance_recap():
        s = current_session()
        today = container.attendance_service.today()
        try:
            recap = container.attendance_service.monthly_recap(
                s.uid,
                year=int(request.args.get("year") or today.year),
                month=int(request.args.get("month") or today.month),
            )
        except (ValueError, ValidationError):
            return jsonify({"success": False, "message": "Bulan atau tahun tidak valid"}), 400
        return jsonify(
            {
                "success": True,
                "year": recap.year,
                "month": recap.month,
                "counts": recap.counts,
                "records": [record_to_dict(r) for r in recap.records],
            }
        )

    @app.route("/admin/attendance-recap", endpoint="admin_attendance_recap")
    def admin_attendance_recap():
        try:
            recap = container.attendance_service.daily_recap(_optional_date(request.args.get("date")))
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except Exception:
            logger.exception("Loading attendance recap failed")
            return jsonify({"success": False, "message": "Gagal memuat rekap kehadiran"}), 500
        return jsonify(
            {
                "success": True,
                "date": recap.date.strftime("%Y-%m-%d"),
                "recorded": [record_to_dict(r) for r in recap.recorded],
                "missing": recap.missing,
            }
        )

    @app.route("/admin/attendance-recap/remind", methods=["POST"], endpoint="admin_send_reminder")
    def admin_send_reminder():
        s = current_session()
        if s.role != Role.ADMIN:
            return jsonify({"success": False, "message": "Hanya admin yang dapat mengirim pengingat"}), 403
        logger.info("Attendance reminder triggered manually by %s", s.uid)
        result = container.reminder_job.run()
        return jsonify({"success": result.ok, **result.as_dict()}), (200 if result.ok else 502)
