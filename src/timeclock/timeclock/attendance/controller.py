from __future__ import annotations

import logging
from datetime import date, timedelta
from functools import wraps
from typing import Optional

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import parse_iso_date
from ..core.constants import DEFAULT_HISTORY_DAYS
from ..core.enums import BreakType
from ..core.exceptions import DomainError
from .model import AttendanceRecord
from .service import RETRY_MESSAGE, AttendanceService, ClockResult

logger = logging.getLogger(__name__)


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None


def record_to_dict(r: Optional[AttendanceRecord]) -> Optional[dict]:
    if r is None:
        return None
    return {
        "attendance_id": r.attendance_id,
        "user_id": r.user_id,
        "store_id": r.store_id,
        "work_date": r.work_date.strftime("%Y-%m-%d"),
        "status": r.status.value,
        "clock_in": _iso(r.clock_in),
        "clock_out": _iso(r.clock_out),
        "clock_in_2": _iso(r.clock_in_2),
        "clock_out_2": _iso(r.clock_out_2),
        "total_minutes": r.total_minutes,
        "break_minutes": r.break_minutes,
        "net_work_minutes": r.net_work_minutes,
        "overtime_minutes": r.overtime_minutes,
        "note": r.note,
        "breaks": [
            {
                "break_id": b.break_id,
                "type": b.break_type.value,
                "start_time": _iso(b.start_time),
                "end_time": _iso(b.end_time),
                "duration_minutes": b.duration_minutes,
            }
            for b in r.breaks
        ],
    }


def _result_response(result: ClockResult):
    body = {
        "success": result.success,
        "message": result.message,
        "attendance": record_to_dict(result.attendance),
        "new_state": result.new_state.value if result.new_state else None,
    }
    if result.success:
        return jsonify(body), 200
    return jsonify(body), 409 if result.message == RETRY_MESSAGE else 400


def register(app: Flask, service: AttendanceService, *, default_store_id: int = 1) -> None:
    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"success": False, "message": "login required"}), 401
            return view(*args, **kwargs)

        return wrapper

    def _store_id() -> int:
        return int(session.get("store_id") or default_store_id)

    def _clock_call(fn, *args):
        try:
            return _result_response(fn(int(session["user_id"]), _store_id(), *args))
        except DomainError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except Exception:
            logger.exception("attendance call failed for user=%s", session.get("user_id"))
            return jsonify({"success": False, "message": "system error"}), 500

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    def attendance_today():
        current = service.get_current_state(int(session["user_id"]), _store_id())
        return jsonify(
            {
                "state": current.state.value,
                "available_actions": [
                    {"action": a.action.value, "allowed": a.allowed, "reason": a.reason}
                    for a in current.available_actions
                ],
                "attendance": record_to_dict(current.attendance),
                "shift": current.shift.shift_name if current.shift else None,
            }
        )

    @app.route("/api/attendance/clock-in", methods=["POST"], endpoint="attendance_clock_in")
    @login_required
    def attendance_clock_in():
        return _clock_call(service.clock_in)

    @app.route("/api/attendance/clock-out", methods=["POST"], endpoint="attendance_clock_out")
    @login_required
    def attendance_clock_out():
        return _clock_call(service.clock_out)

    @app.route("/api/attendance/break/start", methods=["POST"], endpoint="attendance_break_start")
    @login_required
    def attendance_break_start():
        data = request.get_json(silent=True) or {}
        raw = str(data.get("type") or BreakType.REST.value).upper()
        try:
            break_type = BreakType(raw)
        except ValueError:
            return jsonify({"success": False, "message": f"unknown break type: {raw}"}), 400
        return _clock_call(service.start_break, break_type)

    @app.route("/api/attendance/break/end", methods=["POST"], endpoint="attendance_break_end")
    @login_required
    def attendance_break_end():
        return _clock_call(service.end_break)

    @app.route("/api/attendance/history", methods=["GET"], endpoint="attendance_history")
    @login_required
    def attendance_history():
        today = date.today()
        try:
            start = parse_iso_date(request.args.get("start") or (today - timedelta(days=DEFAULT_HISTORY_DAYS)).strftime("%Y-%m-%d"))
            end = parse_iso_date(request.args.get("end") or today.strftime("%Y-%m-%d"))
        except ValueError:
            return jsonify({"success": False, "message": "dates must be YYYY-MM-DD"}), 400

        user_id = int(session["user_id"])
        rows = service.get_history(user_id, start=start, end=end)
        summary = service.get_summary(user_id, start=start, end=end)
        return jsonify(
            {
                "records": [record_to_dict(r) for r in rows],
                "summary": {
                    "total_work_minutes": summary.total_work_minutes,
                    "total_break_minutes": summary.total_break_minutes,
                    "total_overtime_minutes": summary.total_overtime_minutes,
                    "days_worked": summary.days_worked,
                    "average_work_minutes_per_day": summary.average_work_minutes_per_day,
                    "status_counts": summary.status_counts,
                },
            }
        )
