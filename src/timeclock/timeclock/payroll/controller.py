from __future__ import annotations

import logging
from functools import wraps

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import parse_iso_date
from ..core.enums import Role
from ..core.exceptions import DomainError
from .model import PayrollLineItem
from .service import PayrollService

logger = logging.getLogger(__name__)


def line_item_to_dict(item: PayrollLineItem) -> dict:
    return {
        "user_id": item.user_id,
        "employee_code": item.employee_code,
        "full_name": item.full_name,
        "employment_type": item.employment_type.value,
        "regular_hours": str(item.regular_hours),
        "overtime_hours": str(item.overtime_hours),
        "holiday_hours": str(item.holiday_hours),
        "night_shift_hours": str(item.night_shift_hours),
        "effective_hourly_rate": str(item.effective_hourly_rate),
        "base_pay": str(item.base_pay),
        "overtime_pay": str(item.overtime_pay),
        "holiday_pay": str(item.holiday_pay),
        "night_shift_pay": str(item.night_shift_pay),
        "gross_pay": str(item.gross_pay),
        "work_days": item.work_days,
        "details": [
            {
                "date": d.work_date.strftime("%Y-%m-%d"),
                "regular_minutes": d.regular_minutes,
                "overtime_minutes": d.overtime_minutes,
                "holiday_minutes": d.holiday_minutes,
                "night_minutes": d.night_minutes,
                "is_holiday": d.is_holiday,
            }
            for d in item.details
        ],
    }


def register(app: Flask, service: PayrollService) -> None:
    def manager_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"success": False, "message": "login required"}), 401
            if session.get("role") not in (Role.MANAGER.value, Role.ADMIN.value):
                return jsonify({"success": False, "message": "forbidden"}), 403
            return view(*args, **kwargs)

        return wrapper

    @app.route("/api/payroll", methods=["POST"], endpoint="payroll_generate")
    @manager_required
    def payroll_generate():
        data = request.get_json(silent=True) or {}
        try:
            period_start = parse_iso_date(str(data.get("period_start", "")))
            period_end = parse_iso_date(str(data.get("period_end", "")))
        except ValueError:
            return jsonify({"success": False, "message": "period dates must be YYYY-MM-DD"}), 400

        store_id = data.get("store_id")
        try:
            run = service.generate(
                period_start=period_start,
                period_end=period_end,
                generated_by=int(session["user_id"]),
                store_id=int(store_id) if store_id is not None else None,
                user_ids=[int(u) for u in data.get("user_ids") or []],
            )
        except DomainError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except Exception:
            logger.exception("payroll generation failed")
            return jsonify({"success": False, "message": "system error"}), 500

        return jsonify(
            {
                "success": True,
                "summary": {
                    "period_start": run.period_start.strftime("%Y-%m-%d"),
                    "period_end": run.period_end.strftime("%Y-%m-%d"),
                    "total_employees": run.total_employees,
                    "total_gross_pay": str(run.total_gross_pay),
                },
                "items": [line_item_to_dict(i) for i in run.items],
            }
        )
