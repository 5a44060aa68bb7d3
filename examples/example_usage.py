"""Example: drive the services directly, without Flask.

Controllers are a thin layer; clocking and payroll rules live in the services.
"""

import importlib
from datetime import date

from config import get_settings_module

from src.timeclock.timeclock.common.datetime_utils import format_minutes
from src.timeclock.timeclock.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=settings.DB_CONFIG,
        pay_rates=settings.PAY_RATES,
        night_minutes=settings.NIGHT_MINUTES_METHOD,
    )

    current = container.attendance_service.get_current_state(user_id=1, store_id=settings.DEFAULT_STORE_ID)
    print("state:", current.state.value)
    for a in current.available_actions:
        print(f"  {a.action.value}: {'ok' if a.allowed else a.reason}")

    today = date.today()
    summary = container.attendance_service.get_summary(1, start=today.replace(day=1), end=today)
    print("worked this month:", format_minutes(summary.total_work_minutes))

    for item in container.payroll_service.calculate(period_start=today.replace(day=1), period_end=today):
        print(item.employee_code, item.full_name, item.gross_pay)


if __name__ == "__main__":
    main()
