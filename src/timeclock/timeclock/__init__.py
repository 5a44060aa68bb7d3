"""Timeclock package.

Attendance lifecycle engine: clock state machine, work-hours arithmetic and
payroll calculation, organized by feature modules (attendance, payroll, ...)
with a thin Flask controller layer over service/repository layers.
"""
