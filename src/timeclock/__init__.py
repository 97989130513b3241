"""Timeclock package.

Employee time-and-attendance tracking organized by feature modules
(attendance, employees, reports, jobs, ...) with thin Flask controllers
over service/repository layers.
"""
