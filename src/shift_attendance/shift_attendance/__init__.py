"""Shift Attendance package.

Shift scheduling and station check-in, organized by feature modules
(clock, schedules, attendance, stations, ...) with a thin Flask controller
layer over service/repository layers.
"""
