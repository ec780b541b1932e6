"""Attendance dashboard package.

Organized by feature modules (attendance, pagination, stats, reports,
dashboard) with a thin Flask controller layer on top of async service and
repository layers that talk to the remote attendance service.
"""
