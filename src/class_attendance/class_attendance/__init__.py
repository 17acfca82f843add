"""Class Attendance package.

Organized by feature modules (subjects, class_sessions, attendance, users)
with a thin Flask controller layer over service/repository layers.
"""
