"""
Background Jobs Module

Handles scheduled tasks for:
- Attendance locking
"""

from app.jobs.scheduler import scheduler, start_scheduler, shutdown_scheduler
from app.jobs.attendance_jobs import lock_past_attendance

__all__ = [
    "scheduler",
    "start_scheduler",
    "shutdown_scheduler",
    "lock_past_attendance",
]
