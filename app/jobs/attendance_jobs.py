"""
Attendance Jobs

Background jobs for attendance housekeeping:
- Lock previous days' attendance so it can no longer be checked out or edited
"""

import logging
from datetime import datetime, timezone
from typing import Dict, Any

from app.database import get_db_session
from app.services.attendance_service import AttendanceService, local_today

logger = logging.getLogger(__name__)


async def lock_past_attendance() -> Dict[str, Any]:
    """
    Lock every attendance row dated before today (local time).

    Runs once a day shortly after midnight.
    """
    logger.info("Starting attendance lock...")
    start_time = datetime.now(timezone.utc)
    cutoff = local_today()

    async with get_db_session() as session:
        locked = await AttendanceService(session).lock_attendance_before(cutoff)

    duration = (datetime.now(timezone.utc) - start_time).total_seconds()
    logger.info(f"Attendance lock completed: {locked} rows before {cutoff} locked in {duration:.2f}s")

    return {
        "locked": locked,
        "cutoff": cutoff.isoformat(),
        "duration_seconds": duration,
    }
