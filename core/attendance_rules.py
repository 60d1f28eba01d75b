# core/attendance_rules.py

"""
Constants used when rolling attendance marks up into percentages.
"""

from models.attendance_mark import AttendanceStatus

GOOD_STANDING_THRESHOLD = 75

# Late arrivals still count as attendance
CREDITED_STATUSES: frozenset[AttendanceStatus] = frozenset(
    {AttendanceStatus.PRESENT, AttendanceStatus.LATE}
)

# When several subjects are marked on one day, the calendar shows the most severe status
DAILY_STATUS_PRIORITY: tuple[AttendanceStatus, ...] = (
    AttendanceStatus.ABSENT,
    AttendanceStatus.LATE,
    AttendanceStatus.PRESENT,
)
