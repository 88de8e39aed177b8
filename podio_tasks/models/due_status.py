"""
Due status buckets
"""

from datetime import date, timedelta
from enum import Enum
from typing import Optional


class DueStatus(str, Enum):
    """Due status bucket of an active task, relative to "today" """
    
    OVERDUE = "overdue"
    TODAY = "today"
    TOMORROW = "tomorrow"
    LATER = "later"
    NO_DUE_DATE = "no_due_date"


def classify_due_status(due_date: Optional[date], today: date) -> DueStatus:
    """
    Classify a due date into exactly one bucket
    
    Args:
        due_date: Task due date, None when the task has none
        today: Reference date ("today" in the task timezone)
        
    Returns:
        The bucket the due date falls into
    """
    if due_date is None:
        return DueStatus.NO_DUE_DATE
    if due_date < today:
        return DueStatus.OVERDUE
    if due_date == today:
        return DueStatus.TODAY
    if due_date == today + timedelta(days=1):
        return DueStatus.TOMORROW
    return DueStatus.LATER
