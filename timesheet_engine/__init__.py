"""Timesheet rule engine.

Business rules behind a Teams timesheet application: freeze windows,
daily and weekly effort limits, duplication of efforts across dates,
the save/submit/approve/reject lifecycle and approval notifications.
"""

__version__ = "1.0.0"
