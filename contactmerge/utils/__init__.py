"""Utility modules."""

from .activity_log import ActivityType, ActivityEntry, ActivityLog

__all__ = ['ActivityType', 'ActivityEntry', 'ActivityLog']
