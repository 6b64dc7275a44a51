# app/services/sweep_service.py
"""Periodic maintenance jobs shared by the cron endpoints and the Celery beat tasks."""
from typing import Dict, Any
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from .class_service import ClassService
from .notification_service import NotificationService
from .report_schedule_service import ReportScheduleService
from ..core.config import settings

logger = logging.getLogger(__name__)


async def complete_classes_sweep(db: AsyncSession) -> Dict[str, Any]:
    count = await ClassService(db).complete_expired_classes()
    return {"success": True, "message": f"Marked {count} class(es) as completed"}


async def notification_cleanup_sweep(db: AsyncSession) -> Dict[str, Any]:
    removed = await NotificationService(db).cleanup_old_notifications(settings.notification_retention_days)
    return {"success": True, "message": f"Deleted {removed} notification(s) older than {settings.notification_retention_days} days"}


async def report_dispatch_sweep(db: AsyncSession) -> Dict[str, Any]:
    result = await ReportScheduleService(db).dispatch_due()
    return {
        "success": result["failed"] == 0,
        "message": f"Sent {result['sent']} of {result['due']} due report(s)",
    }
