# app/tasks.py
"""Celery tasks: the periodic sweeps and the notification email fan-out."""
import asyncio
import logging
from typing import List

from celery_worker import celery_app

from .core.database import AsyncBackgroundSessionLocal
from .services.email_service import EmailService, EmailServiceException, render_notification_email
from .services.sweep_service import (
    complete_classes_sweep, notification_cleanup_sweep, report_dispatch_sweep
)

logger = logging.getLogger(__name__)


async def _run_sweep(sweep):
    async with AsyncBackgroundSessionLocal() as session:
        return await sweep(session)


@celery_app.task(name="app.tasks.complete_expired_classes_task")
def complete_expired_classes_task():
    result = asyncio.run(_run_sweep(complete_classes_sweep))
    logger.info(result["message"])
    return result


@celery_app.task(name="app.tasks.cleanup_notifications_task")
def cleanup_notifications_task():
    result = asyncio.run(_run_sweep(notification_cleanup_sweep))
    logger.info(result["message"])
    return result


@celery_app.task(name="app.tasks.dispatch_scheduled_reports_task")
def dispatch_scheduled_reports_task():
    result = asyncio.run(_run_sweep(report_dispatch_sweep))
    logger.info(result["message"])
    return result


@celery_app.task(
    name="app.tasks.send_notification_email_task",
    autoretry_for=(EmailServiceException,),
    retry_backoff=True,
    max_retries=3,
)
def send_notification_email_task(recipients: List[str], title: str, message: str):
    """Email a notification to every user who opted into email updates"""
    asyncio.run(EmailService().send(recipients, title, render_notification_email(title, message)))
    logger.info(f"Sent notification email '{title}' to {len(recipients)} recipient(s)")
