# app/routers/cron.py
"""HTTP triggers for the maintenance sweeps, for schedulers outside the Celery beat."""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import verify_cron_secret
from ..services.sweep_service import (
    complete_classes_sweep, notification_cleanup_sweep, report_dispatch_sweep
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/cron", tags=["Cron"], dependencies=[Depends(verify_cron_secret)])


@router.get("/classes")
async def run_class_completion(db: AsyncSession = Depends(get_db)):
    logger.info("Cron: class completion sweep")
    return await complete_classes_sweep(db)


@router.get("/cleanup")
async def run_notification_cleanup(db: AsyncSession = Depends(get_db)):
    logger.info("Cron: notification cleanup sweep")
    return await notification_cleanup_sweep(db)


@router.get("/reports")
async def run_report_dispatch(db: AsyncSession = Depends(get_db)):
    logger.info("Cron: scheduled report dispatch")
    return await report_dispatch_sweep(db)
