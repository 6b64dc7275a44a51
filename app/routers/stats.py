# app/routers/stats.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import require_approved_user
from ..models.user import User
from ..services.stats_service import StatsService

router = APIRouter(prefix="/api/stats", tags=["Dashboard"])


@router.get("")
async def dashboard_stats(user: User = Depends(require_approved_user), db: AsyncSession = Depends(get_db)):
    return await StatsService(db).dashboard_stats()
