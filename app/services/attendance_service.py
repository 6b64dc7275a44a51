# app/services/attendance_service.py
from typing import List, Optional, Dict, Iterable, Tuple
from uuid import UUID
from datetime import date
import logging

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from .base_service import BaseService
from .notification_service import NotificationService, templates
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..models.attendance import Attendance
from ..models.class_model import ClassModel
from ..models.student import Student
from ..schemas.attendance_schemas import AttendanceCreate, AttendanceUpdate

logger = logging.getLogger(__name__)

UNKNOWN_CLASS = "Unknown Class"

AttendanceKey = Tuple[UUID, UUID, date]


async def _missing_ids(db: AsyncSession, model, ids: Iterable[UUID]) -> List[UUID]:
    wanted = set(ids)
    if not wanted:
        return []
    result = await db.execute(select(model.id).where(model.id.in_(wanted)))
    return sorted(wanted - set(result.scalars().all()), key=str)


async def check_references(db: AsyncSession, student_ids: Iterable[UUID], class_ids: Iterable[UUID]) -> None:
    """Reject writes that point at students or classes that do not exist"""
    missing_students = await _missing_ids(db, Student, student_ids)
    if missing_students:
        raise ValidationError(f"Student not found: {', '.join(str(i) for i in missing_students)}")
    missing_classes = await _missing_ids(db, ClassModel, class_ids)
    if missing_classes:
        raise ValidationError(f"Class not found: {', '.join(str(i) for i in missing_classes)}")


class AttendanceService(BaseService[Attendance]):
    def __init__(self, db: AsyncSession):
        super().__init__(Attendance, db)
        self.notifications = NotificationService(db)

    async def _class_name(self, class_id: UUID) -> str:
        class_obj = await self.db.get(ClassModel, class_id)
        return class_obj.name if class_obj else UNKNOWN_CLASS

    async def _find(self, student_id: UUID, class_id: UUID, on: date) -> Optional[Attendance]:
        stmt = select(Attendance).where(
            Attendance.student_id == student_id,
            Attendance.class_id == class_id,
            Attendance.date == on,
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def list_attendance(
        self,
        class_id: Optional[UUID] = None,
        on: Optional[date] = None,
        student_id: Optional[UUID] = None,
    ) -> List[Attendance]:
        """Filter by class and date, by student, or return everything"""
        stmt = select(Attendance).order_by(Attendance.date.desc(), Attendance.created_at.desc())
        if class_id and on:
            stmt = stmt.where(Attendance.class_id == class_id, Attendance.date == on)
        elif student_id:
            stmt = stmt.where(Attendance.student_id == student_id)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_attendance(self, attendance_id: UUID) -> Attendance:
        record = await self.get(attendance_id)
        if not record:
            raise NotFoundError("Attendance record")
        return record

    async def create_attendance(self, data: AttendanceCreate, actor_name: str) -> Attendance:
        await check_references(self.db, [data.student_id], [data.class_id])
        if await self._find(data.student_id, data.class_id, data.date):
            raise ConflictError("Attendance already recorded for this student on this date")

        record = await self.create(data.model_dump())
        class_name = await self._class_name(record.class_id)
        await self.notifications.emit(
            templates.attendance_taken(class_name, record.date.isoformat(), actor_name), entity_id=record.id
        )
        return record

    async def bulk_upsert(self, records: List[AttendanceCreate], actor_name: str) -> List[Attendance]:
        """
        Insert or overwrite one row per (student, class, date) for a whole batch.

        The batch has already been validated as a unit. When the same key
        appears more than once the last record wins. Exactly one notification
        is emitted: "taken" when the first record's class had no attendance on
        that date before this call, otherwise "updated".
        """
        if not records:
            raise ValidationError("No attendance records provided")
        await check_references(
            self.db, [r.student_id for r in records], [r.class_id for r in records]
        )

        first = records[0]
        count_stmt = select(func.count()).select_from(Attendance).where(
            Attendance.class_id == first.class_id, Attendance.date == first.date
        )
        is_first_time = (await self.db.execute(count_stmt)).scalar() == 0

        latest: Dict[AttendanceKey, AttendanceCreate] = {}
        for record in records:
            latest[(record.student_id, record.class_id, record.date)] = record

        saved: List[Attendance] = []
        for (student_id, class_id, on), record in latest.items():
            existing = await self._find(student_id, class_id, on)
            if existing:
                existing.status = record.status
                saved.append(existing)
            else:
                row = Attendance(**record.model_dump())
                self.db.add(row)
                saved.append(row)

        await self.db.commit()
        for row in saved:
            await self.db.refresh(row)
        logger.info(f"Upserted {len(saved)} attendance record(s) for class {first.class_id} on {first.date}")

        class_name = await self._class_name(first.class_id)
        template = templates.attendance_taken if is_first_time else templates.attendance_updated
        await self.notifications.emit(
            template(class_name, first.date.isoformat(), actor_name), entity_id=saved[0].id
        )
        return saved

    async def update_attendance(self, attendance_id: UUID, data: AttendanceUpdate, actor_name: str) -> Attendance:
        record = await self.get_attendance(attendance_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        new_date = changes.get("date")
        if new_date and new_date != record.date:
            if await self._find(record.student_id, record.class_id, new_date):
                raise ConflictError("Attendance already recorded for this student on this date")

        record = await self.update(attendance_id, changes)
        class_name = await self._class_name(record.class_id)
        await self.notifications.emit(
            templates.attendance_updated(class_name, record.date.isoformat(), actor_name), entity_id=record.id
        )
        return record

    async def delete_attendance(self, attendance_id: UUID, actor_name: str) -> None:
        record = await self.get_attendance(attendance_id)
        class_id, on = record.class_id, record.date
        await self.hard_delete(attendance_id)

        class_name = await self._class_name(class_id)
        await self.notifications.emit(
            templates.attendance_deleted(class_name, on.isoformat(), actor_name), entity_id=attendance_id
        )
