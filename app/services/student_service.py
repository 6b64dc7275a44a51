# app/services/student_service.py
from typing import List, Optional, Dict, Any
from uuid import UUID
import logging

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from .base_service import BaseService
from .notification_service import NotificationService, templates
from ..core.exceptions import NotFoundError
from ..models.class_model import ClassModel
from ..models.student import Student
from ..schemas.student_schemas import StudentCreate, StudentUpdate, StudentResponse

logger = logging.getLogger(__name__)


class StudentService(BaseService[Student]):
    def __init__(self, db: AsyncSession):
        super().__init__(Student, db)
        self.notifications = NotificationService(db)

    async def list_students(self, class_id: Optional[UUID] = None) -> List[Dict[str, Any]]:
        """Students with their class name, newest first"""
        stmt = (
            select(Student, ClassModel.name)
            .outerjoin(ClassModel, ClassModel.id == Student.class_id)
            .order_by(Student.created_at.desc())
        )
        if class_id:
            stmt = stmt.where(Student.class_id == class_id)

        result = await self.db.execute(stmt)
        return [
            {
                **StudentResponse.model_validate(student).model_dump(mode="json"),
                "class_name": class_name or "Unknown",
            }
            for student, class_name in result.all()
        ]

    async def get_student(self, student_id: UUID) -> Student:
        student = await self.get(student_id)
        if not student:
            raise NotFoundError("Student")
        return student

    async def _require_class(self, class_id: UUID) -> ClassModel:
        class_obj = await self.db.get(ClassModel, class_id)
        if not class_obj:
            raise NotFoundError("Class")
        return class_obj

    async def create_student(self, data: StudentCreate, actor_name: str) -> Student:
        class_obj = await self._require_class(data.class_id)
        student = await self.create(data.model_dump())
        logger.info(f"Added student {student.id} to class {class_obj.id}")
        await self.notifications.emit(
            templates.student_added(student.name, class_obj.name, actor_name), entity_id=student.id
        )
        return student

    async def update_student(self, student_id: UUID, data: StudentUpdate) -> Student:
        await self.get_student(student_id)
        changes = data.model_dump(exclude_unset=True)
        if changes.get("class_id"):
            await self._require_class(changes["class_id"])
        return await self.update(student_id, changes)

    async def delete_student(self, student_id: UUID, actor_name: str) -> None:
        student = await self.get_student(student_id)
        student_name = student.name
        await self.hard_delete(student_id)
        await self.notifications.emit(templates.student_deleted(student_name, actor_name), entity_id=student_id)
