# app/services/class_service.py
"""Classes: CRUD, the automatic completion sweep and upgrades."""
from typing import List, Optional, Dict, Any
from uuid import UUID
from datetime import date
import logging

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update

from .base_service import BaseService
from .notification_service import NotificationService, templates
from ..core.exceptions import NotFoundError, ValidationError
from ..models.class_model import ClassModel, ClassStatus
from ..models.student import Student
from ..schemas.class_schemas import ClassCreate, ClassUpdate, ClassUpgradeRequest

logger = logging.getLogger(__name__)


class ClassService(BaseService[ClassModel]):
    def __init__(self, db: AsyncSession):
        super().__init__(ClassModel, db)
        self.notifications = NotificationService(db)

    async def list_classes(self, status: Optional[ClassStatus] = None) -> List[ClassModel]:
        return await self.get_multi(order_by="created_at", sort="desc", status=status)

    async def get_class(self, class_id: UUID) -> ClassModel:
        class_obj = await self.get(class_id)
        if not class_obj:
            raise NotFoundError("Class")
        return class_obj

    async def create_class(self, data: ClassCreate, actor_name: str) -> ClassModel:
        class_obj = await self.create(data.model_dump())
        logger.info(f"Created class {class_obj.id} ({class_obj.name})")
        await self.notifications.emit(templates.class_added(class_obj.name, actor_name), entity_id=class_obj.id)
        return class_obj

    async def update_class(self, class_id: UUID, data: ClassUpdate) -> ClassModel:
        class_obj = await self.get_class(class_id)
        changes = data.model_dump(exclude_unset=True)

        # Completed is terminal; students move on through an upgrade instead
        new_status = changes.get("status")
        if class_obj.status == ClassStatus.COMPLETED and new_status and new_status != ClassStatus.COMPLETED:
            raise ValidationError("A completed class cannot be reopened")

        start =changes.get("start_date", class_obj.start_date)
        end = changes.get("end_date", class_obj.end_date)
        if start and end and end < start:
            raise ValidationError("end_date cannot be before start_date")

        return await self.update(class_id, changes)

    async def delete_class(self, class_id: UUID, actor_name: str) -> None:
        # Students, attendance and fees keep their class_id; reports label them "Unknown"
        class_obj = await self.get_class(class_id)
        class_name = class_obj.name
        await self.hard_delete(class_id)
        await self.notifications.emit(templates.class_deleted(class_name, actor_name), entity_id=class_id)

    async def bulk_delete(self, ids: List[UUID], actor_name: str) -> Dict[str, Any]:
        if not ids:
            raise ValidationError("No class IDs provided for deletion")

        result = await self.db.execute(select(ClassModel).where(ClassModel.id.in_(ids)))
        classes = list(result.scalars().all())
        if not classes:
            raise NotFoundError("Classes")

        deleted = [(c.id, c.name) for c in classes]
        for class_obj in classes:
            await self.db.delete(class_obj)
        await self.db.commit()

        for class_id, class_name in deleted:
            await self.notifications.emit(templates.class_deleted(class_name, actor_name), entity_id=class_id)

        return {
            "message": f"Successfully deleted {len(deleted)} class(es)",
            "deleted_count": len(deleted),
            "deleted_ids": [str(class_id) for class_id, _ in deleted],
        }

    async def complete_expired_classes(self, today: Optional[date] = None) -> int:
        """Mark every active class whose end date has arrived as completed"""
        today = today or date.today()
        stmt = (
            update(ClassModel)
            .where(
                ClassModel.status == ClassStatus.ACTIVE,
                ClassModel.end_date.is_not(None),
                ClassModel.end_date <= today,
            )
            .values(status=ClassStatus.COMPLETED)
        )
        result = await self.db.execute(stmt)
        await self.db.commit()
        logger.info(f"Completed {result.rowcount} expired class(es) as of {today}")
        return result.rowcount

    async def upgrade_class(self, source_id: UUID, request: ClassUpgradeRequest, actor_name: str) -> Dict[str, Any]:
        """
        Move every student of a completed class into a successor class.

        The successor is either created from ``new_class_data`` (always active)
        or an existing class named by ``promote_to_class_id``. The source class
        itself is left as it is.
        """
        source = await self.get(source_id)
        if not source:
            raise NotFoundError("Class")
        if source.status != ClassStatus.COMPLETED:
            raise ValidationError("Class must be completed to upgrade")

        if request.new_class_data is not None:
            target_data = request.new_class_data.model_dump()
            target_data["status"] = ClassStatus.ACTIVE
            target = ClassModel(**target_data)
            self.db.add(target)
            await self.db.flush()
            created = True
        elif request.promote_to_class_id is not None:
            target = await self.get(request.promote_to_class_id)
            if not target:
                raise NotFoundError("Target class")
            created = False
        else:
            raise ValidationError("Either newClassData or promoteToClassId is required")

        result = await self.db.execute(
            update(Student).where(Student.class_id == source.id).values(class_id=target.id)
        )
        moved = result.rowcount
        await self.db.commit()
        await self.db.refresh(target)
        logger.info(f"Upgraded class {source.id} -> {target.id}, moved {moved} student(s)")

        await self.notifications.emit(
            templates.class_upgraded(source.name, target.name, actor_name), entity_id=source.id
        )

        if created:
            message = f"Created {target.name} and moved students from {source.name}"
        else:
            message = f"Students promoted to {target.name}"
        return {"message": message, "new_class": target, "moved_students": moved}
