# app/services/notification_service.py
"""Activity feed: notification templates, best-effort emission and feed management."""
from typing import List, Optional, Dict, Any
from uuid import UUID
from datetime import datetime, timedelta, timezone
import logging

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, func

from .base_service import BaseService
from ..core.config import settings
from ..models.notification import Notification, NotificationType, EntityType
from ..models.user import User, UserPreference

logger = logging.getLogger(__name__)


class NotificationTemplates:
    """Pure builders for the notification payloads emitted by each domain event"""

    @staticmethod
    def class_added(class_name: str, actor_name: str) -> Dict[str, Any]:
        return {
            "title": "Class Added",
            "message": f'**{actor_name}** created the class "{class_name}".',
            "type": NotificationType.SUCCESS,
            "entity_type": EntityType.CLASS,
            "actor_name": actor_name,
            "action": "created",
        }

    @staticmethod
    def class_deleted(class_name: str, actor_name: str) -> Dict[str, Any]:
        return {
            "title": "Class Deleted",
            "message": f'**{actor_name}** deleted the class "{class_name}".',
            "type": NotificationType.WARNING,
            "entity_type": EntityType.CLASS,
            "actor_name": actor_name,
            "action": "deleted",
        }

    @staticmethod
    def class_upgraded(source_name: str, target_name: str, actor_name: str) -> Dict[str, Any]:
        return {
            "title": "Class Upgraded",
            "message": f'**{actor_name}** moved the students of "{source_name}" to "{target_name}".',
            "type": NotificationType.SUCCESS,
            "entity_type": EntityType.CLASS,
            "actor_name": actor_name,
            "action": "upgraded",
        }

    @staticmethod
    def student_added(student_name: str, class_name: str, actor_name: str) -> Dict[str, Any]:
        return {
            "title": "Student Added",
            "message": f'**{actor_name}** added {student_name} to class "{class_name}".',
            "type": NotificationType.SUCCESS,
            "entity_type": EntityType.STUDENT,
            "actor_name": actor_name,
            "action": "added",
        }

    @staticmethod
    def student_deleted(student_name: str, actor_name: str) -> Dict[str, Any]:
        return {
            "title": "Student Removed",
            "message": f"**{actor_name}** removed {student_name} from the attendance.",
            "type": NotificationType.WARNING,
            "entity_type": EntityType.STUDENT,
            "actor_name": actor_name,
            "action": "removed",
        }

    @staticmethod
    def attendance_taken(class_name: str, date: str, actor_name: str) -> Dict[str, Any]:
        return {
            "title": "Attendance Taken",
            "message": f'**{actor_name}** recorded attendance for class "{class_name}" on {date}.',
            "type": NotificationType.SUCCESS,
            "entity_type": EntityType.ATTENDANCE,
            "actor_name": actor_name,
            "action": "recorded",
        }

    @staticmethod
    def attendance_updated(class_name: str, date: str, actor_name: str) -> Dict[str, Any]:
        return {
            "title": "Attendance Updated",
            "message": f'**{actor_name}** updated attendance records for class "{class_name}" on {date}.',
            "type": NotificationType.INFO,
            "entity_type": EntityType.ATTENDANCE,
            "actor_name": actor_name,
            "action": "updated",
        }

    @staticmethod
    def attendance_deleted(class_name: str, date: str, actor_name: str) -> Dict[str, Any]:
        return {
            "title": "Attendance Deleted",
            "message": f'**{actor_name}** deleted attendance record for class "{class_name}" on {date}.',
            "type": NotificationType.WARNING,
            "entity_type": EntityType.ATTENDANCE,
            "actor_name": actor_name,
            "action": "deleted",
        }

    @staticmethod
    def fee_added(student_name: str, class_name: str, amount: str) -> Dict[str, Any]:
        return {
            "title": "Fee Added",
            "message": f"Fee added for student **{student_name}** in class **{class_name}**. Amount: {amount}",
            "type": NotificationType.FEE,
            "entity_type": EntityType.FEE,
            "action": "created",
        }

    @staticmethod
    def fee_updated(student_name: str, class_name: str, amount: str) -> Dict[str, Any]:
        return {
            "title": "Fee Updated",
            "message": f"Fee updated for student **{student_name}** in class **{class_name}**. New amount: {amount}",
            "type": NotificationType.FEE,
            "entity_type": EntityType.FEE,
            "action": "updated",
        }

    @staticmethod
    def user_pending_approval(user_name: str, user_email: str) -> Dict[str, Any]:
        return {
            "title": "New User Pending Approval",
            "message": f"{user_name} ({user_email}) has registered and is waiting for approval.",
            "type": NotificationType.WARNING,
            "entity_type": EntityType.USER,
            "action": "pending",
        }

    @staticmethod
    def user_approved(user_name: str, actor_name: str) -> Dict[str, Any]:
        return {
            "title": "User Approved",
            "message": f"**{actor_name}** approved {user_name} as a new user.",
            "type": NotificationType.SUCCESS,
            "entity_type": EntityType.USER,
            "actor_name": actor_name,
            "action": "approved",
        }

    @staticmethod
    def user_rejected(user_name: str, actor_name: str) -> Dict[str, Any]:
        return {
            "title": "User Rejected",
            "message": f"**{actor_name}** rejected {user_name}'s registration.",
            "type": NotificationType.WARNING,
            "entity_type": EntityType.USER,
            "actor_name": actor_name,
            "action": "rejected",
        }

    @staticmethod
    def user_deleted(user_name: str, actor_name: str, self_delete: bool) -> Dict[str, Any]:
        if self_delete:
            message = f"**{actor_name}** deleted his/her account."
        else:
            message = f"**{actor_name}** deleted {user_name} from the system."
        return {
            "title": "User Deleted",
            "message": message,
            "type": NotificationType.WARNING,
            "entity_type": EntityType.USER,
            "actor_name": actor_name,
            "action": "deleted",
        }


templates = NotificationTemplates()


class NotificationService(BaseService[Notification]):
    def __init__(self, db: AsyncSession):
        super().__init__(Notification, db)

    async def emit(self, payload: Dict[str, Any], entity_id: Any = None) -> Optional[Notification]:
        """
        Insert a notification built from a template. Never raises: the caller's
        own write is already committed and must not be undone by a feed failure.
        """
        data = dict(payload)
        if entity_id is not None:
            data["entity_id"] = str(entity_id)

        # Separate session: a rollback here must not expire the caller's objects
        async with AsyncSession(bind=self.db.bind, expire_on_commit=False) as session:
            try:
                notification = Notification(**data)
                session.add(notification)
                await session.commit()
            except Exception as e:
                logger.error(f"Failed to create notification '{data.get('title')}': {e}")
                await session.rollback()
                return None

            await self._queue_email_updates(session, notification)
        return notification

    async def _queue_email_updates(self, session: AsyncSession, notification: Notification) -> None:
        """Hand the notification to the email worker for users who opted in"""
        if not settings.resend_api_key:
            return
        try:
            stmt = (
                select(User.email)
                .join(UserPreference, UserPreference.user_id == User.id)
                .where(UserPreference.email_updates.is_(True), User.is_approved.is_(True))
            )
            result = await session.execute(stmt)
            recipients = [row[0] for row in result.all()]
            if not recipients:
                return

            from ..tasks import send_notification_email_task

            send_notification_email_task.delay(recipients, notification.title, notification.message)
            logger.info(f"Queued email update '{notification.title}' for {len(recipients)} recipient(s)")
        except Exception as e:
            logger.error(f"Failed to queue email updates for notification {notification.id}: {e}")

    async def list_notifications(self, limit: int = 100, unread_only: bool = False) -> List[Notification]:
        stmt = select(Notification).order_by(Notification.created_at.desc()).limit(limit)
        if unread_only:
            stmt = stmt.where(Notification.is_read.is_(False))
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def unread_count(self) -> int:
        stmt = select(func.count()).select_from(Notification).where(Notification.is_read.is_(False))
        result = await self.db.execute(stmt)
        return result.scalar()

    async def mark_read(self, notification_id: UUID) -> Optional[Notification]:
        return await self.update(notification_id, {"is_read": True})

    async def mark_all_read(self) -> int:
        stmt = update(Notification).where(Notification.is_read.is_(False)).values(is_read=True)
        result = await self.db.execute(stmt)
        await self.db.commit()
        return result.rowcount

    async def mark_user_pending_read(self, user_id: UUID) -> None:
        """Close the 'pending approval' item once an admin has decided on the user"""
        stmt = (
            update(Notification)
            .where(
                Notification.entity_type == EntityType.USER,
                Notification.entity_id == str(user_id),
                Notification.action == "pending",
            )
            .values(is_read=True)
        )
        await self.db.execute(stmt)
        await self.db.commit()

    async def cleanup_old_notifications(self, retention_days: int, now: Optional[datetime] = None) -> int:
        """Delete notifications older than the retention window; returns the number removed"""
        now = now or datetime.now(timezone.utc)
        cutoff = now - timedelta(days=retention_days)
        stmt = delete(Notification).where(Notification.created_at < cutoff)
        result = await self.db.execute(stmt)
        await self.db.commit()
        logger.info(f"Removed {result.rowcount} notification(s) older than {retention_days} days")
        return result.rowcount
