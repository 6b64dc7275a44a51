# app/services/user_service.py
"""Accounts: registration with the bootstrap/approval gate, login and user management."""
from typing import List, Optional, Dict, Any, Tuple
from uuid import UUID
import logging

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, text

from .base_service import BaseService
from .notification_service import NotificationService, templates
from ..core.exceptions import (
    AuthenticationError, NotFoundError, PermissionDenied, ValidationError
)
from ..core.security import create_access_token, hash_password, verify_password
from ..models.user import User, UserPreference, UserRole
from ..schemas.auth_schemas import RegisterRequest
from ..schemas.user_schemas import UserUpdate

logger = logging.getLogger(__name__)

# Arbitrary application-wide key for pg_advisory_xact_lock around registration
REGISTRATION_LOCK_KEY = 73310001

PENDING_APPROVAL_MESSAGE = "Your account is pending approval. Please contact an administrator."


def decide_approval(requested_role: UserRole, user_count: int, admin_count: int) -> Tuple[UserRole, bool]:
    """The first account, or any account while no admin exists, becomes an approved admin"""
    if user_count == 0 or admin_count == 0:
        return UserRole.ADMIN, True
    return requested_role, False


class UserService(BaseService[User]):
    def __init__(self, db: AsyncSession):
        super().__init__(User, db)
        self.notifications = NotificationService(db)

    async def get_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(User.email == email.strip().lower())
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def count_users(self) -> int:
        return await self.get_total_count()

    async def _lock_registration(self) -> None:
        # Serializes count-then-insert so two first registrations cannot both become admin
        if self.db.get_bind().dialect.name == "postgresql":
            await self.db.execute(
                text("SELECT pg_advisory_xact_lock(:key)"), {"key": REGISTRATION_LOCK_KEY}
            )

    async def register(self, data: RegisterRequest) -> User:
        email = data.email.strip().lower()

        await self._lock_registration()

        if await self.get_by_email(email):
            await self.db.rollback()
            raise ValidationError("User with this email already exists")

        user_count = await self.get_total_count()
        admin_count = await self.get_total_count(role=UserRole.ADMIN)
        role, is_approved = decide_approval(data.role, user_count, admin_count)

        user = User(
            name=data.name.strip(),
            email=email,
            password=hash_password(data.password),
            role=role,
            is_approved=is_approved,
        )
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)
        logger.info(f"Registered user {user.id} as {role.value} (approved={is_approved})")

        if not is_approved:
            await self.notifications.emit(
                templates.user_pending_approval(user.name, user.email), entity_id=user.id
            )
        return user

    async def authenticate(self, email: str, password: str) -> str:
        """Return a bearer token for valid credentials of an approved account"""
        user = await self.get_by_email(email)
        if not user or not verify_password(password, user.password):
            raise AuthenticationError("Invalid email or password")
        if not user.is_approved:
            raise PermissionDenied(PENDING_APPROVAL_MESSAGE)
        return create_access_token(str(user.id), {"role": user.role.value})

    async def check_user(self, email: str) -> Dict[str, Any]:
        """Pre-login probe; unknown emails get the same answer as a wrong password"""
        user = await self.get_by_email(email)
        if not user:
            return {"exists": False, "approved": False, "message": "Invalid email or password"}
        return {
            "exists": True,
            "approved": user.is_approved,
            "name": user.name,
            "message": None if user.is_approved else PENDING_APPROVAL_MESSAGE,
        }

    async def check_status(self, email: str) -> Dict[str, Any]:
        user = await self.get_by_email(email)
        if not user:
            raise NotFoundError("User")
        return {"is_approved": user.is_approved, "role": user.role.value}

    async def list_users(self) -> List[User]:
        return await self.get_multi(order_by="created_at", sort="desc")

    async def list_pending(self) -> List[User]:
        return await self.get_multi(order_by="created_at", sort="desc", is_approved=False)

    async def set_approval(self, user_id: UUID, approved: bool, actor: User) -> Dict[str, Any]:
        """Approve a pending user, or reject it by deleting the account"""
        user = await self.get(user_id)
        if not user:
            raise NotFoundError("User")

        user_name = user.name
        if approved:
            user.is_approved = True
            await self.db.commit()
            message = "User approved successfully"
        else:
            await self.db.delete(user)
            await self.db.commit()
            message = "User rejected and removed"

        await self.notifications.mark_user_pending_read(user_id)
        if approved:
            await self.notifications.emit(templates.user_approved(user_name, actor.name), entity_id=user_id)
        else:
            await self.notifications.emit(templates.user_rejected(user_name, actor.name), entity_id=user_id)

        logger.info(f"User {user_id} {'approved' if approved else 'rejected'} by {actor.id}")
        return {"message": message}

    async def update_profile(self, user_id: UUID, data: UserUpdate, actor: User) -> User:
        if actor.id != user_id and not actor.is_admin:
            raise PermissionDenied()

        user = await self.get(user_id)
        if not user:
            raise NotFoundError("User")

        changes = data.model_dump(exclude_unset=True)
        new_password = changes.pop("new_password", None)
        current_password = changes.pop("current_password", None)
        role = changes.pop("role", None)

        if new_password:
            if not current_password or not verify_password(current_password, user.password):
                raise ValidationError("Current password is incorrect")
            user.password = hash_password(new_password)

        if role is not None and role != user.role:
            if not actor.is_admin:
                raise PermissionDenied("Only admins can change roles")
            user.role = role

        for key, value in changes.items():
            setattr(user, key, value)

        await self.db.commit()
        await self.db.refresh(user)
        return user

    async def delete_user(self, user_id: UUID, actor: User) -> None:
        if actor.id != user_id and not actor.is_admin:
            raise PermissionDenied()

        user = await self.get(user_id)
        if not user:
            raise NotFoundError("User")

        user_name = user.name
        await self.db.delete(user)
        await self.db.commit()

        await self.notifications.emit(
            templates.user_deleted(user_name, actor.name, self_delete=actor.id == user_id),
            entity_id=user_id,
        )

    async def get_preferences(self, user: User) -> UserPreference:
        """Preferences are created with defaults on first read"""
        stmt = select(UserPreference).where(UserPreference.user_id == user.id)
        result = await self.db.execute(stmt)
        preferences = result.scalar_one_or_none()
        if preferences is None:
            preferences = UserPreference(user_id=user.id, push_notifications=True, email_updates=False)
            self.db.add(preferences)
            await self.db.commit()
            await self.db.refresh(preferences)
        return preferences

    async def save_preferences(self, user: User, data: Dict[str, Any]) -> UserPreference:
        push = data.get("push_notifications")
        email = data.get("email_updates")
        if not isinstance(push, bool) or not isinstance(email, bool):
            raise ValidationError("Invalid preferences data")

        preferences = await self.get_preferences(user)
        preferences.push_notifications = push
        preferences.email_updates = email
        await self.db.commit()
        await self.db.refresh(preferences)
        return preferences
