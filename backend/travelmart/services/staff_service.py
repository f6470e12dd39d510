"""Staff management and role assignment for the back office."""

import logging
import uuid

from passlib.context import CryptContext
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from travelmart.models.user import ADMIN_ROLES, DRIVER_ROLES, Driver, Role, Staff, User
from travelmart.services.notification_service import notification_service

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def staff_to_dict(user: User, staff: Staff | None) -> dict:
    return {
        "id": user.id,
        "email": user.email,
        "full_name": user.full_name,
        "phone": user.phone,
        "role_id": user.role_id,
        "role_name": user.role_name,
        "department": staff.department if staff else None,
        "is_active": user.is_active,
    }


class StaffService:
    """Creates and maintains back-office accounts."""

    async def get_role(self, db: AsyncSession, role_id: int) -> Role | None:
        return await db.get(Role, role_id)

    async def get_role_by_name(self, db: AsyncSession, name: str) -> Role | None:
        result = await db.execute(select(Role).where(Role.name == name))
        return result.scalar_one_or_none()

    async def list_roles(self, db: AsyncSession) -> list[Role]:
        result = await db.execute(select(Role).order_by(Role.id))
        return list(result.scalars().all())

    async def list_staff(self, db: AsyncSession, search: str | None = None) -> list[dict]:
        """Users whose role is a staff, driver or admin role."""
        query = (
            select(User, Staff)
            .join(Role, User.role_id == Role.id)
            .outerjoin(Staff, Staff.id == User.id)
            .where(or_(
                Role.name.like("Staff%"),
                Role.name.in_(DRIVER_ROLES),
                Role.name.in_(ADMIN_ROLES),
            ))
            .order_by(User.full_name)
        )
        if search:
            pattern = f"%{search.lower()}%"
            query = query.where(or_(
                User.full_name.ilike(pattern),
                User.email.ilike(pattern),
                User.phone.ilike(pattern),
            ))
        result = await db.execute(query)
        return [staff_to_dict(user, staff) for user, staff in result.unique().all()]

    async def create_staff(
        self,
        db: AsyncSession,
        email: str,
        password: str,
        full_name: str,
        role_id: int,
        phone: str | None = None,
        department: str | None = None,
    ) -> dict:
        existing = await db.execute(select(User).where(User.email == email))
        if existing.scalar_one_or_none():
            raise ValueError("Email already registered")

        role = await self.get_role(db, role_id)
        if role is None:
            raise LookupError(f"Role with ID {role_id} not found")

        user = User(
            email=email,
            password_hash=pwd_context.hash(password),
            full_name=full_name,
            phone=phone,
            role_id=role.id,
        )
        db.add(user)
        await db.flush()

        staff = Staff(id=user.id, department=department)
        db.add(staff)
        if role.name in DRIVER_ROLES:
            db.add(Driver(id=user.id))

        await db.commit()
        await db.refresh(user)
        logger.info(f"Staff account created: {email} ({role.name})")
        return staff_to_dict(user, staff)

    async def update_staff(self, db: AsyncSession, user_id: uuid.UUID, changes: dict) -> dict:
        user = await db.get(User, user_id)
        if user is None:
            raise LookupError("Staff member not found")

        if changes.get("role_id") is not None:
            role = await self.get_role(db, changes["role_id"])
            if role is None:
                raise LookupError(f"Role with ID {changes['role_id']} not found")
            user.role_id = role.id

        for field in ("full_name", "phone", "is_active"):
            if changes.get(field) is not None:
                setattr(user, field, changes[field])

        staff = await db.get(Staff, user_id)
        if "department" in changes:
            if staff is None:
                staff = Staff(id=user_id)
                db.add(staff)
            staff.department = changes["department"]

        await db.commit()
        await db.refresh(user)
        return staff_to_dict(user, staff)

    async def deactivate_staff(self, db: AsyncSession, user_id: uuid.UUID) -> bool:
        user = await db.get(User, user_id)
        if user is None:
            return False
        user.is_active = False
        await db.commit()
        logger.info(f"Staff account deactivated: {user.email}")
        return True

    async def assign_role(self, db: AsyncSession, user_id: uuid.UUID, role_id: int) -> User:
        role = await self.get_role(db, role_id)
        if role is None:
            raise LookupError(f"Role with ID {role_id} not found")

        user = await db.get(User, user_id)
        if user is None:
            raise LookupError(f"User with ID {user_id} not found")

        user.role_id = role.id
        await notification_service.send_role_assigned(db, user.id, role.name)
        await db.commit()
        await db.refresh(user)
        logger.info(f"Role '{role.name}' assigned to {user.email}")
        return user


staff_service = StaffService()
