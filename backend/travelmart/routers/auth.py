from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends, HTTPException
from jose import jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from travelmart.config import settings
from travelmart.database import get_db
from travelmart.models.user import CUSTOMER_ROLE, Role, User
from travelmart.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from travelmart.services.staff_service import pwd_context

router = APIRouter()


def create_access_token(user_id: str) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)
    payload = {"sub": user_id, "exp": expire}
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


@router.post("/register", status_code=201, response_model=AuthResponse)
async def register(req: RegisterRequest, db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(User).where(User.email == req.email))
    if result.scalar_one_or_none():
        raise HTTPException(status_code=400, detail="Email already registered")

    # New sign-ups are always customers; staff roles are granted by an admin
    role_result = await db.execute(select(Role).where(Role.name == CUSTOMER_ROLE))
    role = role_result.scalar_one_or_none()
    if role is None:
        role = Role(name=CUSTOMER_ROLE, description="Storefront customer")
        db.add(role)
        await db.flush()

    user = User(
        email=req.email,
        password_hash=pwd_context.hash(req.password),
        full_name=req.full_name,
        phone=req.phone,
        address=req.address,
        role_id=role.id,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)

    token = create_access_token(str(user.id))
    return AuthResponse(token=token, user=UserResponse.model_validate(user))


@router.post("/login", response_model=AuthResponse)
async def login(req: LoginRequest, db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(User).where(User.email == req.email))
    user = result.scalar_one_or_none()

    if not user or not pwd_context.verify(req.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    if not user.is_active:
        raise HTTPException(status_code=403, detail="Account is disabled")

    token = create_access_token(str(user.id))
    return AuthResponse(token=token, user=UserResponse.model_validate(user))
