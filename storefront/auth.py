# storefront/auth.py
import uuid
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .config import Settings
from .database import get_session
from .errors import AuthenticationError, Conflict
from .models import User
from .repositories import UserRepository
from .schemas import Token, UserCreate, UserLogin, UserOut
from .security import create_access_token, decode_access_token, get_password_hash, verify_password
from .validation import require_text

logger = structlog.get_logger(__name__)


class AuthService:
    """Registers users, checks credentials and issues/validates bearer tokens."""

    def __init__(self, users: UserRepository, settings: Settings):
        self.users = users
        self.settings = settings

    async def register(self, email: str, password: str, name: str) -> User:
        email = email.strip().lower()
        name = require_text(name, "name")
        if await self.users.get_by_email(email) is not None:
            raise Conflict("A user with this email already exists")

        user = User(email=email, name=name, password_hash=get_password_hash(password))
        try:
            user = await self.users.add(user)
        except IntegrityError:
            # lost a race against a concurrent registration of the same email
            await self.users.rollback()
            raise Conflict("A user with this email already exists")

        logger.info("User registered", user_id=str(user.id))
        return user

    async def authenticate(self, email: str, password: str) -> User:
        user = await self.users.get_by_email(email.strip().lower())
        if user is None or not verify_password(password, user.password_hash):
            logger.info("Login rejected", email=email)
            raise AuthenticationError("Invalid email or password")
        return user

    def issue_token(self, user: User) -> str:
        return create_access_token(str(user.id), self.settings)

    async def validate_token(self, token: str) -> User:
        payload = decode_access_token(token, self.settings)
        if payload is None:
            raise AuthenticationError("Invalid or expired token")

        subject = payload.get("sub")
        try:
            user_id = uuid.UUID(str(subject))
        except ValueError:
            raise AuthenticationError("Invalid or expired token")

        user = await self.users.get(user_id)
        if user is None:
            raise AuthenticationError("User not found")
        return user


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_auth_service(
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> AuthService:
    return AuthService(UserRepository(session), settings)


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


async def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    auth: AuthService = Depends(get_auth_service),
) -> User:
    if not token:
        raise AuthenticationError("Not authenticated")
    return await auth.validate_token(token)


router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
async def register_user(payload: UserCreate, auth: AuthService = Depends(get_auth_service)):
    return await auth.register(payload.email, payload.password, payload.name)


@router.post("/login", response_model=Token)
async def login_user(payload: UserLogin, auth: AuthService = Depends(get_auth_service)):
    user = await auth.authenticate(payload.email, payload.password)
    return Token(access_token=auth.issue_token(user))


@router.get("/me", response_model=UserOut)
async def get_me(current_user: User = Depends(get_current_user)):
    return current_user
