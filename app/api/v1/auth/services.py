"""
Authentication service layer
"""

import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from app.models import User, UserRole, AuthProvider
from app.core.config import settings
from app.core.security import SecurityUtils
from app.core.exceptions import BadRequestException, ConflictException, UnauthorizedException
from app.schemas.sync import LocalState, SyncResult
from app.services.sync_service import SyncService
from .schemas import RegisterRequest

logger = logging.getLogger(__name__)

class AuthService:
    """Password accounts and the sync-on-login merge"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_by_email(self, email: str):
        return await self.db.scalar(select(User).where(User.email == email))

    async def register(self, request: RegisterRequest) -> User:
        """
        Register new password account

        Raises:
            BadRequestException: Weak password
            ConflictException: Email already registered
        """
        valid, reason = SecurityUtils.validate_password(request.password)
        if not valid:
            raise BadRequestException(reason, error_code="WEAK_PASSWORD")

        if await self.get_user_by_email(request.email):
            raise ConflictException("User already exists with this email", error_code="EMAIL_EXISTS")

        admin_emails = {email.lower() for email in settings.ADMIN_EMAILS}
        user = User(
            name=request.name,
            last_name=request.last_name,
            email=request.email,
            password_hash=SecurityUtils.hash_password(request.password),
            role=UserRole.ADMIN if request.email in admin_emails else UserRole.USER,
            auth_provider=AuthProvider.LOCAL,
        )

        self.db.add(user)
        await self.db.commit()

        logger.info("User %s registered", user.id)
        return user

    async def authenticate(self, email: str, password: str) -> User:
        """
        Verify credentials

        Raises:
            UnauthorizedException: Unknown email, OAuth-only account or wrong password
        """
        user = await self.get_user_by_email(email)

        if not user or not user.password_hash or not SecurityUtils.verify_password(password, user.password_hash):
            raise UnauthorizedException("Invalid email or password", error_code="INVALID_CREDENTIALS")

        return user

    @staticmethod
    def generate_token(user: User) -> str:
        role = user.role.value if isinstance(user.role, UserRole) else user.role
        return SecurityUtils.create_access_token({
            "sub": user.id,
            "email": user.email,
            "role": role,
        })

    async def sync_local_state(self, user_id: str, state: LocalState) -> SyncResult:
        """
        Run the merge for a user

        A store failure during the merge is logged and reported in the
        result; it never fails the login.
        """
        try:
            return await SyncService(self.db).merge(user_id, state.local_cart, state.local_wishlist)
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception("Local state merge failed for user %s", user_id)
            return SyncResult(
                cart_synced=not state.local_cart,
                wishlist_synced=not state.local_wishlist,
                errors=["Failed to sync local cart and wishlist"],
            )
