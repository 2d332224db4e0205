"""
Authentication API routes
"""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.security import get_current_user
from app.middleware.rate_limit import auth_limiter
from app.schemas.sync import LocalState
from .schemas import RegisterRequest, LoginRequest, AuthResponse, SyncResponse, UserResponse
from .services import AuthService

router = APIRouter()

@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register new user"
)
async def register(
    data: RegisterRequest,
    db: AsyncSession = Depends(get_db)
):
    service = AuthService(db)
    user = await service.register(data)

    return AuthResponse(
        message="Registration successful",
        user=UserResponse.model_validate(user),
        token=service.generate_token(user),
        cart_synced=True,
        wishlist_synced=True,
    )

@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Login",
    description="Verify credentials and merge the client's local cart and wishlist"
)
@auth_limiter
async def login(
    request: Request,
    data: LoginRequest,
    db: AsyncSession = Depends(get_db)
):
    service = AuthService(db)
    user = await service.authenticate(data.email, data.password)
    user_data = UserResponse.model_validate(user)
    token = service.generate_token(user)

    result = await service.sync_local_state(user_data.id, data)

    return AuthResponse(
        user=user_data,
        token=token,
        cart_synced=result.cart_synced,
        wishlist_synced=result.wishlist_synced,
        sync_errors=result.errors,
    )

@router.post("/sync", response_model=SyncResponse, summary="Sync local data after login")
async def sync_local_data(
    data: LocalState,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = AuthService(db)
    result = await service.sync_local_state(current_user["id"], data)
    return SyncResponse(
        cart_synced=result.cart_synced,
        wishlist_synced=result.wishlist_synced,
        sync_errors=result.errors,
    )

@router.post("/google-sync", response_model=SyncResponse, summary="Sync local data after Google sign-in")
async def google_sync(
    data: LocalState,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = AuthService(db)
    result = await service.sync_local_state(current_user["id"], data)
    return SyncResponse(
        message="Google sign-in data synced",
        cart_synced=result.cart_synced,
        wishlist_synced=result.wishlist_synced,
        sync_errors=result.errors,
    )
