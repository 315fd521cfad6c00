from fastapi import APIRouter, Depends, Request, status

from taskboard.core.security import TokenIdentity, require_user
from taskboard.models.user import (
    AuthResponse,
    LoginPayload,
    ProfileResponse,
    RegisterPayload,
)
from taskboard.services.auth_service import AuthService

from .dependencies import get_auth_service

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    payload: RegisterPayload,
    service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    return await service.register(payload)


@router.post("/login", response_model=AuthResponse)
async def login(
    payload: LoginPayload,
    request: Request,
    service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    client_host = request.client.host if request.client else None
    return await service.login(payload, client_host=client_host)


@router.get("/profile", response_model=ProfileResponse)
async def profile(
    identity: TokenIdentity = Depends(require_user),
    service: AuthService = Depends(get_auth_service),
) -> ProfileResponse:
    return await service.profile(identity)
