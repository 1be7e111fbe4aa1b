from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.auth.schemas import (
    LoginRequest, TokenResponse, CurrentUserResponse, ChangePasswordRequest,
    ForgotPasswordRequest, ResetPasswordRequest, VerifyEmailRequest, MessageResponse
)
from app.modules.auth.service import AuthService
from app.core.dependencies import (
    get_auth_service, get_access_token, get_current_user, get_user_permissions, get_access_cache
)
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Login and get access token. passwordChangeRequired tells the client to force a password change."""
    return service.login(login_data)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    token: str = Depends(get_access_token),
    service: AuthService = Depends(get_auth_service)
):
    """Logout and invalidate token"""
    service.logout(token)
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=CurrentUserResponse)
async def get_me(
    current_user: Dict = Depends(get_current_user),
    supabase: Client = Depends(get_supabase),
    cache: Dict = Depends(get_access_cache),
):
    """Get current authenticated user and their permission codes (for frontend UI)."""
    permissions = get_user_permissions(current_user, supabase, cache)
    return {**current_user, "permissions": permissions}


@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    request: ChangePasswordRequest,
    current_user: Dict = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service)
):
    service.change_password(current_user, request)
    return {"message": "Password changed successfully"}


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(
    request: ForgotPasswordRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Send a password reset link. The response is the same whether or not the email exists."""
    service.request_password_reset(request.email)
    return {"message": "If an account exists for this email, a password reset link has been sent."}


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(
    request: ResetPasswordRequest,
    service: AuthService = Depends(get_auth_service)
):
    service.reset_password(request.token, request.new_password)
    return {"message": "Password reset successfully. You can now log in with your new password."}


@router.post("/verify-email", response_model=MessageResponse)
async def verify_email(
    request: VerifyEmailRequest,
    service: AuthService = Depends(get_auth_service)
):
    service.verify_email(request.token)
    return {"message": "Email verified successfully"}
