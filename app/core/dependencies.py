"""
Core dependencies for route protection and permission checking
"""

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.config import settings
from app.config.permissions_config import ROLE_DEFAULTS, all_permission_codes
from app.database.supabase_client import get_supabase, get_optional_supabase_admin, get_session_client_factory
from app.modules.auth.service import AuthService
from supabase import Client
from typing import Callable, List, Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)

# Bearer header is optional: browser clients send the Supabase session cookie instead
security = HTTPBearer(auto_error=False)

ADMIN_ROLE = "admin"
TEACHER_ROLES = ["class_teacher", "subject_teacher"]


def get_access_cache(request: Request) -> Dict[str, Any]:
    """Return request-scoped cache for access data (permission codes)."""
    if not hasattr(request.state, "access_cache"):
        request.state.access_cache = {}
    return request.state.access_cache


def get_auth_service(
    supabase: Client = Depends(get_supabase),
    admin_client: Optional[Client] = Depends(get_optional_supabase_admin),
    session_client_factory: Callable[[], Client] = Depends(get_session_client_factory),
) -> AuthService:
    return AuthService(supabase, admin_client, session_client_factory)


def get_access_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
) -> str:
    """Access token from the Authorization header, falling back to the session cookie."""
    if credentials and credentials.credentials:
        return credentials.credentials
    token = request.cookies.get(settings.auth_cookie_name)
    if token:
        return token
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    token: str = Depends(get_access_token),
    auth_service: AuthService = Depends(get_auth_service),
) -> dict:
    """Authenticated user's profile row from public.users (joined on auth_user_id)."""
    auth_user = auth_service.get_current_user(token)
    profile = auth_service.get_profile(auth_user["id"])
    if not profile.get("is_active", True):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Your account has been deactivated. Please contact your administrator."
        )
    return {**profile, "auth_user_id": auth_user["id"], "email": profile.get("email") or auth_user.get("email")}


def is_admin(user_data: dict) -> bool:
    return user_data.get("role") == ADMIN_ROLE


def get_user_permissions(user_data: dict, supabase: Client, cache: Optional[Dict[str, Any]] = None) -> List[str]:
    """Permission codes for a user: role defaults plus explicit user_permissions grants. Admins hold every code."""
    if cache is not None and "permission_codes" in cache:
        return cache["permission_codes"]
    if is_admin(user_data):
        codes = all_permission_codes()
    else:
        codes = set(ROLE_DEFAULTS.get(user_data.get("role"), []))
        if user_data.get("is_class_teacher"):
            codes.update(ROLE_DEFAULTS["class_teacher"])
        if user_data.get("is_subject_teacher"):
            codes.update(ROLE_DEFAULTS["subject_teacher"])
        try:
            result = supabase.table("user_permissions")\
                .select("permission_id, permissions(code)")\
                .eq("user_id", user_data["id"])\
                .execute()
            for row in result.data or []:
                if row.get("permissions") and row["permissions"].get("code"):
                    codes.add(row["permissions"]["code"])
        except Exception as e:
            logger.error(f"Error getting user permissions: {e}")
        codes = sorted(codes)
    if cache is not None:
        cache["permission_codes"] = codes
    return codes


def require_permission(required_permission: str):
    """Factory function to create permission check dependency"""
    def check_permission(
        request: Request,
        user_data: dict = Depends(get_current_user),
        supabase: Client = Depends(get_supabase)
    ) -> dict:
        if is_admin(user_data):
            return user_data
        cache = get_access_cache(request)
        if required_permission not in get_user_permissions(user_data, supabase, cache):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Insufficient permissions. Required: {required_permission}"
            )
        return user_data
    return check_permission


def require_admin(user_data: dict = Depends(get_current_user)) -> dict:
    if not is_admin(user_data):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only administrators can perform this action"
        )
    return user_data


def require_self_or_admin(user_id: str, user_data: dict) -> dict:
    """Allow when the target user is the caller, or the caller is an admin."""
    if is_admin(user_data) or user_data.get("id") == user_id:
        return user_data
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="You do not have permission to perform this action."
    )
