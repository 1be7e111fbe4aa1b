import hashlib
import logging
import time
from supabase import Client
from app.database.supabase_client import create_session_client
from app.modules.auth.schemas import LoginRequest, TokenResponse, AuthUser, ChangePasswordRequest
from app.config.settings import settings
from app.core.errors import format_error
from fastapi import HTTPException
from typing import Callable, Dict, Any, Optional

logger = logging.getLogger(__name__)

# In-memory cache for get_current_user to reduce Supabase auth calls (e.g. many parallel requests with same token)
_AUTH_USER_CACHE: Dict[str, tuple] = {}
_AUTH_CACHE_MAX_SIZE = 500


def clear_auth_cache():
    _AUTH_USER_CACHE.clear()


class AuthService:
    def __init__(
        self,
        supabase: Client,
        admin_client: Optional[Client] = None,
        session_client_factory: Optional[Callable[[], Client]] = None,
    ):
        self.supabase = supabase
        self.admin_client = admin_client
        # sign-in and OTP verify store a session on the client; those calls get their own
        self.session_client_factory = session_client_factory or create_session_client

    def get_profile(self, auth_user_id: str) -> Dict[str, Any]:
        """Load the public.users profile linked to a Supabase Auth user"""
        try:
            result = self.supabase.table("users")\
                .select("*")\
                .eq("auth_user_id", auth_user_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            logger.error(f"Error loading user profile: {e}")
            raise HTTPException(
                status_code=403,
                detail="Unable to access your account information. Please contact your administrator."
            )
        if not result.data:
            raise HTTPException(status_code=403, detail=format_error(Exception("User profile not found")))
        return result.data[0]

    def login(self, login_data: LoginRequest) -> TokenResponse:
        """Authenticate user using Supabase Auth and check the linked profile"""
        session_client = self.session_client_factory()
        try:
            auth_response = session_client.auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password
            })
        except Exception as e:
            error_message = str(e)
            if "rate limit" in error_message.lower():
                raise HTTPException(
                    status_code=429,
                    detail="Too many login attempts. Please wait a few minutes before trying again."
                )
            raise HTTPException(
                status_code=401,
                detail="Invalid email or password. Please check your credentials and try again."
            )

        if not auth_response.user or not auth_response.session:
            raise HTTPException(status_code=401, detail="Authentication failed")

        auth_user = auth_response.user
        profile = self.get_profile(auth_user.id)

        if not profile.get("is_active", True):
            self._sign_out_quietly(session_client)
            raise HTTPException(status_code=403, detail=format_error(Exception("Account is inactive")))

        if not profile.get("email_verified") and getattr(auth_user, "email_confirmed_at", None) is None:
            self._sign_out_quietly(session_client)
            raise HTTPException(status_code=403, detail=format_error(Exception("EMAIL_NOT_VERIFIED")))

        session = auth_response.session
        return TokenResponse(
            access_token=session.access_token,
            refresh_token=getattr(session, "refresh_token", None),
            expires_in=getattr(session, "expires_in", None),
            password_change_required=bool(profile.get("password_change_required")),
            user=AuthUser(**profile),
        )

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Get current user details from Supabase Auth token. Uses short TTL cache to reduce auth API calls."""
        try:
            cache_key = hashlib.sha256(token.encode()).hexdigest()
            now = time.monotonic()
            if cache_key in _AUTH_USER_CACHE:
                user_data, expiry = _AUTH_USER_CACHE[cache_key]
                if now < expiry:
                    return user_data
                del _AUTH_USER_CACHE[cache_key]
            user_response = self.supabase.auth.get_user(jwt=token)
            if not user_response or not user_response.user:
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            user = user_response.user
            user_data = {
                "id": user.id,
                "email": user.email,
                "user_metadata": user.user_metadata or {},
                "app_metadata": user.app_metadata or {},
                "email_confirmed_at": getattr(user, "email_confirmed_at", None),
            }
            if len(_AUTH_USER_CACHE) < _AUTH_CACHE_MAX_SIZE:
                _AUTH_USER_CACHE[cache_key] = (user_data, now + settings.auth_cache_ttl_sec)
            return user_data
        except HTTPException:
            raise
        except Exception as e:
            error_msg = str(e)
            if "JWT" in error_msg or "expired" in error_msg.lower() or "invalid" in error_msg.lower():
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            raise HTTPException(status_code=401, detail="Authentication failed")

    def logout(self, token: str) -> bool:
        """Logout user: revoke the session behind this token using Supabase Auth"""
        _AUTH_USER_CACHE.pop(hashlib.sha256(token.encode()).hexdigest(), None)
        if self.admin_client is None:
            return False
        # Supabase Auth tokens are stateless JWTs; they expire on their own if revoking fails
        try:
            self.admin_client.auth.admin.sign_out(token, "local")
            return True
        except Exception as e:
            logger.warning(f"Sign out failed: {e}")
            return False

    def _sign_out_quietly(self, session_client: Client) -> bool:
        try:
            session_client.auth.sign_out({"scope": "local"})
            return True
        except Exception as e:
            logger.warning(f"Sign out failed: {e}")
            return False

    def _require_admin_client(self) -> Client:
        if self.admin_client is None:
            raise HTTPException(
                status_code=500,
                detail="Service role key not configured. Cannot update user accounts."
            )
        return self.admin_client

    def change_password(self, user_data: Dict[str, Any], request: ChangePasswordRequest) -> None:
        """Change password for the signed-in user; clears the first-login password change flag"""
        if request.current_password:
            session_client = self.session_client_factory()
            try:
                session_client.auth.sign_in_with_password({
                    "email": user_data["email"],
                    "password": request.current_password
                })
            except Exception:
                raise HTTPException(status_code=400, detail="Your current password is incorrect.")
            self._sign_out_quietly(session_client)
            if request.current_password == request.new_password:
                raise HTTPException(
                    status_code=400,
                    detail="New password must be different from your current password."
                )
        elif not user_data.get("password_change_required"):
            raise HTTPException(status_code=400, detail="Current password is required.")

        admin_client = self._require_admin_client()
        try:
            admin_client.auth.admin.update_user_by_id(
                user_data["auth_user_id"],
                {"password": request.new_password}
            )
        except Exception as e:
            message = str(e).lower()
            if "weak" in message or "password" in message:
                raise HTTPException(
                    status_code=400,
                    detail="Password does not meet security requirements. Please choose a stronger password."
                )
            raise HTTPException(status_code=500, detail="Unable to change password. Please try again.")

        try:
            self.supabase.table("users")\
                .update({"password_change_required": False})\
                .eq("auth_user_id", user_data["auth_user_id"])\
                .execute()
        except Exception as e:
            # Password is changed; only the flag is stale
            logger.error(f"Failed to update password_change_required: {e}")

    def request_password_reset(self, email: str) -> None:
        """Send a password reset email. Does not reveal whether the address is registered."""
        try:
            self.supabase.auth.reset_password_for_email(
                email,
                {"redirect_to": f"{settings.app_url.rstrip('/')}/reset-password"}
            )
        except Exception as e:
            message = str(e)
            if "rate limit" in message.lower():
                raise HTTPException(status_code=429, detail=format_error(Exception("Email rate limit exceeded")))
            logger.warning(f"Password reset request failed: {e}")

    def reset_password(self, token: str, new_password: str) -> None:
        """Reset password with the recovery token hash from the email link"""
        try:
            verify_response = self.session_client_factory().auth.verify_otp({
                "token_hash": token,
                "type": "recovery"
            })
        except Exception:
            raise HTTPException(
                status_code=400,
                detail="Invalid or expired reset token. Please request a new password reset."
            )
        if not verify_response or not verify_response.user:
            raise HTTPException(
                status_code=400,
                detail="Invalid or expired reset token. Please request a new password reset."
            )

        admin_client = self._require_admin_client()
        try:
            admin_client.auth.admin.update_user_by_id(verify_response.user.id, {"password": new_password})
            self.supabase.table("users")\
                .update({"password_change_required": False})\
                .eq("auth_user_id", verify_response.user.id)\
                .execute()
        except Exception as e:
            logger.error(f"Error resetting password: {e}")
            raise HTTPException(status_code=500, detail=format_error(e))

    def verify_email(self, token: str) -> None:
        """Confirm an email address with the token hash from the verification link"""
        try:
            verify_response = self.session_client_factory().auth.verify_otp({
                "token_hash": token,
                "type": "email"
            })
        except Exception as e:
            message = str(e).lower()
            if "expired" in message or "invalid" in message:
                raise HTTPException(
                    status_code=400,
                    detail="This verification link has expired or is invalid. Please request a new verification email."
                )
            raise HTTPException(
                status_code=400,
                detail="Unable to verify your email. Please try again or request a new verification link."
            )
        if not verify_response or not verify_response.user:
            raise HTTPException(
                status_code=400,
                detail="Unable to verify your email. Please try again or request a new verification link."
            )
        try:
            self.supabase.table("users")\
                .update({"email_verified": True})\
                .eq("auth_user_id", verify_response.user.id)\
                .execute()
        except Exception as e:
            logger.error(f"Error marking email verified: {e}")
            raise HTTPException(status_code=500, detail=format_error(e))
