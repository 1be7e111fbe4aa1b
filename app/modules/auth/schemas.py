from pydantic import EmailStr, Field, model_validator
from typing import Optional, List
from app.core.schemas import CamelModel


class LoginRequest(CamelModel):
    email: EmailStr
    password: str


class AuthUser(CamelModel):
    id: str
    email: str
    name: Optional[str] = None
    role: str
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    is_active: bool = True
    is_class_teacher: bool = False
    is_subject_teacher: bool = False


class TokenResponse(CamelModel):
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    expires_in: Optional[int] = None
    password_change_required: bool = False
    user: AuthUser


class CurrentUserResponse(AuthUser):
    permissions: List[str] = []


class ChangePasswordRequest(CamelModel):
    current_password: Optional[str] = None  # omitted on first-login password setup
    new_password: str = Field(min_length=8)
    confirm_password: str

    @model_validator(mode="after")
    def _passwords_match(self):
        if self.new_password != self.confirm_password:
            raise ValueError("New password and confirmation do not match")
        return self


class ForgotPasswordRequest(CamelModel):
    email: EmailStr


class ResetPasswordRequest(CamelModel):
    token: str
    new_password: str = Field(min_length=8)


class VerifyEmailRequest(CamelModel):
    token: str


class MessageResponse(CamelModel):
    message: str
