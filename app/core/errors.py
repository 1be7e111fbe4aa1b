"""
Error formatting
Converts Supabase/Postgres/auth errors into user-facing messages and HTTP statuses.
Every error response body has the shape {"error": "<message>"}.
"""

import re
from typing import Any, Optional

from fastapi import HTTPException, status

GENERIC_MESSAGE = "An unexpected error occurred. Please try again."

# (substrings, user-facing message); first match wins
MESSAGE_RULES = [
    (("User profile not found",),
     "Your account was not found in the system. Please contact your administrator."),
    (("Invalid email or password", "Invalid login credentials"),
     "The email or password you entered is incorrect. Please try again."),
    (("Email rate limit exceeded",),
     "Too many emails sent. Please wait a few minutes before trying again."),
    (("User already registered",),
     "An account with this email already exists."),
    (("Email not confirmed",),
     "Please verify your email address before logging in. Check your inbox for the verification link."),
    (("Token has expired", "expired"),
     "This link has expired. Please request a new one."),
    (("Invalid token", "Token is invalid"),
     "This link is invalid or has already been used. Please request a new one."),
    (("Network", "fetch"),
     "Unable to connect to the server. Please check your internet connection and try again."),
    (("timeout",),
     "The request took too long. Please try again."),
    (("duplicate key", "already exists"),
     "This record already exists. Please use a different value."),
    (("foreign key", "constraint"),
     "This action cannot be completed. Some related data is missing."),
    (("permission denied", "policy"),
     "You do not have permission to perform this action."),
    (("infinite recursion",),
     "A system error occurred. Please contact support if this persists."),
    (("Account is inactive",),
     "Your account has been deactivated. Please contact your administrator."),
    (("EMAIL_NOT_VERIFIED",),
     "Please verify your email address before logging in."),
    (("PASSWORD_CHANGE_REQUIRED",),
     "You need to change your password before logging in."),
]

CODE_MESSAGES = {
    "PGRST116": "The requested information was not found.",
    "23505": "This record already exists. Please use a different value.",
    "23503": "This action cannot be completed. Some related data is missing.",
    "42501": "You do not have permission to perform this action.",
}

CODE_STATUSES = {
    "PGRST116": status.HTTP_404_NOT_FOUND,
    "23505": status.HTTP_409_CONFLICT,
    "23503": status.HTTP_400_BAD_REQUEST,
    "42501": status.HTTP_403_FORBIDDEN,
}


def error_code(error: Any) -> Optional[str]:
    """Postgres/PostgREST error code carried by a postgrest APIError (or a dict payload)."""
    if isinstance(error, dict):
        code = error.get("code")
    else:
        code = getattr(error, "code", None)
    return str(code) if code else None


def error_message(error: Any) -> str:
    if error is None:
        return ""
    if isinstance(error, str):
        return error
    if isinstance(error, dict):
        return str(error.get("message") or "")
    if isinstance(error, HTTPException):
        return str(error.detail)
    message = getattr(error, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(error)


def format_error(error: Any) -> str:
    """Rewrite a technical error into a user-friendly message."""
    if not error:
        return GENERIC_MESSAGE

    # Plain strings are assumed to be user-facing already
    if isinstance(error, str):
        return error

    if not isinstance(error, (Exception, dict)):
        return GENERIC_MESSAGE

    message = error_message(error)

    for needles, friendly in MESSAGE_RULES:
        if any(needle in message for needle in needles):
            return friendly

    if "Failed to " in message or "Error" in message:
        cleaned = re.sub(r"^Error: ", "", message, flags=re.IGNORECASE)
        cleaned = re.sub(r"^Failed to ", "", cleaned, flags=re.IGNORECASE)
        cleaned = re.sub(r"\.$", "", cleaned)
        return cleaned or "An error occurred. Please try again."

    cleaned = re.sub(r"^Error: ", "", message, flags=re.IGNORECASE)
    cleaned = re.sub(r"^\[.*?\] ", "", cleaned).strip()
    return cleaned or GENERIC_MESSAGE


def format_supabase_error(error: Any) -> str:
    """Format Supabase-specific errors, preferring the message, then the error code."""
    if not error:
        return GENERIC_MESSAGE

    code = error_code(error)
    message = error_message(error) if not isinstance(error, str) else error

    # PostgREST raises PGRST116 with a technical message; the code is the better signal
    if code == "PGRST116":
        return CODE_MESSAGES[code]
    if message:
        return format_error(error)
    if code in CODE_MESSAGES:
        return CODE_MESSAGES[code]
    return format_error(error)


def status_for_error(error: Any, default: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> int:
    code = error_code(error)
    if code in CODE_STATUSES:
        return CODE_STATUSES[code]
    message = error_message(error)
    if "duplicate key" in message or "already exists" in message:
        return status.HTTP_409_CONFLICT
    if "permission denied" in message:
        return status.HTTP_403_FORBIDDEN
    return default


def is_not_found(error: Any) -> bool:
    return error_code(error) == "PGRST116" or "no rows" in error_message(error)


def is_unique_violation(error: Any) -> bool:
    return error_code(error) == "23505" or "unique" in error_message(error)


def is_foreign_key_violation(error: Any) -> bool:
    return error_code(error) == "23503" or "foreign key" in error_message(error)


def to_http_exception(error: Any, default_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> HTTPException:
    """Build the HTTPException a service raises for an unexpected data-layer error."""
    if isinstance(error, HTTPException):
        return error
    return HTTPException(
        status_code=status_for_error(error, default_status),
        detail=format_supabase_error(error),
    )
