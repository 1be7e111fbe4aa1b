from supabase import create_client, Client
from app.config import settings
from typing import Callable, Optional


class SupabaseClient:
    _client: Client = None
    _service_client: Client = None

    @classmethod
    def get_client(cls) -> Client:
        if cls._client is None:
            cls._client = create_client(settings.supabase_url, settings.supabase_key)
        return cls._client

    @classmethod
    def get_service_client(cls) -> Client:
        """Client with service_role key; bypasses RLS. Required for auth admin calls (teacher accounts)."""
        if cls._service_client is None and settings.supabase_service_role_key:
            cls._service_client = create_client(
                settings.supabase_url, settings.supabase_service_role_key
            )
        return cls._service_client or cls.get_client()

    @classmethod
    def has_service_client(cls) -> bool:
        return bool(settings.supabase_service_role_key)

    @classmethod
    def reset_client(cls):
        cls._client = None
        cls._service_client = None


def get_supabase() -> Client:
    return SupabaseClient.get_client()


def get_supabase_admin() -> Client:
    return SupabaseClient.get_service_client()


def create_session_client() -> Client:
    """New anon client for auth calls that store a session (sign-in, OTP verify, sign-out).
    The session stays on this client, so it is never shared between requests."""
    return create_client(settings.supabase_url, settings.supabase_key)


def get_session_client_factory() -> Callable[[], Client]:
    return create_session_client


def get_optional_supabase_admin() -> Optional[Client]:
    """Service-role client, or None when no service role key is configured."""
    if not SupabaseClient.has_service_client():
        return None
    return SupabaseClient.get_service_client()
