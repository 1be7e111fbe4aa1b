import logging
from supabase import Client
from app.modules.permissions.schemas import PermissionResponse
from app.core.errors import is_not_found, is_unique_violation, to_http_exception
from typing import List
from fastapi import HTTPException

logger = logging.getLogger(__name__)


class PermissionService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_permissions(self) -> List[PermissionResponse]:
        try:
            result = self.supabase.table("permissions")\
                .select("*")\
                .order("category")\
                .order("name")\
                .execute()
            return [PermissionResponse(**row) for row in result.data or []]
        except Exception as e:
            logger.error(f"Error fetching permissions: {e}")
            if is_not_found(e):
                return []
            raise to_http_exception(e)

    def get_user_permission_codes(self, user_id: str) -> List[str]:
        """Codes explicitly granted to a user, newest grant first"""
        try:
            result = self.supabase.table("user_permissions")\
                .select("id, permission_id, permissions(code)")\
                .eq("user_id", user_id)\
                .order("created_at", desc=True)\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching user permissions: {e}")
            raise to_http_exception(e)
        return [
            row["permissions"]["code"]
            for row in result.data or []
            if row.get("permissions") and row["permissions"].get("code")
        ]

    def set_user_permissions(self, user_id: str, permission_codes: List[str]) -> List[str]:
        """Replace a user's grants; unknown codes are ignored"""
        try:
            permissions = self.supabase.table("permissions")\
                .select("id, code")\
                .in_("code", list(dict.fromkeys(permission_codes)))\
                .execute()
            if not permissions.data:
                raise HTTPException(status_code=400, detail="No valid permissions found")

            self.supabase.table("user_permissions")\
                .delete()\
                .eq("user_id", user_id)\
                .execute()
            self.supabase.table("user_permissions").insert([
                {"user_id": user_id, "permission_id": p["id"]} for p in permissions.data
            ]).execute()
            return sorted(p["code"] for p in permissions.data)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error setting user permissions: {e}")
            raise to_http_exception(e)

    def _permission_id(self, permission_code: str) -> str:
        result = self.supabase.table("permissions")\
            .select("id")\
            .eq("code", permission_code)\
            .limit(1)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Permission not found")
        return result.data[0]["id"]

    def add_user_permission(self, user_id: str, permission_code: str) -> None:
        """Grant one permission; granting an existing one is a no-op"""
        try:
            permission_id = self._permission_id(permission_code)
            existing = self.supabase.table("user_permissions")\
                .select("id")\
                .eq("user_id", user_id)\
                .eq("permission_id", permission_id)\
                .limit(1)\
                .execute()
            if existing.data:
                return
            self.supabase.table("user_permissions").insert({
                "user_id": user_id,
                "permission_id": permission_id,
            }).execute()
        except HTTPException:
            raise
        except Exception as e:
            if is_unique_violation(e):
                return
            logger.error(f"Error adding user permission: {e}")
            raise to_http_exception(e)

    def remove_user_permission(self, user_id: str, permission_code: str) -> None:
        try:
            permission_id = self._permission_id(permission_code)
            self.supabase.table("user_permissions")\
                .delete()\
                .eq("user_id", user_id)\
                .eq("permission_id", permission_id)\
                .execute()
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error removing user permission: {e}")
            raise to_http_exception(e)
