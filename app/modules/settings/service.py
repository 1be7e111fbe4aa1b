import logging
from datetime import datetime, timezone
from supabase import Client
from app.modules.settings.schemas import (
    SchoolSettings, SchoolSettingsUpdate, AcademicSettings, AcademicSettingsUpdate,
    AssessmentStructure, AssessmentStructureUpdate, UserPreferences, UserPreferencesUpdate,
    SystemPreferences, SystemPreferencesUpdate, TermSettings, TermSettingsUpsert,
    GradingSystem, GradingSystemUpdate
)
from app.core.academic_years import current_academic_year
from app.core.errors import to_http_exception
from app.core.grading import DEFAULT_GRADING_SYSTEM, MAX_SCORES, validate_grade_levels
from typing import Any, Dict, List, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)

NULLABLE_TEXT = ("address", "phone", "email", "website", "description")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _grade_level_from_row(row: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": row.get("id"),
        "code": row["code"],
        "name": row.get("name") or row["code"],
        "min_percentage": float(row["min_percentage"]),
        "max_percentage": float(row["max_percentage"]),
        "order": row.get("order_index") or 0,
    }


def load_grading_system(supabase: Client) -> Dict[str, Any]:
    """Active grading system with its bands (highest first); the default system when none is stored."""
    try:
        system = supabase.table("grading_system")\
            .select("*")\
            .eq("is_active", True)\
            .limit(1)\
            .execute()
        if not system.data:
            return DEFAULT_GRADING_SYSTEM
        levels = supabase.table("grade_levels")\
            .select("*")\
            .eq("grading_system_id", system.data[0]["id"])\
            .order("order_index", desc=True)\
            .execute()
        if not levels.data:
            return DEFAULT_GRADING_SYSTEM
    except Exception as e:
        logger.warning(f"Falling back to the default grading system: {e}")
        return DEFAULT_GRADING_SYSTEM
    row = system.data[0]
    return {
        "id": row["id"],
        "name": row.get("name"),
        "description": row.get("description"),
        "is_active": row.get("is_active", True),
        "grade_levels": [_grade_level_from_row(level) for level in levels.data],
    }


class SettingsService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _get_single(self, table: str) -> Optional[Dict[str, Any]]:
        result = self.supabase.table(table).select("*").limit(1).execute()
        return result.data[0] if result.data else None

    def _save_single(self, table: str, update_data: Dict[str, Any]) -> Dict[str, Any]:
        """Update the single settings row, inserting it on first save"""
        existing = self._get_single(table)
        update_data = {**update_data, "updated_at": _now()}
        if existing:
            result = self.supabase.table(table)\
                .update(update_data)\
                .eq("id", existing["id"])\
                .execute()
        else:
            result = self.supabase.table(table).insert(update_data).execute()
        if not result.data:
            raise HTTPException(status_code=500, detail=f"Failed to save {table.replace('_', ' ')}")
        return result.data[0]

    @staticmethod
    def _clean(update_data: Dict[str, Any]) -> Dict[str, Any]:
        for column in NULLABLE_TEXT:
            if column in update_data:
                update_data[column] = update_data[column] or None
        return update_data

    # School

    def get_school_settings(self) -> Optional[SchoolSettings]:
        try:
            row = self._get_single("school_settings")
            return SchoolSettings(**row) if row else None
        except Exception as e:
            logger.error(f"Error fetching school settings: {e}")
            raise to_http_exception(e)

    def update_school_settings(self, data: SchoolSettingsUpdate) -> SchoolSettings:
        try:
            update_data = self._clean(data.model_dump(mode="json", exclude_unset=True))
            return SchoolSettings(**self._save_single("school_settings", update_data))
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating school settings: {e}")
            raise to_http_exception(e)

    # Academic year and term

    def get_academic_settings(self) -> AcademicSettings:
        """Stored current year and term; the calendar's academic year and term 1 when unset"""
        try:
            row = self._get_single("academic_settings")
        except Exception as e:
            logger.error(f"Error fetching academic settings: {e}")
            raise to_http_exception(e)
        if not row:
            return AcademicSettings(current_academic_year=current_academic_year(), current_term=1)
        return AcademicSettings(**row)

    def update_academic_settings(self, data: AcademicSettingsUpdate) -> AcademicSettings:
        try:
            update_data = data.model_dump(mode="json", exclude_unset=True)
            if not self._get_single("academic_settings"):
                update_data.setdefault("current_academic_year", current_academic_year())
                update_data.setdefault("current_term", 1)
            return AcademicSettings(**self._save_single("academic_settings", update_data))
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating academic settings: {e}")
            raise to_http_exception(e)

    # Assessment structure

    def get_assessment_structure(self) -> AssessmentStructure:
        try:
            row = self._get_single("assessment_structure")
        except Exception as e:
            logger.error(f"Error fetching assessment structure: {e}")
            raise to_http_exception(e)
        return AssessmentStructure(**(row or MAX_SCORES))

    def update_assessment_structure(self, data: AssessmentStructureUpdate) -> AssessmentStructure:
        try:
            update_data = data.model_dump(mode="json", exclude_unset=True)
            if not self._get_single("assessment_structure"):
                update_data = {**MAX_SCORES, **update_data}
            return AssessmentStructure(**self._save_single("assessment_structure", update_data))
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating assessment structure: {e}")
            raise to_http_exception(e)

    # User preferences

    def get_user_preferences(self, user_id: str) -> UserPreferences:
        try:
            result = self.supabase.table("user_preferences")\
                .select("*")\
                .eq("user_id", user_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching user preferences: {e}")
            raise to_http_exception(e)
        if not result.data:
            return UserPreferences(user_id=user_id)
        return UserPreferences(**result.data[0])

    def update_user_preferences(self, user_id: str, data: UserPreferencesUpdate) -> UserPreferences:
        try:
            update_data = data.model_dump(mode="json", exclude_unset=True)
            update_data["updated_at"] = _now()
            existing = self.supabase.table("user_preferences")\
                .select("id")\
                .eq("user_id", user_id)\
                .limit(1)\
                .execute()
            if existing.data:
                result = self.supabase.table("user_preferences")\
                    .update(update_data)\
                    .eq("user_id", user_id)\
                    .execute()
            else:
                defaults = UserPreferences(user_id=user_id).model_dump(mode="json", exclude={"id", "updated_at"})
                result = self.supabase.table("user_preferences")\
                    .insert({**defaults, **update_data})\
                    .execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to save user preferences")
            return UserPreferences(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating user preferences: {e}")
            raise to_http_exception(e)

    # System preferences

    def get_system_preferences(self) -> SystemPreferences:
        try:
            row = self._get_single("system_preferences")
        except Exception as e:
            logger.error(f"Error fetching system preferences: {e}")
            raise to_http_exception(e)
        return SystemPreferences(**(row or {}))

    def update_system_preferences(self, data: SystemPreferencesUpdate) -> SystemPreferences:
        try:
            update_data = data.model_dump(mode="json", exclude_unset=True)
            if not self._get_single("system_preferences"):
                defaults = SystemPreferences().model_dump(mode="json", exclude={"id", "updated_at"})
                update_data = {**defaults, **update_data}
            return SystemPreferences(**self._save_single("system_preferences", update_data))
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating system preferences: {e}")
            raise to_http_exception(e)

    # Term dates

    def get_term_settings(self, academic_year: str) -> List[TermSettings]:
        try:
            result = self.supabase.table("term_settings")\
                .select("*")\
                .eq("academic_year", academic_year)\
                .order("term")\
                .execute()
            return [TermSettings(**row) for row in result.data or []]
        except Exception as e:
            logger.error(f"Error fetching term settings: {e}")
            raise to_http_exception(e)

    def upsert_term_settings(self, data: TermSettingsUpsert) -> TermSettings:
        try:
            row = data.model_dump(mode="json")
            row["updated_at"] = _now()
            result = self.supabase.table("term_settings")\
                .upsert(row, on_conflict="academic_year,term")\
                .execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to save term settings")
            return TermSettings(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating term settings: {e}")
            raise to_http_exception(e)

    # Grading system

    def get_grading_system(self) -> GradingSystem:
        return GradingSystem(**load_grading_system(self.supabase))

    def update_grading_system(self, data: GradingSystemUpdate) -> GradingSystem:
        """Save the active grading system; its bands are replaced as a whole"""
        levels = [level.model_dump() for level in data.grade_levels]
        error = validate_grade_levels(levels)
        if error:
            raise HTTPException(status_code=400, detail=error)

        system_row = {
            "name": data.name,
            "description": data.description or None,
            "is_active": data.is_active,
            "updated_at": _now(),
        }
        try:
            existing = self.supabase.table("grading_system")\
                .select("id")\
                .eq("is_active", True)\
                .limit(1)\
                .execute()
            if existing.data:
                system_id = existing.data[0]["id"]
                self.supabase.table("grading_system")\
                    .update(system_row)\
                    .eq("id", system_id)\
                    .execute()
            else:
                created = self.supabase.table("grading_system").insert(system_row).execute()
                if not created.data:
                    raise HTTPException(status_code=500, detail="Failed to save grading system")
                system_id = created.data[0]["id"]

            self.supabase.table("grade_levels")\
                .delete()\
                .eq("grading_system_id", system_id)\
                .execute()
            self.supabase.table("grade_levels").insert([
                {
                    "grading_system_id": system_id,
                    "code": level["code"],
                    "name": level["name"],
                    "min_percentage": level["min_percentage"],
                    "max_percentage": level["max_percentage"],
                    "order_index": level["order"],
                }
                for level in levels
            ]).execute()
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating grading system: {e}")
            raise to_http_exception(e)
        return self.get_grading_system()
