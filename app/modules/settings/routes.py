from fastapi import APIRouter, Depends, Query
from app.database.supabase_client import get_supabase
from app.modules.settings.schemas import (
    SchoolSettings, SchoolSettingsUpdate, AcademicSettings, AcademicSettingsUpdate,
    AssessmentStructure, AssessmentStructureUpdate, UserPreferences, UserPreferencesUpdate,
    SystemPreferences, SystemPreferencesUpdate, TermSettings, TermSettingsUpsert,
    GradingSystem, GradingSystemUpdate, AcademicYearOption
)
from app.modules.settings.service import SettingsService
from app.core.academic_years import academic_year_options
from app.core.dependencies import get_current_user, require_permission
from app.core.schemas import ACADEMIC_YEAR_REGEX
from supabase import Client
from typing import Dict, List, Optional

router = APIRouter(prefix="/settings", tags=["settings"])


def get_settings_service(supabase: Client = Depends(get_supabase)) -> SettingsService:
    return SettingsService(supabase)


@router.get("/school", response_model=Optional[SchoolSettings])
async def get_school_settings(
    user_data: Dict = Depends(get_current_user),
    service: SettingsService = Depends(get_settings_service)
):
    """School name and contact details; null until first saved"""
    return service.get_school_settings()


@router.put("/school", response_model=SchoolSettings)
async def update_school_settings(
    data: SchoolSettingsUpdate,
    user_data: Dict = Depends(require_permission("settings:update")),
    service: SettingsService = Depends(get_settings_service)
):
    return service.update_school_settings(data)


@router.get("/academic", response_model=AcademicSettings)
async def get_academic_settings(
    user_data: Dict = Depends(get_current_user),
    service: SettingsService = Depends(get_settings_service)
):
    return service.get_academic_settings()


@router.put("/academic", response_model=AcademicSettings)
async def update_academic_settings(
    data: AcademicSettingsUpdate,
    user_data: Dict = Depends(require_permission("settings:update")),
    service: SettingsService = Depends(get_settings_service)
):
    return service.update_academic_settings(data)


@router.get("/academic-years", response_model=List[AcademicYearOption])
async def list_academic_years(
    include_future: bool = Query(False, alias="includeFuture"),
    user_data: Dict = Depends(get_current_user),
):
    """Selectable academic years: the past five and the current one, oldest first"""
    return academic_year_options(include_future)


@router.get("/assessment", response_model=AssessmentStructure)
async def get_assessment_structure(
    user_data: Dict = Depends(get_current_user),
    service: SettingsService = Depends(get_settings_service)
):
    return service.get_assessment_structure()


@router.put("/assessment", response_model=AssessmentStructure)
async def update_assessment_structure(
    data: AssessmentStructureUpdate,
    user_data: Dict = Depends(require_permission("settings:update")),
    service: SettingsService = Depends(get_settings_service)
):
    return service.update_assessment_structure(data)


@router.get("/grading-system", response_model=GradingSystem)
async def get_grading_system(
    user_data: Dict = Depends(get_current_user),
    service: SettingsService = Depends(get_settings_service)
):
    return service.get_grading_system()


@router.put("/grading-system", response_model=GradingSystem)
async def update_grading_system(
    data: GradingSystemUpdate,
    user_data: Dict = Depends(require_permission("settings:update")),
    service: SettingsService = Depends(get_settings_service)
):
    return service.update_grading_system(data)


@router.get("/preferences", response_model=UserPreferences)
async def get_user_preferences(
    user_data: Dict = Depends(get_current_user),
    service: SettingsService = Depends(get_settings_service)
):
    """Preferences of the signed-in user (defaults until first saved)"""
    return service.get_user_preferences(user_data["id"])


@router.put("/preferences", response_model=UserPreferences)
async def update_user_preferences(
    data: UserPreferencesUpdate,
    user_data: Dict = Depends(get_current_user),
    service: SettingsService = Depends(get_settings_service)
):
    return service.update_user_preferences(user_data["id"], data)


@router.get("/system", response_model=SystemPreferences)
async def get_system_preferences(
    user_data: Dict = Depends(require_permission("settings:read")),
    service: SettingsService = Depends(get_settings_service)
):
    return service.get_system_preferences()


@router.put("/system", response_model=SystemPreferences)
async def update_system_preferences(
    data: SystemPreferencesUpdate,
    user_data: Dict = Depends(require_permission("settings:update")),
    service: SettingsService = Depends(get_settings_service)
):
    return service.update_system_preferences(data)


@router.get("/term", response_model=List[TermSettings])
async def get_term_settings(
    academic_year: str = Query(..., alias="academicYear", pattern=ACADEMIC_YEAR_REGEX),
    user_data: Dict = Depends(get_current_user),
    service: SettingsService = Depends(get_settings_service)
):
    """Closing and reopening dates of each term in an academic year"""
    return service.get_term_settings(academic_year)


@router.post("/term", response_model=TermSettings)
async def upsert_term_settings(
    data: TermSettingsUpsert,
    user_data: Dict = Depends(require_permission("settings:update")),
    service: SettingsService = Depends(get_settings_service)
):
    return service.upsert_term_settings(data)
