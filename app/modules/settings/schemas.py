from pydantic import EmailStr, Field
from typing import Optional, List, Literal
from datetime import date, datetime
from app.core.schemas import CamelModel, Term, AcademicYear


class SchoolSettings(CamelModel):
    id: Optional[str] = None
    name: str = ""
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    updated_at: Optional[datetime] = None


class SchoolSettingsUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1)
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    website: Optional[str] = None


class AcademicSettings(CamelModel):
    id: Optional[str] = None
    current_academic_year: str
    current_term: int
    updated_at: Optional[datetime] = None


class AcademicSettingsUpdate(CamelModel):
    current_academic_year: Optional[AcademicYear] = None
    current_term: Optional[Term] = None


class AssessmentStructure(CamelModel):
    id: Optional[str] = None
    project: float
    test1: float
    test2: float
    group_work: float
    exam: float
    updated_at: Optional[datetime] = None


class AssessmentStructureUpdate(CamelModel):
    project: Optional[float] = Field(default=None, ge=0)
    test1: Optional[float] = Field(default=None, ge=0)
    test2: Optional[float] = Field(default=None, ge=0)
    group_work: Optional[float] = Field(default=None, ge=0)
    exam: Optional[float] = Field(default=None, ge=0)


Theme = Literal["light", "dark", "auto"]
BackupFrequency = Literal["daily", "weekly", "monthly"]


class UserPreferences(CamelModel):
    id: Optional[str] = None
    user_id: str
    email_notifications: bool = True
    grade_alerts: bool = True
    attendance_alerts: bool = True
    report_alerts: bool = True
    system_updates: bool = False
    theme: Theme = "light"
    updated_at: Optional[datetime] = None


class UserPreferencesUpdate(CamelModel):
    email_notifications: Optional[bool] = None
    grade_alerts: Optional[bool] = None
    attendance_alerts: Optional[bool] = None
    report_alerts: Optional[bool] = None
    system_updates: Optional[bool] = None
    theme: Optional[Theme] = None


class SystemPreferences(CamelModel):
    id: Optional[str] = None
    auto_backup: bool = True
    backup_frequency: BackupFrequency = "weekly"
    data_retention_years: int = 5
    updated_at: Optional[datetime] = None


class SystemPreferencesUpdate(CamelModel):
    auto_backup: Optional[bool] = None
    backup_frequency: Optional[BackupFrequency] = None
    data_retention_years: Optional[int] = Field(default=None, ge=1)


class TermSettings(CamelModel):
    id: Optional[str] = None
    academic_year: str
    term: int
    closing_date: Optional[date] = None
    reopening_date: Optional[date] = None


class TermSettingsUpsert(CamelModel):
    academic_year: AcademicYear
    term: Term
    closing_date: Optional[date] = None
    reopening_date: Optional[date] = None


class GradeLevel(CamelModel):
    id: Optional[str] = None
    code: str = Field(min_length=1)
    name: str
    min_percentage: float = Field(ge=0, le=100)
    max_percentage: float = Field(ge=0, le=100)
    order: int = 0


class GradingSystem(CamelModel):
    id: Optional[str] = None
    name: str
    description: Optional[str] = None
    is_active: bool = True
    grade_levels: List[GradeLevel]


class GradingSystemUpdate(CamelModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    is_active: bool = True
    grade_levels: List[GradeLevel] = Field(min_length=1)


class AcademicYearOption(CamelModel):
    value: str
    label: str
