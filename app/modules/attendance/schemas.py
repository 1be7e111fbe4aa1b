from pydantic import Field, model_validator
from typing import Optional
from datetime import datetime
from app.core.schemas import CamelModel, Term, AcademicYear


class AttendanceUpsert(CamelModel):
    student_id: str
    term: Term
    academic_year: AcademicYear
    total_days: int = Field(ge=0)
    present_days: int = Field(ge=0)
    absent_days: int = Field(default=0, ge=0)
    late_days: int = Field(default=0, ge=0)
    excused_days: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _days_within_total(self):
        if self.present_days + self.absent_days > self.total_days:
            raise ValueError("Present and absent days cannot exceed total days")
        return self


class AttendanceResponse(CamelModel):
    id: str
    student_id: str
    teacher_id: Optional[str] = None
    term: int
    academic_year: str
    total_days: int = 0
    present_days: int = 0
    absent_days: int = 0
    late_days: int = 0
    excused_days: int = 0
    attendance_percentage: float = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
