from pydantic import Field
from typing import Optional, List, Literal
from datetime import datetime
from app.core.schemas import CamelModel, AcademicYear

BeceGrade = Literal["A1", "B2", "B3", "C4", "C5", "C6", "D7", "E8", "F9"]


class BeceResultCreate(CamelModel):
    student_id: str
    academic_year: AcademicYear
    subject: str = Field(min_length=1)
    grade: BeceGrade
    remark: Optional[str] = None


class BeceResultUpdate(CamelModel):
    academic_year: Optional[AcademicYear] = None
    subject: Optional[str] = Field(default=None, min_length=1)
    grade: Optional[BeceGrade] = None
    remark: Optional[str] = None


class BeceResultResponse(CamelModel):
    id: str
    student_id: str
    academic_year: str
    subject: str
    grade: str
    remark: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class StudentBeceResults(CamelModel):
    student_id: str
    results: List[BeceResultResponse]
    aggregate: Optional[int] = None
