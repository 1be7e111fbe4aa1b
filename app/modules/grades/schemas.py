from pydantic import Field
from typing import Optional
from datetime import datetime
from app.core.grading import MAX_SCORES
from app.core.schemas import CamelModel, Term, AcademicYear


class GradeUpsert(CamelModel):
    student_id: str
    subject_id: str
    class_id: str
    teacher_id: Optional[str] = None  # defaults to the signed-in teacher
    term: Term
    academic_year: AcademicYear
    project: float = Field(default=0, ge=0, le=MAX_SCORES["project"])
    test1: float = Field(default=0, ge=0, le=MAX_SCORES["test1"])
    test2: float = Field(default=0, ge=0, le=MAX_SCORES["test2"])
    group_work: float = Field(default=0, ge=0, le=MAX_SCORES["group_work"])
    exam: float = Field(default=0, ge=0, le=MAX_SCORES["exam"])


class GradeResponse(CamelModel):
    id: str
    student_id: str
    subject_id: str
    class_id: Optional[str] = None
    teacher_id: Optional[str] = None
    term: int
    academic_year: str
    project: float = 0
    test1: float = 0
    test2: float = 0
    group_work: float = 0
    exam: float = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class GradeWithDetails(GradeResponse):
    student_name: Optional[str] = None
    subject_name: Optional[str] = None
    class_name: Optional[str] = None
    class_score: float
    exam_score: float
    total: float
    grade: str
