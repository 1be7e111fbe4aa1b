from pydantic import Field
from typing import Optional, List
from datetime import datetime
from app.core.class_levels import HIGHEST_LEVEL, LOWEST_LEVEL
from app.core.schemas import CamelModel, AcademicYear
from app.modules.bece.schemas import BeceGrade


class ClassCreate(CamelModel):
    name: str = Field(min_length=1)
    level: int = Field(ge=LOWEST_LEVEL, le=HIGHEST_LEVEL)
    stream: Optional[str] = None
    class_teacher_id: Optional[str] = None
    capacity: int = Field(ge=1)


class ClassUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1)
    level: Optional[int] = Field(default=None, ge=LOWEST_LEVEL, le=HIGHEST_LEVEL)
    stream: Optional[str] = None
    class_teacher_id: Optional[str] = None
    capacity: Optional[int] = Field(default=None, ge=1)


class ClassResponse(CamelModel):
    id: str
    name: str
    level: int
    level_name: str
    level_category: str
    stream: Optional[str] = None
    class_teacher_id: Optional[str] = None
    capacity: Optional[int] = None
    student_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PromotionStatus(CamelModel):
    class_id: str
    class_name: str
    level: int
    level_name: str
    next_level: Optional[int] = None
    next_level_name: Optional[str] = None
    can_promote: bool
    reason: Optional[str] = None
    students_to_promote: int = 0


class PromoteRequest(CamelModel):
    target_class_id: str
    student_ids: List[str] = Field(min_length=1)


class PromoteResponse(CamelModel):
    promoted: int
    source_class_id: str
    target_class_id: str


class GraduationResult(CamelModel):
    student_id: str
    subject: str = Field(min_length=1)
    grade: BeceGrade
    remark: Optional[str] = None


class GraduateRequest(CamelModel):
    academic_year: AcademicYear
    results: List[GraduationResult] = []
    student_ids: Optional[List[str]] = None  # defaults to every active student of the class


class GraduateResponse(CamelModel):
    graduated: int
    results_saved: int


class SubjectScore(CamelModel):
    subject_id: str
    subject_name: str
    class_score: float
    exam_score: float
    total: float
    grade: Optional[str] = None


class StudentRanking(CamelModel):
    student_id: str
    student_code: Optional[str] = None
    student_name: str
    subject_scores: List[SubjectScore]
    overall_total: float
    average: float
    position: int


class RankedSubject(CamelModel):
    id: str
    name: str


class ClassRanking(CamelModel):
    class_id: str
    class_name: str
    term: int
    academic_year: str
    subjects: List[RankedSubject]
    rankings: List[StudentRanking]
