from typing import Dict, Optional, List, Literal
from app.core.schemas import CamelModel

Trend = Literal["improving", "stable", "declining"]


class GradeSlice(CamelModel):
    name: str
    value: int
    color: str


class TermAverage(CamelModel):
    term: str
    average: float


class SubjectAverage(CamelModel):
    subject: str
    average: float


class AnalyticsOverview(CamelModel):
    total_students: int = 0
    average_score: float = 0
    pass_rate: int = 0
    completed_grades: int = 0
    grade_distribution: List[GradeSlice] = []
    performance_trend: List[TermAverage] = []
    subject_performance: List[SubjectAverage] = []


class TermScore(CamelModel):
    term: int
    score: float


class StudentPerformance(CamelModel):
    student_id: str
    student_name: str
    student_code: Optional[str] = None
    class_id: Optional[str] = None
    class_name: str
    average_score: float
    grade: str
    trend: Trend
    subjects_completed: int
    total_subjects: int
    attendance_rate: float
    term_scores: List[TermScore]


class ClassAverage(CamelModel):
    class_name: str
    average: float


class SubjectPerformance(CamelModel):
    subject_id: str
    subject_name: str
    average_score: float
    pass_rate: int
    total_students: int
    students_completed: int
    grade_distribution: Dict[str, int]  # keyed by grade code
    trend: Trend
    term_scores: List[TermScore]
    class_performance: List[ClassAverage]


class SubjectBreakdown(CamelModel):
    subject_name: str
    average: float


class ClassPerformance(CamelModel):
    class_id: str
    class_name: str
    level: int
    total_students: int
    average_score: float
    pass_rate: int
    top_performers: int
    average_performers: int
    needs_support: int
    subject_breakdown: List[SubjectBreakdown]
    attendance_rate: int


class BeceBands(CamelModel):
    excellent: int = 0  # aggregate 6-12
    very_good: int = 0  # 13-18
    good: int = 0  # 19-24
    fair: int = 0  # 25-30


class BeceSubjectGrade(CamelModel):
    subject: str
    average_grade: str


class BeceTopPerformer(CamelModel):
    student_name: str
    aggregate: int


class BeceAnalytics(CamelModel):
    academic_year: str
    total_students: int
    average_aggregate: float
    grade_distribution: BeceBands
    subject_performance: List[BeceSubjectGrade]
    top_performers: List[BeceTopPerformer]
