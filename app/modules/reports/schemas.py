from typing import Optional, List
from datetime import date
from app.core.schemas import CamelModel
from app.modules.evaluations.schemas import EvaluationResponse


class ReportSubjectLine(CamelModel):
    subject_id: str
    subject_name: str
    class_score: float
    exam_score: float
    total: float
    grade: str
    grade_name: Optional[str] = None
    position: int


class AttendanceSummary(CamelModel):
    present_days: int = 0
    absent_days: int = 0
    total_days: int = 0
    attendance_percentage: float = 0


class ReportCard(CamelModel):
    student_id: str
    student_code: str
    student_name: str
    class_id: str
    class_name: str
    level_name: str
    term: int
    academic_year: str
    subjects: List[ReportSubjectLine]
    overall_total: float
    average: float
    class_position: int
    roll_number: int
    class_size: int
    attendance: Optional[AttendanceSummary] = None
    evaluation: Optional[EvaluationResponse] = None
    closing_date: Optional[date] = None
    reopening_date: Optional[date] = None
