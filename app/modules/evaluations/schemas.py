from pydantic import Field, field_validator
from typing import Optional, Literal
from datetime import date, datetime
from app.core.schemas import CamelModel, Term, AcademicYear

ConductRating = Literal[
    "Respectful", "Obedience", "Hardworking", "Dutiful", "Humble", "Calm", "Approachable", "Unruly"
]
InterestLevel = Literal["Artwork", "Reading", "Football", "Athletics", "Music", "Computing Skills"]
ClassTeacherRemark = Literal[
    "Dutiful",
    "Dutiful. Well done. Keep it up",
    "Keep it up",
    "Has improved",
    "Could do better",
    "More room for improvement",
    "Very positive in the class",
    "Very courteous",
    "Conduct well in class",
]
RewardType = Literal["Merit", "Achievement", "Participation", "Leadership", "Improvement", "Other"]


class EvaluationUpsert(CamelModel):
    student_id: str
    term: Term
    academic_year: AcademicYear
    conduct_rating: Optional[ConductRating] = None
    conduct_remarks: Optional[str] = None
    interest_level: Optional[InterestLevel] = None
    interest_remarks: Optional[str] = None
    class_teacher_remarks: Optional[ClassTeacherRemark] = None


class EvaluationResponse(CamelModel):
    id: str
    student_id: str
    teacher_id: Optional[str] = None
    term: int
    academic_year: str
    conduct_rating: Optional[str] = None
    conduct_remarks: Optional[str] = None
    interest_level: Optional[str] = None
    interest_remarks: Optional[str] = None
    class_teacher_remarks: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RewardCreate(CamelModel):
    student_id: str
    reward_type: RewardType
    description: str = Field(min_length=1)
    date_awarded: Optional[date] = None

    @field_validator("reward_type", mode="before")
    @classmethod
    def _capitalize_reward_type(cls, value):
        # stored capitalized; older clients send lowercase
        if isinstance(value, str):
            return value.strip().capitalize()
        return value


class RewardResponse(CamelModel):
    id: str
    student_id: str
    teacher_id: Optional[str] = None
    reward_type: str
    description: str
    date_awarded: Optional[date] = None
    created_at: Optional[datetime] = None
