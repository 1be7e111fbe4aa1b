from pydantic import EmailStr, Field
from typing import Optional
from datetime import datetime
from app.core.schemas import CamelModel


class TeacherCreate(CamelModel):
    name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=8)
    phone: Optional[str] = None
    is_class_teacher: bool = False
    is_subject_teacher: bool = False


class TeacherUpdate(CamelModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    is_class_teacher: Optional[bool] = None
    is_subject_teacher: Optional[bool] = None
    is_active: Optional[bool] = None


class TeacherResponse(CamelModel):
    id: str
    email: str
    name: str
    role: str
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    is_active: bool = True
    is_class_teacher: bool = False
    is_subject_teacher: bool = False
    email_verified: bool = False
    password_change_required: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TeacherCreateResponse(CamelModel):
    success: bool = True
    user: TeacherResponse


class TeacherPerformance(CamelModel):
    teacher_id: str
    is_class_teacher: bool
    is_subject_teacher: bool
    performance_score: int = 0
    assigned_class: Optional[str] = None
    total_students: Optional[int] = None
    evaluations_done: Optional[int] = None
    evaluations_total: Optional[int] = None
    attendance_entered: Optional[int] = None
    attendance_total: Optional[int] = None
    assigned_subjects: Optional[int] = None
    subjects_graded: Optional[int] = None
    subjects_total: Optional[int] = None
