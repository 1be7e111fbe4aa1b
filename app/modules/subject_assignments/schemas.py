from typing import Optional
from datetime import datetime
from app.core.schemas import CamelModel


class SubjectAssignmentCreate(CamelModel):
    subject_id: str
    teacher_id: str
    class_id: str


class SubjectAssignmentResponse(CamelModel):
    id: str
    subject_id: str
    teacher_id: str
    class_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
