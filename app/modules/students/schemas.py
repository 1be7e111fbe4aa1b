from pydantic import Field
from typing import Optional, List, Literal
from datetime import date, datetime
from app.core.schemas import CamelModel

Gender = Literal["male", "female"]
StudentStatus = Literal["active", "transferred", "graduated"]


class StudentBase(CamelModel):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    middle_name: Optional[str] = None
    date_of_birth: date
    gender: Gender
    class_id: str
    class_teacher_id: Optional[str] = None
    parent_name: Optional[str] = None
    parent_phone: Optional[str] = None
    address: Optional[str] = None
    photo_url: Optional[str] = None


class StudentCreate(StudentBase):
    student_id: str = Field(min_length=1)
    enrollment_date: Optional[date] = None
    status: StudentStatus = "active"


class StudentImportRow(StudentBase):
    student_id: Optional[str] = None
    enrollment_date: Optional[date] = None
    status: StudentStatus = "active"


class StudentImportRequest(CamelModel):
    students: List[StudentImportRow] = Field(min_length=1)


class StudentImportError(CamelModel):
    row: int
    student_id: Optional[str] = None
    error: str


class StudentImportResponse(CamelModel):
    created: int
    failed: int
    errors: List[StudentImportError] = []


class StudentUpdate(CamelModel):
    student_id: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    middle_name: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[Gender] = None
    class_id: Optional[str] = None
    class_teacher_id: Optional[str] = None
    parent_name: Optional[str] = None
    parent_phone: Optional[str] = None
    address: Optional[str] = None
    enrollment_date: Optional[date] = None
    status: Optional[StudentStatus] = None
    photo_url: Optional[str] = None


class StudentResponse(CamelModel):
    id: str
    student_id: str
    first_name: str
    last_name: str
    middle_name: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: str
    class_id: Optional[str] = None
    class_teacher_id: Optional[str] = None
    parent_name: Optional[str] = None
    parent_phone: Optional[str] = None
    address: Optional[str] = None
    enrollment_date: Optional[date] = None
    status: str = "active"
    photo_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class GeneratedStudentId(CamelModel):
    student_id: str
