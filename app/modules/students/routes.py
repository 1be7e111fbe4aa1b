from fastapi import APIRouter, Depends, Query
from app.database.supabase_client import get_supabase
from app.modules.students.schemas import (
    StudentCreate, StudentUpdate, StudentResponse, StudentImportRequest,
    StudentImportResponse, StudentStatus, GeneratedStudentId
)
from app.modules.students.service import StudentService
from app.core.dependencies import require_permission
from supabase import Client
from typing import Dict, List, Optional

router = APIRouter(prefix="/students", tags=["students"])


def get_student_service(supabase: Client = Depends(get_supabase)) -> StudentService:
    return StudentService(supabase)


@router.get("", response_model=List[StudentResponse])
async def list_students(
    class_id: Optional[str] = Query(None, alias="classId"),
    status: Optional[StudentStatus] = None,
    user_data: Dict = Depends(require_permission("students:read")),
    service: StudentService = Depends(get_student_service)
):
    """List students, optionally filtered by class and status"""
    return service.list_students(class_id=class_id, status=status)


@router.post("", response_model=StudentResponse, status_code=201)
async def create_student(
    student_data: StudentCreate,
    user_data: Dict = Depends(require_permission("students:create")),
    service: StudentService = Depends(get_student_service)
):
    return service.create_student(student_data)


@router.get("/generate-id", response_model=GeneratedStudentId)
async def generate_student_id(
    user_data: Dict = Depends(require_permission("students:create")),
    service: StudentService = Depends(get_student_service)
):
    """Next free student code (STU###)"""
    return {"student_id": service.generate_student_id()}


@router.get("/graduated", response_model=List[StudentResponse])
async def list_graduated_students(
    user_data: Dict = Depends(require_permission("students:read")),
    service: StudentService = Depends(get_student_service)
):
    return service.list_graduated()


@router.post("/import", response_model=StudentImportResponse)
async def import_students(
    request: StudentImportRequest,
    user_data: Dict = Depends(require_permission("students:import")),
    service: StudentService = Depends(get_student_service)
):
    """Bulk create students; per-row failures are reported without aborting the import"""
    return service.import_students(request.students)


@router.get("/{student_id}", response_model=StudentResponse)
async def get_student(
    student_id: str,
    user_data: Dict = Depends(require_permission("students:read")),
    service: StudentService = Depends(get_student_service)
):
    return service.get_student(student_id)


@router.patch("/{student_id}", response_model=StudentResponse)
async def update_student(
    student_id: str,
    student_data: StudentUpdate,
    user_data: Dict = Depends(require_permission("students:update")),
    service: StudentService = Depends(get_student_service)
):
    return service.update_student(student_id, student_data)


@router.delete("/{student_id}")
async def delete_student(
    student_id: str,
    user_data: Dict = Depends(require_permission("students:delete")),
    service: StudentService = Depends(get_student_service)
):
    service.delete_student(student_id)
    return {"success": True}
