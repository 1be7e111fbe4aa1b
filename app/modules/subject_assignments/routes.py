from fastapi import APIRouter, Depends, HTTPException, Query
from app.database.supabase_client import get_supabase
from app.modules.subject_assignments.schemas import SubjectAssignmentCreate, SubjectAssignmentResponse
from app.modules.subject_assignments.service import SubjectAssignmentService
from app.core.dependencies import require_permission
from supabase import Client
from typing import Dict, List, Optional, Union

router = APIRouter(prefix="/subject-assignments", tags=["subject-assignments"])


def get_subject_assignment_service(supabase: Client = Depends(get_supabase)) -> SubjectAssignmentService:
    return SubjectAssignmentService(supabase)


@router.get("", response_model=List[SubjectAssignmentResponse])
async def list_subject_assignments(
    teacher_id: Optional[str] = Query(None, alias="teacherId"),
    class_id: Optional[str] = Query(None, alias="classId"),
    subject_id: Optional[str] = Query(None, alias="subjectId"),
    user_data: Dict = Depends(require_permission("subjects:read")),
    service: SubjectAssignmentService = Depends(get_subject_assignment_service)
):
    return service.list_assignments(teacher_id=teacher_id, class_id=class_id, subject_id=subject_id)


@router.post(
    "",
    response_model=Union[List[SubjectAssignmentResponse], SubjectAssignmentResponse],
    status_code=201
)
async def create_subject_assignments(
    body: Union[List[SubjectAssignmentCreate], SubjectAssignmentCreate],
    user_data: Dict = Depends(require_permission("subjects:assign")),
    service: SubjectAssignmentService = Depends(get_subject_assignment_service)
):
    """Create one assignment, or several when the body is a list"""
    if isinstance(body, list):
        return service.create_assignments(body)
    return service.create_assignment(body)


@router.delete("/delete")
async def delete_subject_assignment_by_keys(
    teacher_id: Optional[str] = Query(None, alias="teacherId"),
    subject_id: Optional[str] = Query(None, alias="subjectId"),
    class_id: Optional[str] = Query(None, alias="classId"),
    user_data: Dict = Depends(require_permission("subjects:assign")),
    service: SubjectAssignmentService = Depends(get_subject_assignment_service)
):
    """Delete the assignment identified by teacher, subject and class"""
    if not teacher_id or not subject_id or not class_id:
        raise HTTPException(
            status_code=400,
            detail="Missing required parameters: teacherId, subjectId, classId"
        )
    service.delete_assignment_by_keys(teacher_id, subject_id, class_id)
    return {"success": True}


@router.delete("/{assignment_id}")
async def delete_subject_assignment(
    assignment_id: str,
    user_data: Dict = Depends(require_permission("subjects:assign")),
    service: SubjectAssignmentService = Depends(get_subject_assignment_service)
):
    service.delete_assignment(assignment_id)
    return {"success": True}
