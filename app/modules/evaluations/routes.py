from fastapi import APIRouter, Depends, HTTPException, Query
from app.database.supabase_client import get_supabase
from app.modules.evaluations.schemas import (
    EvaluationUpsert, EvaluationResponse, RewardCreate, RewardResponse
)
from app.modules.evaluations.service import EvaluationService
from app.core.dependencies import require_permission
from supabase import Client
from typing import Dict, List, Optional, Union

router = APIRouter(tags=["evaluations"])


def get_evaluation_service(supabase: Client = Depends(get_supabase)) -> EvaluationService:
    return EvaluationService(supabase)


@router.get("/evaluations", response_model=Union[List[EvaluationResponse], Optional[EvaluationResponse]])
async def get_evaluations(
    student_id: Optional[str] = Query(None, alias="studentId"),
    class_id: Optional[str] = Query(None, alias="classId"),
    term: Optional[int] = Query(None, ge=1, le=3),
    academic_year: Optional[str] = Query(None, alias="academicYear"),
    user_data: Dict = Depends(require_permission("evaluations:read")),
    service: EvaluationService = Depends(get_evaluation_service)
):
    """One student's evaluation (studentId, term, academicYear), or every evaluation in a class (classId)"""
    if student_id and term and academic_year:
        return service.get_evaluation(student_id, term, academic_year)
    if class_id:
        return service.list_by_class(class_id, term, academic_year)
    raise HTTPException(status_code=400, detail="Missing required parameters")


@router.post("/evaluations", response_model=EvaluationResponse)
async def upsert_evaluation(
    data: EvaluationUpsert,
    user_data: Dict = Depends(require_permission("evaluations:enter")),
    service: EvaluationService = Depends(get_evaluation_service)
):
    return service.upsert_evaluation(data, user_data["id"])


@router.get("/rewards", response_model=List[RewardResponse])
async def list_rewards(
    student_id: Optional[str] = Query(None, alias="studentId"),
    user_data: Dict = Depends(require_permission("evaluations:read")),
    service: EvaluationService = Depends(get_evaluation_service)
):
    if not student_id:
        raise HTTPException(status_code=400, detail="Student ID is required")
    return service.list_rewards(student_id)


@router.post("/rewards", response_model=RewardResponse, status_code=201)
async def create_reward(
    data: RewardCreate,
    user_data: Dict = Depends(require_permission("evaluations:reward")),
    service: EvaluationService = Depends(get_evaluation_service)
):
    return service.create_reward(data, user_data["id"])


@router.delete("/rewards/{reward_id}")
async def delete_reward(
    reward_id: str,
    user_data: Dict = Depends(require_permission("evaluations:reward")),
    service: EvaluationService = Depends(get_evaluation_service)
):
    service.delete_reward(reward_id)
    return {"success": True}
