import logging
from supabase import Client
from pydantic import ValidationError
from app.modules.sync.schemas import SyncItem, SyncResult, SyncError, SyncedItem
from app.modules.attendance.schemas import AttendanceUpsert
from app.modules.attendance.service import AttendanceService
from app.modules.evaluations.schemas import EvaluationUpsert
from app.modules.evaluations.service import EvaluationService
from app.modules.grades.schemas import GradeUpsert
from app.modules.grades.service import GradeService
from app.core.errors import format_error
from typing import Dict, List
from fastapi import HTTPException

logger = logging.getLogger(__name__)

# kind -> (payload schema, permission code)
SYNC_KINDS = {
    "grade": (GradeUpsert, "grades:enter"),
    "attendance": (AttendanceUpsert, "attendance:enter"),
    "evaluation": (EvaluationUpsert, "evaluations:enter"),
}


def validation_message(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first['msg']}" if location else first["msg"]


class SyncService:
    """Replays writes queued by offline clients. Items are applied in order; last write wins."""

    def __init__(self, supabase: Client):
        self.grades = GradeService(supabase)
        self.attendance = AttendanceService(supabase)
        self.evaluations = EvaluationService(supabase)

    def _apply(self, item: SyncItem, user_id: str) -> str:
        """Write one item and return the id of the saved row"""
        schema, _ = SYNC_KINDS[item.kind]
        data = schema.model_validate(item.payload)
        if item.kind == "grade":
            saved = self.grades.upsert_grade(data, user_id)
        elif item.kind == "attendance":
            saved = self.attendance.upsert_attendance(data, user_id)
        else:
            saved = self.evaluations.upsert_evaluation(data, user_id)
        return saved.id

    def replay(self, items: List[SyncItem], user_data: Dict, permissions: List[str]) -> SyncResult:
        result = SyncResult()
        for item in items:
            _, permission = SYNC_KINDS[item.kind]
            try:
                if permission not in permissions:
                    raise HTTPException(status_code=403, detail=f"Insufficient permissions. Required: {permission}")
                saved_id = self._apply(item, user_data["id"])
                result.synced += 1
                result.results.append(SyncedItem(client_id=item.client_id, id=saved_id))
            except ValidationError as e:
                result.failed += 1
                result.errors.append(SyncError(client_id=item.client_id, error=validation_message(e)))
            except HTTPException as e:
                result.failed += 1
                result.errors.append(SyncError(client_id=item.client_id, error=str(e.detail)))
            except Exception as e:
                logger.error(f"Error syncing {item.kind} {item.client_id}: {e}")
                result.failed += 1
                result.errors.append(SyncError(client_id=item.client_id, error=format_error(e)))
        if result.failed:
            logger.warning(f"Sync finished with {result.failed} failed of {len(items)} items")
        return result
