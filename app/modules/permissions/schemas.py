from pydantic import Field
from typing import Optional, List
from datetime import datetime
from app.core.schemas import CamelModel


class PermissionResponse(CamelModel):
    id: str
    code: str
    name: str
    description: Optional[str] = None
    category: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SetUserPermissionsRequest(CamelModel):
    permission_codes: List[str]


class AddUserPermissionRequest(CamelModel):
    permission_code: str = Field(min_length=1)
