from pydantic import Field, field_validator
from typing import Optional, List, Literal
from datetime import datetime
from app.core.schemas import CamelModel

SubjectCategory = Literal["core", "elective"]
LevelCategory = Literal["KG", "Lower Primary", "Upper Primary", "JHS"]


class SubjectCreate(CamelModel):
    name: str = Field(min_length=1)
    code: str = Field(min_length=1)
    category: SubjectCategory = "core"
    level_categories: List[LevelCategory] = []
    description: Optional[str] = None

    @field_validator("code")
    @classmethod
    def _upper_code(cls, value: str) -> str:
        return value.strip().upper()


class SubjectUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1)
    code: Optional[str] = Field(default=None, min_length=1)
    category: Optional[SubjectCategory] = None
    level_categories: Optional[List[LevelCategory]] = None
    description: Optional[str] = None

    @field_validator("code")
    @classmethod
    def _upper_code(cls, value: Optional[str]) -> Optional[str]:
        return value.strip().upper() if value is not None else value


class SubjectResponse(CamelModel):
    id: str
    name: str
    code: Optional[str] = None
    category: str = "core"
    level_categories: List[str] = []
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("level_categories", mode="before")
    @classmethod
    def _null_categories(cls, value):
        return value or []
