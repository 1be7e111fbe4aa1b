from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Annotated


class CamelModel(BaseModel):
    """Base schema: snake_case fields (DB column names), camelCase JSON for the front-end."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


ACADEMIC_YEAR_REGEX = r"^\d{4}/\d{4}$"

Term = Annotated[int, Field(ge=1, le=3)]
AcademicYear = Annotated[str, Field(pattern=ACADEMIC_YEAR_REGEX, examples=["2024/2025"])]


class SuccessResponse(CamelModel):
    success: bool = True
