from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Optional


class ComparisonRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    snippet_a: str = Field(alias="snippetA", min_length=1)
    snippet_b: str = Field(alias="snippetB", min_length=1)


class ComparisonResponse(BaseModel):
    success: bool = True
    result: str
    html: Optional[str] = None
    raw: str
    model: str


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    details: Optional[Any] = None
