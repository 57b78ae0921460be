from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ErrorDetail(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    kind: str = Field(description="Error category (validation_error, configuration_error, upstream_error)")
    message: str = Field(description="Human readable description")
    detail: Optional[str] = Field(default=None, description="Raw upstream error body when available")
    upstream_status: Optional[int] = Field(default=None, description="Status code returned by the provider")


class ErrorResponse(BaseModel):
    error: ErrorDetail
