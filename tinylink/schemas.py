import uuid
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import datetime

class LinkCreate(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    # Validated by utils.is_valid_url in the handler so missing and malformed
    # values produce the same 400
    target_url: Optional[str] = Field(None, alias="targetUrl")
    code: Optional[str] = None

class LinkResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: uuid.UUID
    code: str
    target_url: str
    total_clicks: int
    last_clicked: Optional[datetime]
    created_at: datetime
    updated_at: datetime

class ErrorResponse(BaseModel):
    error: str

class HealthResponse(BaseModel):
    ok: bool
    version: str
