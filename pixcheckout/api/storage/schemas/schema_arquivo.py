from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ArquivoOut(BaseModel):
    id: int
    bucket: str
    path: str
    name: str
    size: int
    mime_type: Optional[str] = None
    url: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = Field(None, validation_alias="meta")
    tags: Optional[List[str]] = None
    related_id: Optional[str] = None
    related_type: Optional[str] = None
    uploaded_by: Optional[int] = None
    created_at: datetime
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class ArquivoMetadataUpdate(BaseModel):
    metadata: Optional[Dict[str, Any]] = None
    tags: Optional[List[str]] = None


class ArquivoUrlResponse(BaseModel):
    id: int
    url: str
