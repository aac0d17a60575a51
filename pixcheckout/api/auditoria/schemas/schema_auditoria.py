from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class AuditoriaOut(BaseModel):
    id: int
    table_name: str
    record_id: Optional[str] = None
    action: str
    old_data: Optional[Any] = None
    new_data: Optional[Any] = None
    user_id: Optional[int] = None
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)
