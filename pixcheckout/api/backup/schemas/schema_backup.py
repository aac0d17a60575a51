from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

TabelaBackup = Literal["products", "customers", "orders", "coupons", "settings", "files"]


class GerarBackupRequest(BaseModel):
    tables: List[TabelaBackup] = Field(
        default_factory=lambda: ["products", "customers", "orders", "coupons", "settings", "files"],
        min_length=1,
    )


class BackupLogOut(BaseModel):
    id: int
    type: str
    status: str
    file_name: Optional[str] = None
    file_size: Optional[int] = None
    tables: List[str] = []
    error: Optional[str] = None
    created_by: Optional[int] = None
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class RestauracaoResponse(BaseModel):
    success: bool = True
    tables: List[str]
    registros: int
