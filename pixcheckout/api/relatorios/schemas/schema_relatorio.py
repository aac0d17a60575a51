from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

TipoRelatorio = Literal["sales", "products", "customers", "access"]
FormatoRelatorio = Literal["pdf", "excel"]
Frequencia = Literal["daily", "weekly", "monthly"]


class AgendamentoCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    type: TipoRelatorio
    format: FormatoRelatorio = "pdf"
    frequency: Frequencia
    recipients: List[EmailStr] = Field(..., min_length=1)
    active: bool = True


class AgendamentoUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=150)
    type: Optional[TipoRelatorio] = None
    format: Optional[FormatoRelatorio] = None
    frequency: Optional[Frequencia] = None
    recipients: Optional[List[EmailStr]] = Field(None, min_length=1)
    active: Optional[bool] = None


class AgendamentoOut(BaseModel):
    id: int
    name: str
    type: str
    format: str
    frequency: str
    recipients: List[str]
    active: bool
    last_run: Optional[datetime] = None
    next_run: Optional[datetime] = None
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class RelatorioLogOut(BaseModel):
    id: int
    schedule_id: Optional[int] = None
    status: str
    recipients: List[str] = []
    file_url: Optional[str] = None
    error: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = Field(None, validation_alias="meta")
    created_at: datetime
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
