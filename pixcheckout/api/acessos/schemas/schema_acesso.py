from datetime import datetime
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

StatusSolicitacao = Literal["pending", "approved", "rejected"]


class SolicitarAcessoRequest(BaseModel):
    order_id: int
    customer_id: int


class RejeitarAcessoRequest(BaseModel):
    motivo: str = Field(..., min_length=1, max_length=500)


class RegistrarAcessoRequest(BaseModel):
    file_id: int
    action: Literal["view", "download"]


class SolicitacaoAcessoOut(BaseModel):
    id: int
    order_id: int
    customer_id: int
    status: str
    approved_at: Optional[datetime] = None
    approved_by: Optional[int] = None
    expires_at: Optional[datetime] = None
    metadata: Optional[Dict[str, Any]] = Field(None, validation_alias="meta")
    created_at: datetime
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class LogAcessoOut(BaseModel):
    id: int
    request_id: int
    file_id: Optional[int] = None
    action: str
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)
