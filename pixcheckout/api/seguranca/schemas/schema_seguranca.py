from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class TentativaLoginResponse(BaseModel):
    id: int
    username: str
    ip: Optional[str] = None
    sucesso: bool
    user_agent: Optional[str] = None
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class IpBloqueadoCreate(BaseModel):
    ip: str
    motivo: Optional[str] = None
    bloqueado_ate: Optional[datetime] = None


class IpBloqueadoResponse(IpBloqueadoCreate):
    id: int
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)
