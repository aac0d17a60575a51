from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr

TipoNotificacao = Literal["order_status", "payment", "system"]


class NotificacaoCreate(BaseModel):
    type: TipoNotificacao = "system"
    title: str
    content: str
    data: Optional[Dict[str, Any]] = None
    user_id: Optional[int] = None


class NotificacaoOut(BaseModel):
    id: int
    user_id: Optional[int] = None
    type: str
    title: str
    content: str
    data: Optional[Dict[str, Any]] = None
    read: bool
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class EmailLogOut(BaseModel):
    id: int
    to: str
    cc: Optional[List[str]] = None
    template: str
    subject: Optional[str] = None
    status: str
    error: Optional[str] = None
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class WhatsappLogOut(BaseModel):
    id: int
    to_phone: str
    template: str
    data: Optional[Dict[str, Any]] = None
    message: Optional[str] = None
    status: str
    message_id: Optional[str] = None
    error: Optional[str] = None
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class EnviarEmailRequest(BaseModel):
    to: EmailStr
    template: str
    data: Dict[str, Any] = {}


class EnviarWhatsappRequest(BaseModel):
    to: str
    template: str
    data: Dict[str, Any] = {}


class ReenvioResumo(BaseModel):
    total: int
    success: int
    failed: int
