from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, field_validator

TipoUsuario = Literal["admin", "operador"]


class UserBase(BaseModel):
    username: str
    type_user: TipoUsuario = "operador"

    @field_validator("username")
    @classmethod
    def _strip_username(cls, v: str):
        v = v.strip()
        if not v:
            raise ValueError("username não pode ser vazio")
        return v


class UserCreate(UserBase):
    password: str


class UserUpdate(BaseModel):
    username: Optional[str] = None
    type_user: Optional[TipoUsuario] = None
    password: Optional[str] = None  # <- necessário para atualizar senha


class UserResponse(UserBase):
    id: int
    created_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)
