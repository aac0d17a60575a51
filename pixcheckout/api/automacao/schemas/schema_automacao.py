from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Operador = Literal["equals", "not_equals", "greater_than", "less_than", "contains", "in"]
TipoAcao = Literal["notification", "email", "whatsapp", "webhook"]


class Condicao(BaseModel):
    campo: str = Field(..., description="Caminho com pontos no contexto, ex.: order.amount")
    operador: Operador
    valor: Any = None


class Acao(BaseModel):
    type: TipoAcao
    config: Dict[str, Any] = {}


class WorkflowCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    description: Optional[str] = None
    trigger_type: str = Field(..., min_length=1, max_length=50)
    trigger_config: Dict[str, Any] = {}
    actions: List[Acao] = []
    active: bool = True


class WorkflowUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=150)
    description: Optional[str] = None
    trigger_type: Optional[str] = Field(None, min_length=1, max_length=50)
    trigger_config: Optional[Dict[str, Any]] = None
    actions: Optional[List[Acao]] = None
    active: Optional[bool] = None


class WorkflowOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    trigger_type: str
    trigger_config: Dict[str, Any] = {}
    actions: List[Dict[str, Any]] = []
    active: bool
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class RegraCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    description: Optional[str] = None
    conditions: List[Condicao] = []
    actions: List[Acao] = []
    priority: int = 0
    active: bool = True


class RegraUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=150)
    description: Optional[str] = None
    conditions: Optional[List[Condicao]] = None
    actions: Optional[List[Acao]] = None
    priority: Optional[int] = None
    active: Optional[bool] = None


class RegraOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    conditions: List[Dict[str, Any]] = []
    actions: List[Dict[str, Any]] = []
    priority: int
    active: bool
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class ContextoExecucao(BaseModel):
    contexto: Dict[str, Any] = {}


class ExecucaoOut(BaseModel):
    id: int
    workflow_id: Optional[int] = None
    rule_id: Optional[int] = None
    status: str
    result: Optional[List[Dict[str, Any]]] = None
    duration: int
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)
