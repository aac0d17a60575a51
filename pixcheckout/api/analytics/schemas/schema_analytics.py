from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from pixcheckout.utils.database_utils import as_aware

Periodo = Literal["daily", "weekly", "monthly"]


class EventoCreate(BaseModel):
    event_type: str = Field(..., min_length=1, max_length=100)
    data: Dict[str, Any] = {}
    session_id: Optional[str] = None


class EventoOut(BaseModel):
    id: int
    event_type: str
    data: Optional[Dict[str, Any]] = None
    session_id: Optional[str] = None
    user_id: Optional[int] = None
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class CalcularMetricasRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    period: Periodo
    start_date: datetime
    end_date: datetime

    @model_validator(mode="after")
    def _validar_periodo(self):
        if as_aware(self.end_date) < as_aware(self.start_date):
            raise ValueError("end_date deve ser posterior a start_date")
        return self


class MetricasResultado(BaseModel):
    totalOrders: int
    totalAmount: float
    paidOrders: int
    conversionRate: float


class MetricaOut(BaseModel):
    id: int
    name: str
    value: float
    dimension: Optional[str] = None
    period: str
    start_date: datetime
    end_date: datetime
    metadata: Optional[Dict[str, Any]] = Field(None, validation_alias="meta")
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class PrevisaoRequest(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    model_type: str = Field("moving_average", min_length=1, max_length=50)
    target_metric: str = Field(..., min_length=1, max_length=100)
    features: Dict[str, Any] = {}


class PrevisaoResultado(BaseModel):
    value: float
    confidence: float


class DashboardCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    description: Optional[str] = None
    layout: List[Dict[str, Any]] = []
    widgets: List[Dict[str, Any]] = []


class DashboardOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    layout: List[Dict[str, Any]] = []
    widgets: List[Dict[str, Any]] = []
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class WidgetDados(BaseModel):
    model_config = ConfigDict(extra="allow")

    metric: Optional[str] = None
    limit: int = 30
    data: List[MetricaOut] = []


class DashboardDados(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    layout: List[Dict[str, Any]] = []
    widgets: List[WidgetDados] = []
