from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from pixcheckout.api.analytics.schemas.schema_analytics import (
    CalcularMetricasRequest,
    DashboardCreate,
    DashboardDados,
    DashboardOut,
    EventoCreate,
    EventoOut,
    MetricaOut,
    MetricasResultado,
    PrevisaoRequest,
    PrevisaoResultado,
)
from pixcheckout.api.analytics.services.service_analytics import AnalyticsService
from pixcheckout.api.usuarios.models.model_usuario import UserModel
from pixcheckout.core.admin_dependencies import get_current_user
from pixcheckout.database.db_connection import get_db

router = APIRouter(
    prefix="/api/analytics/admin",
    tags=["Admin - Analytics"],
    dependencies=[Depends(get_current_user)],
)


@router.post("/eventos", response_model=EventoOut, status_code=status.HTTP_201_CREATED)
def registrar_evento(
    payload: EventoCreate,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    return AnalyticsService(db).registrar_evento(payload, usuario_id=current_user.id)


@router.get("/eventos", response_model=List[EventoOut])
def listar_eventos(
    event_type: Optional[str] = Query(None),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
):
    return AnalyticsService(db).listar_eventos(event_type, limit)


@router.post("/metricas/calcular", response_model=MetricasResultado)
def calcular_metricas(payload: CalcularMetricasRequest, db: Session = Depends(get_db)):
    return AnalyticsService(db).calcular_metricas(
        payload.name, payload.period, payload.start_date, payload.end_date
    )


@router.get("/metricas/{nome}", response_model=List[MetricaOut])
def historico_metrica(nome: str, limit: int = Query(30, ge=1, le=365), db: Session = Depends(get_db)):
    return AnalyticsService(db).historico(nome, limit)


@router.post("/previsoes", response_model=PrevisaoResultado)
def gerar_previsao(payload: PrevisaoRequest, db: Session = Depends(get_db)):
    return AnalyticsService(db).gerar_previsao(payload.model_type, payload.target_metric, payload.features)


@router.get("/dashboards", response_model=List[DashboardOut])
def listar_dashboards(db: Session = Depends(get_db)):
    return AnalyticsService(db).listar_dashboards()


@router.post("/dashboards", response_model=DashboardOut, status_code=status.HTTP_201_CREATED)
def criar_dashboard(
    payload: DashboardCreate,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    return AnalyticsService(db).criar_dashboard(payload, usuario_id=current_user.id)


@router.get("/dashboards/{id}", response_model=DashboardDados)
def obter_dashboard(id: int, db: Session = Depends(get_db)):
    return AnalyticsService(db).obter_dashboard(id)
