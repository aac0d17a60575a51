from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from pixcheckout.api.analytics.models.model_analytics import (
    DashboardModel,
    EventoModel,
    MetricaModel,
    PrevisaoModel,
)
from pixcheckout.api.analytics.schemas.schema_analytics import DashboardCreate, EventoCreate
from pixcheckout.api.pedidos.models.model_pedido import PedidoModel
from pixcheckout.utils.database_utils import now_trimmed
from pixcheckout.utils.logger import logger

JANELA_MEDIA_MOVEL = 7
CONFIANCA_PADRAO = 0.95
LIMITE_WIDGET = 30


class AnalyticsService:
    def __init__(self, db: Session):
        self.db = db

    # ---------------- EVENTOS ----------------
    def registrar_evento(self, data: EventoCreate, usuario_id: Optional[int] = None) -> EventoModel:
        evento = EventoModel(
            event_type=data.event_type,
            data=data.data,
            session_id=data.session_id,
            user_id=usuario_id,
        )
        self.db.add(evento)
        self.db.flush()
        return evento

    def listar_eventos(self, event_type: Optional[str] = None, limit: int = 100) -> List[EventoModel]:
        q = self.db.query(EventoModel)
        if event_type:
            q = q.filter(EventoModel.event_type == event_type)
        return q.order_by(EventoModel.id.desc()).limit(limit).all()

    # ---------------- MÉTRICAS ----------------
    def calcular_metricas(self, nome: str, periodo: str, inicio: datetime, fim: datetime) -> Dict[str, Any]:
        """
        Consolida os pedidos criados no período e grava uma linha em analytics_metrics.
        value = soma dos valores de todos os pedidos do período.
        """
        pedidos = (
            self.db.query(PedidoModel)
            .filter(PedidoModel.created_at >= inicio, PedidoModel.created_at <= fim)
            .all()
        )
        total_pedidos = len(pedidos)
        total_valor = round(sum(float(p.amount or 0) for p in pedidos), 2)
        pagos = sum(1 for p in pedidos if p.status == "paid")
        conversao = round(pagos / total_pedidos * 100, 2) if total_pedidos else 0.0

        resultado = {
            "totalOrders": total_pedidos,
            "totalAmount": total_valor,
            "paidOrders": pagos,
            "conversionRate": conversao,
        }
        self.db.add(
            MetricaModel(
                name=nome,
                value=total_valor,
                dimension="sales",
                period=periodo,
                start_date=inicio,
                end_date=fim,
                meta={k: v for k, v in resultado.items() if k != "totalAmount"},
            )
        )
        self.db.flush()
        logger.info(f"[Analytics] Métrica '{nome}' ({periodo}) calculada: {resultado}")
        return resultado

    def historico(self, nome: str, limit: Optional[int] = None) -> List[MetricaModel]:
        """Últimos valores da métrica em ordem cronológica."""
        q = (
            self.db.query(MetricaModel)
            .filter(MetricaModel.name == nome)
            .order_by(MetricaModel.start_date.desc(), MetricaModel.id.desc())
        )
        if limit:
            q = q.limit(limit)
        return list(reversed(q.all()))

    # ---------------- PREVISÕES ----------------
    def gerar_previsao(self, modelo: str, metrica: str, features: Optional[Dict[str, Any]] = None) -> Dict[str, float]:
        """Média móvel dos últimos 7 valores da métrica."""
        valores = [m.value for m in self.historico(metrica, JANELA_MEDIA_MOVEL)]
        if not valores:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, "Não há histórico para a métrica informada")

        previsao = sum(valores) / len(valores)
        self.db.add(
            PrevisaoModel(
                model_type=modelo,
                target_metric=metrica,
                prediction_date=now_trimmed(),
                predicted_value=previsao,
                confidence_score=CONFIANCA_PADRAO,
                features=features or {},
            )
        )
        self.db.flush()
        logger.info(f"[Analytics] Previsão {modelo} para '{metrica}': {previsao:.2f}")
        return {"value": previsao, "confidence": CONFIANCA_PADRAO}

    # ---------------- DASHBOARDS ----------------
    def criar_dashboard(self, data: DashboardCreate, usuario_id: Optional[int] = None) -> DashboardModel:
        dashboard = DashboardModel(**data.model_dump(), created_by=usuario_id)
        self.db.add(dashboard)
        self.db.flush()
        return dashboard

    def listar_dashboards(self) -> List[DashboardModel]:
        return self.db.query(DashboardModel).order_by(DashboardModel.id).all()

    def obter_dashboard(self, dashboard_id: int) -> Dict[str, Any]:
        dashboard = self.db.query(DashboardModel).filter(DashboardModel.id == dashboard_id).first()
        if not dashboard:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Dashboard não encontrado")

        widgets = []
        for widget in dashboard.widgets or []:
            limite = widget.get("limit") or LIMITE_WIDGET
            dados = self.historico(widget["metric"], limite) if widget.get("metric") else []
            widgets.append({**widget, "limit": limite, "data": dados})

        return {
            "id": dashboard.id,
            "name": dashboard.name,
            "description": dashboard.description,
            "layout": dashboard.layout or [],
            "widgets": widgets,
        }
