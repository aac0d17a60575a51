from __future__ import annotations

from datetime import datetime
from typing import List

from sqlalchemy.orm import Session, joinedload

from pixcheckout.api.acessos.models.model_acesso import LogAcessoModel, SolicitacaoAcessoModel
from pixcheckout.api.cadastros.models.model_cliente import ClienteModel
from pixcheckout.api.cadastros.models.model_produto import ProdutoModel
from pixcheckout.api.pedidos.models.model_pedido import PedidoModel
from pixcheckout.api.relatorios.models.model_relatorio import AgendamentoRelatorioModel, RelatorioLogModel


class RelatorioRepository:
    def __init__(self, db: Session):
        self.db = db

    # -------- Dados dos relatórios --------
    def pedidos_periodo(self, inicio: datetime, fim: datetime) -> List[PedidoModel]:
        return (
            self.db.query(PedidoModel)
            .options(joinedload(PedidoModel.customer), joinedload(PedidoModel.product))
            .filter(PedidoModel.created_at >= inicio, PedidoModel.created_at <= fim)
            .order_by(PedidoModel.created_at.desc())
            .all()
        )

    def produtos(self) -> List[ProdutoModel]:
        return self.db.query(ProdutoModel).order_by(ProdutoModel.created_at.desc()).all()

    def clientes(self) -> List[ClienteModel]:
        return self.db.query(ClienteModel).order_by(ClienteModel.created_at.desc()).all()

    def pedidos_por_cliente(self) -> List[PedidoModel]:
        return self.db.query(PedidoModel).all()

    def acessos_periodo(self, inicio: datetime, fim: datetime):
        return (
            self.db.query(LogAcessoModel, SolicitacaoAcessoModel.customer_id)
            .join(SolicitacaoAcessoModel, SolicitacaoAcessoModel.id == LogAcessoModel.request_id)
            .filter(LogAcessoModel.created_at >= inicio, LogAcessoModel.created_at <= fim)
            .order_by(LogAcessoModel.created_at.desc())
            .all()
        )

    # -------- Agendamentos --------
    def get_agendamento(self, agendamento_id: int) -> AgendamentoRelatorioModel | None:
        return (
            self.db.query(AgendamentoRelatorioModel)
            .filter(AgendamentoRelatorioModel.id == agendamento_id)
            .first()
        )

    def list_agendamentos(self) -> List[AgendamentoRelatorioModel]:
        return self.db.query(AgendamentoRelatorioModel).order_by(AgendamentoRelatorioModel.id).all()

    def agendamentos_vencidos(self, agora: datetime) -> List[AgendamentoRelatorioModel]:
        return (
            self.db.query(AgendamentoRelatorioModel)
            .filter(
                AgendamentoRelatorioModel.active.is_(True),
                AgendamentoRelatorioModel.next_run.isnot(None),
                AgendamentoRelatorioModel.next_run <= agora,
            )
            .order_by(AgendamentoRelatorioModel.next_run)
            .all()
        )

    def list_logs(self, schedule_id: int | None = None, limit: int = 100) -> List[RelatorioLogModel]:
        q = self.db.query(RelatorioLogModel)
        if schedule_id:
            q = q.filter(RelatorioLogModel.schedule_id == schedule_id)
        return q.order_by(RelatorioLogModel.id.desc()).limit(limit).all()

    def add(self, obj):
        self.db.add(obj)
        self.db.flush()
        return obj

    def delete(self, obj):
        self.db.delete(obj)
        self.db.flush()
