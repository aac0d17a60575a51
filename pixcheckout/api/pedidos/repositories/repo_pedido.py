from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from pixcheckout.api.cadastros.models.model_cliente import ClienteModel
from pixcheckout.api.cadastros.models.model_produto import ProdutoModel
from pixcheckout.api.pedidos.models.model_pedido import (
    PedidoModel,
    NotaPedidoModel,
    AtualizacaoPedidoModel,
)


class PedidoRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, pedido_id: int) -> PedidoModel | None:
        return (
            self.db.query(PedidoModel)
            .options(
                joinedload(PedidoModel.customer),
                joinedload(PedidoModel.product),
                joinedload(PedidoModel.notes),
            )
            .filter(PedidoModel.id == pedido_id)
            .first()
        )

    def add(self, obj: PedidoModel) -> PedidoModel:
        self.db.add(obj)
        self.db.flush()
        return obj

    def list(
        self,
        status: Optional[str] = None,
        inicio: Optional[datetime] = None,
        fim: Optional[datetime] = None,
        valor_min: Optional[Decimal] = None,
        valor_max: Optional[Decimal] = None,
        metodo_pagamento: Optional[str] = None,
        tipo_produto: Optional[str] = None,
        busca: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[PedidoModel]:
        query = (
            self.db.query(PedidoModel)
            .join(ClienteModel, PedidoModel.customer_id == ClienteModel.id)
            .join(ProdutoModel, PedidoModel.product_id == ProdutoModel.id)
            .options(joinedload(PedidoModel.customer), joinedload(PedidoModel.product))
        )
        if status:
            query = query.filter(PedidoModel.status == status)
        if inicio:
            query = query.filter(PedidoModel.created_at >= inicio)
        if fim:
            query = query.filter(PedidoModel.created_at <= fim)
        if valor_min is not None:
            query = query.filter(PedidoModel.amount >= valor_min)
        if valor_max is not None:
            query = query.filter(PedidoModel.amount <= valor_max)
        if metodo_pagamento:
            query = query.filter(PedidoModel.payment_method == metodo_pagamento)
        if tipo_produto:
            query = query.filter(ProdutoModel.type == tipo_produto)
        if busca:
            termo = f"%{busca.strip()}%"
            query = query.filter(
                or_(
                    ClienteModel.name.ilike(termo),
                    ClienteModel.email.ilike(termo),
                    ClienteModel.cpf.ilike(termo),
                    ProdutoModel.name.ilike(termo),
                )
            )
        return (
            query.order_by(PedidoModel.created_at.desc(), PedidoModel.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def pendentes_vencidos(self, agora: datetime) -> List[PedidoModel]:
        return (
            self.db.query(PedidoModel)
            .filter(PedidoModel.status == "pending", PedidoModel.expires_at < agora)
            .all()
        )

    def add_nota(self, obj: NotaPedidoModel) -> NotaPedidoModel:
        self.db.add(obj)
        self.db.flush()
        return obj

    def add_atualizacao(self, obj: AtualizacaoPedidoModel) -> AtualizacaoPedidoModel:
        self.db.add(obj)
        self.db.flush()
        return obj

    def list_atualizacoes(self, pedido_id: int) -> List[AtualizacaoPedidoModel]:
        return (
            self.db.query(AtualizacaoPedidoModel)
            .filter(AtualizacaoPedidoModel.order_id == pedido_id)
            .order_by(AtualizacaoPedidoModel.id)
            .all()
        )
