from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from pixcheckout.api.pedidos.schemas.schema_pedido import (
    AtualizacaoPedidoOut,
    AtualizarStatusRequest,
    ExpiracaoResponse,
    NotaCreate,
    NotaOut,
    PedidoDetalhe,
    PedidoOut,
    StatusPedido,
)
from pixcheckout.api.pedidos.services.service_pedido import PedidosService
from pixcheckout.api.usuarios.models.model_usuario import UserModel
from pixcheckout.core.admin_dependencies import get_current_user
from pixcheckout.database.db_connection import get_db

router = APIRouter(
    prefix="/api/pedidos/admin",
    tags=["Admin - Pedidos"],
    dependencies=[Depends(get_current_user)],
)


@router.get("", response_model=List[PedidoOut])
def listar_pedidos(
    status: Optional[StatusPedido] = Query(None),
    inicio: Optional[datetime] = Query(None),
    fim: Optional[datetime] = Query(None),
    valor_min: Optional[Decimal] = Query(None, ge=0),
    valor_max: Optional[Decimal] = Query(None, ge=0),
    metodo_pagamento: Optional[str] = Query(None),
    tipo_produto: Optional[str] = Query(None),
    busca: Optional[str] = Query(None, description="Nome, e-mail ou CPF do cliente ou nome do produto"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
):
    return PedidosService(db).listar(
        status=status,
        inicio=inicio,
        fim=fim,
        valor_min=valor_min,
        valor_max=valor_max,
        metodo_pagamento=metodo_pagamento,
        tipo_produto=tipo_produto,
        busca=busca,
        skip=skip,
        limit=limit,
    )


@router.post("/expirar", response_model=ExpiracaoResponse)
def expirar_pedidos(db: Session = Depends(get_db)):
    return ExpiracaoResponse(expirados=PedidosService(db).expirar_pedidos())


@router.get("/{id}", response_model=PedidoDetalhe)
def detalhe_pedido(id: int, db: Session = Depends(get_db)):
    return PedidosService(db).get(id)


@router.get("/{id}/atualizacoes", response_model=List[AtualizacaoPedidoOut])
def atualizacoes_pedido(id: int, db: Session = Depends(get_db)):
    return PedidosService(db).atualizacoes(id)


@router.put("/{id}/status", response_model=PedidoOut)
def atualizar_status(
    id: int,
    data: AtualizarStatusRequest,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    return PedidosService(db).atualizar_status_manual(
        id, data.status, usuario_id=current_user.id, motivo=data.motivo
    )


@router.post("/{id}/notas", response_model=NotaOut, status_code=201)
def adicionar_nota(
    id: int,
    data: NotaCreate,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    return PedidosService(db).adicionar_nota(id, data.content, autor_id=current_user.id)
