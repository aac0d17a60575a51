from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from pixcheckout.api.cadastros.schemas.schema_cupom import CupomValidadoResponse, ValidarCupomRequest
from pixcheckout.api.cadastros.schemas.schema_link_pagamento import LinkPagamentoPublico
from pixcheckout.api.cadastros.schemas.schema_produto import ProdutoOut
from pixcheckout.api.cadastros.services.service_cupom import CuponsService
from pixcheckout.api.cadastros.services.service_link_pagamento import LinksPagamentoService
from pixcheckout.api.cadastros.services.service_produto import ProdutosService
from pixcheckout.api.checkout.schemas.schema_checkout import (
    CheckoutRequest,
    PedidoCriadoResponse,
    StatusPedidoResponse,
)
from pixcheckout.api.checkout.services.service_checkout import CheckoutService
from pixcheckout.api.pagamentos.services.gateway_pix import GatewayPix, get_gateway_pix
from pixcheckout.core.admin_dependencies import get_client_ip
from pixcheckout.database.db_connection import get_db

router = APIRouter(prefix="/api/checkout", tags=["Public - Checkout"])


@router.get("/produtos/{id}", response_model=ProdutoOut)
def produto_checkout(id: int, db: Session = Depends(get_db)):
    return ProdutosService(db).get_publico(id)


@router.get("/link/{token}", response_model=LinkPagamentoPublico)
def resolver_link(token: str, db: Session = Depends(get_db)):
    return LinksPagamentoService(db).resolver_ativo(token)


@router.post("/cupom/validar", response_model=CupomValidadoResponse)
def validar_cupom(data: ValidarCupomRequest, db: Session = Depends(get_db)):
    return CuponsService(db).validar_cupom(data.code, data.amount, data.product_id)


@router.post("/pedidos", response_model=PedidoCriadoResponse, status_code=201)
async def criar_pedido(
    data: CheckoutRequest,
    request: Request,
    db: Session = Depends(get_db),
    gateway: GatewayPix = Depends(get_gateway_pix),
):
    return await CheckoutService(db, gateway=gateway).criar_pedido(
        data,
        ip=get_client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )


@router.get("/pedidos/{id}/status", response_model=StatusPedidoResponse)
def status_pedido(id: int, db: Session = Depends(get_db)):
    return CheckoutService(db).status_pedido(id)


@router.post("/pedidos/{id}/simular", response_model=StatusPedidoResponse)
async def simular_pagamento(id: int, db: Session = Depends(get_db)):
    """Marca o pedido como pago. Disponível apenas com APP_ENV=development."""
    return await CheckoutService(db).simular_pagamento(id)


@router.get("/pedidos/{id}/comprovante")
def comprovante_pedido(id: int, db: Session = Depends(get_db)):
    conteudo = CheckoutService(db).comprovante(id)
    return Response(
        content=conteudo,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="comprovante-{id}.pdf"'},
    )
