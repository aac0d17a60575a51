from datetime import timedelta
from decimal import Decimal
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from pixcheckout.api.automacao.services.service_automacao import AutomacaoService
from pixcheckout.api.cadastros.services.service_cliente import ClientesService
from pixcheckout.api.cadastros.services.service_cupom import CuponsService
from pixcheckout.api.cadastros.services.service_link_pagamento import LinksPagamentoService
from pixcheckout.api.cadastros.services.service_produto import ProdutosService
from pixcheckout.api.checkout.schemas.schema_checkout import (
    CheckoutRequest,
    PedidoCriadoResponse,
    StatusPedidoResponse,
)
from pixcheckout.api.checkout.services.render_comprovante import gerar_comprovante
from pixcheckout.api.configuracoes.services.service_configuracao import ConfiguracoesService
from pixcheckout.api.notificacoes.services.service_email import EmailService
from pixcheckout.api.notificacoes.services.service_notificacao import NotificacoesService
from pixcheckout.api.pagamentos.services.gateway_pix import GatewayPix
from pixcheckout.api.pagamentos.services.service_webhook import contexto_pedido
from pixcheckout.api.pedidos.models.model_pedido import PedidoModel
from pixcheckout.api.pedidos.services.service_pedido import PedidosService
from pixcheckout.api.seguranca.fraude import detectar_fraude
from pixcheckout.api.seguranca.rate_limit import RateLimiter, checkout_rate_limiter
from pixcheckout.api.seguranca.services.service_seguranca import SegurancaService
from pixcheckout.config import settings
from pixcheckout.utils.database_utils import now_trimmed
from pixcheckout.utils.logger import logger
from pixcheckout.utils.prometheus_metrics import pedidos_criados_total


class CheckoutService:
    def __init__(
        self,
        db: Session,
        gateway: Optional[GatewayPix] = None,
        rate_limiter: Optional[RateLimiter] = None,
    ):
        self.db = db
        self.gateway = gateway or GatewayPix()
        self.rate_limiter = rate_limiter or checkout_rate_limiter
        self.pedidos = PedidosService(db)

    def _tempo_expiracao(self) -> int:
        checkout = ConfiguracoesService(self.db).secao("checkout_settings")
        try:
            minutos = int(checkout.get("auto_expire_time") or settings.ORDER_EXPIRE_MINUTES)
        except (TypeError, ValueError):
            minutos = settings.ORDER_EXPIRE_MINUTES
        return max(minutos, 1)

    async def criar_pedido(self, data: CheckoutRequest, ip: Optional[str] = None, user_agent: Optional[str] = None) -> PedidoCriadoResponse:
        chave = ip or "desconhecido"
        if not self.rate_limiter.check(chave, settings.CHECKOUT_RATE_LIMIT, settings.CHECKOUT_RATE_WINDOW_SECONDS):
            logger.warning(f"[Checkout] Rate limit excedido para ip={chave}")
            raise HTTPException(
                status.HTTP_429_TOO_MANY_REQUESTS,
                "Muitas tentativas. Aguarde alguns instantes e tente novamente.",
            )

        SegurancaService(self.db).garantir_ip_liberado(ip)

        fraude = detectar_fraude(data.email, data.document, data.tentativas, ip, user_agent)
        if fraude.suspeito:
            logger.warning(f"[Checkout] Pedido suspeito email={data.email} ip={ip}: {fraude.motivo}")
            raise HTTPException(status.HTTP_400_BAD_REQUEST, fraude.motivo)

        links = LinksPagamentoService(self.db)
        link = None
        if data.payment_link_token:
            link = links.resolver_ativo(data.payment_link_token)
            if link.product_id != data.product_id:
                raise HTTPException(status.HTTP_400_BAD_REQUEST, "Link de pagamento não corresponde ao produto")

        produto = ProdutosService(self.db).get_publico(data.product_id)
        cliente = ClientesService(self.db).upsert_por_email(data.name, data.email, data.document, data.phone)

        preco = Decimal(str(produto.price))
        desconto = Decimal("0")
        cupom_id = None
        cupons = CuponsService(self.db)
        if data.coupon_code:
            validado = cupons.validar_cupom(data.coupon_code, preco, produto.id)
            cupom_id = validado["cupom_id"]
            desconto = validado["desconto"]

        minutos = self._tempo_expiracao()
        pedido = self.pedidos.repo.add(
            PedidoModel(
                customer_id=cliente.id,
                product_id=produto.id,
                amount=preco - desconto,
                status="pending",
                payment_method="pix",
                coupon_id=cupom_id,
                discount_amount=desconto,
                payment_link_id=link.id if link else None,
            )
        )

        cobranca = await self.gateway.gerar_cobranca(
            pedido_id=pedido.id,
            valor=pedido.amount,
            descricao=produto.name,
            cliente={"name": cliente.name, "email": cliente.email, "document": cliente.cpf, "phone": cliente.phone},
            expiracao_minutos=minutos,
        )
        pedido.qr_code = cobranca.qr_code
        pedido.payment_code = cobranca.payment_code
        pedido.transaction_id = cobranca.transaction_id
        pedido.expires_at = now_trimmed() + timedelta(minutes=minutos)

        if cupom_id:
            cupons.registrar_uso(cupom_id)
        if link:
            links.consumir(link)

        NotificacoesService(self.db).criar(
            tipo="payment",
            titulo="Novo Pedido",
            conteudo=f"Novo pedido #{pedido.id} de {cliente.name}: R$ {pedido.amount:.2f}",
            dados={"order_id": pedido.id, "amount": float(pedido.amount), "product_id": produto.id},
        )
        self.db.commit()
        self.db.refresh(pedido)
        pedidos_criados_total.inc()
        logger.info(
            f"[Checkout] Pedido {pedido.id} criado cliente={cliente.id} produto={produto.id} "
            f"valor={pedido.amount} desconto={desconto} mock={cobranca.mock}"
        )

        try:
            await AutomacaoService(self.db).disparar_evento("order_created", contexto_pedido(pedido))
        except Exception as e:
            logger.error(f"[Checkout] Falha nas automações do pedido {pedido.id}: {e}")
        await EmailService(self.db).notificar_pedido(pedido, "order_confirmation")

        return PedidoCriadoResponse(
            order_id=pedido.id,
            status=pedido.status,
            amount=pedido.amount,
            discount_amount=pedido.discount_amount,
            qr_code=pedido.qr_code,
            payment_code=pedido.payment_code,
            expires_at=pedido.expires_at,
        )

    def status_pedido(self, pedido_id: int) -> StatusPedidoResponse:
        """Consulta pública; pedido pendente vencido é expirado na leitura."""
        pedido = self.pedidos.get(pedido_id)
        if self.pedidos.expirar_se_vencido(pedido):
            self.db.commit()
        return StatusPedidoResponse(
            order_id=pedido.id,
            status=pedido.status,
            amount=pedido.amount,
            expires_at=pedido.expires_at,
            paid_at=pedido.paid_at,
        )

    def comprovante(self, pedido_id: int) -> bytes:
        pedido = self.pedidos.get(pedido_id)
        if pedido.status != "paid":
            raise HTTPException(status.HTTP_400_BAD_REQUEST, "Comprovante disponível apenas para pedidos pagos")
        return gerar_comprovante(pedido)

    async def simular_pagamento(self, pedido_id: int) -> StatusPedidoResponse:
        if not settings.IS_DEVELOPMENT:
            raise HTTPException(status.HTTP_403_FORBIDDEN, "Simulação disponível apenas em desenvolvimento")

        pedido = self.pedidos.get(pedido_id)
        agora = now_trimmed()
        transaction_id = f"sim_{int(agora.timestamp())}"
        if not self.pedidos.aplicar_status(pedido, "paid", {"source": "simulation", "transaction_id": transaction_id}):
            logger.info(f"[Checkout] Pedido {pedido.id} já pago; simulação ignorada")
            return self.status_pedido(pedido.id)

        pedido.transaction_id = transaction_id
        pedido.paid_at = agora
        NotificacoesService(self.db).criar(
            tipo="payment",
            titulo="Pagamento Confirmado",
            conteudo=f"Pagamento simulado do pedido #{pedido.id}",
            dados={"order_id": pedido.id, "amount": float(pedido.amount), "simulado": True},
        )
        self.db.commit()
        logger.info(f"[Checkout] Pagamento simulado para pedido {pedido.id}")
        await EmailService(self.db).notificar_pedido(pedido, "payment_received")
        return self.status_pedido(pedido.id)
