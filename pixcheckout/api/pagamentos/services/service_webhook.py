import hashlib
import hmac
import json
from datetime import datetime
from typing import Optional

from fastapi import HTTPException, status
from pydantic import ValidationError
from sqlalchemy.orm import Session

from pixcheckout.api.automacao.services.service_automacao import AutomacaoService
from pixcheckout.api.notificacoes.services.service_email import EmailService
from pixcheckout.api.notificacoes.services.service_notificacao import NotificacoesService
from pixcheckout.api.notificacoes.services.service_whatsapp import WhatsappService
from pixcheckout.api.pagamentos.schemas.schema_webhook import PrimePagWebhookPayload, WebhookResponse
from pixcheckout.api.pedidos.models.model_pedido import PedidoModel
from pixcheckout.api.pedidos.services.service_pedido import PedidosService, transicao_permitida
from pixcheckout.config import settings
from pixcheckout.utils.database_utils import now_trimmed, TZ_SP
from pixcheckout.utils.logger import logger
from pixcheckout.utils.prometheus_metrics import pagamentos_confirmados_total, webhooks_rejeitados_total

TITULOS = {
    "paid": ("Pagamento Confirmado", "Seu pagamento de R$ {amount:.2f} foi confirmado"),
    "processing": ("Pagamento em Processamento", "O pagamento do pedido #{order_id} está em processamento"),
    "failed": ("Pagamento Recusado", "O pagamento do pedido #{order_id} foi recusado"),
    "expired": ("Pagamento Expirado", "Seu pagamento expirou"),
}

EVENTOS_AUTOMACAO = {"paid": "order_paid", "expired": "order_expired"}


def assinar(corpo: bytes, segredo: str) -> str:
    return hmac.new(segredo.encode("utf-8"), corpo, hashlib.sha256).hexdigest()


def verificar_assinatura(corpo: bytes, assinatura: str, segredo: str) -> bool:
    """HMAC-SHA256 hex do corpo bruto, comparado em tempo constante."""
    if not segredo or not assinatura:
        return False
    return hmac.compare_digest(assinatura.strip().lower(), assinar(corpo, segredo))


def mapear_status(status_gateway: str) -> str:
    status_gateway = (status_gateway or "").lower()
    if status_gateway == "paid":
        return "paid"
    if status_gateway in ("processing", "pending"):
        return "processing"
    if status_gateway in ("failed", "refused"):
        return "failed"
    return "expired"


def _parse_data(valor: Optional[str]) -> Optional[datetime]:
    if not valor:
        return None
    try:
        data = datetime.fromisoformat(valor.replace("Z", "+00:00"))
    except ValueError:
        logger.warning(f"[Webhook] paid_at inválido: {valor}")
        return None
    if data.tzinfo is None:
        return data.replace(tzinfo=TZ_SP)
    return data.astimezone(TZ_SP).replace(microsecond=0)


class WebhookService:
    def __init__(self, db: Session, segredo: Optional[str] = None):
        self.db = db
        self.segredo = segredo if segredo is not None else settings.PRIMEPAG_WEBHOOK_SECRET
        self.pedidos = PedidosService(db)

    def _rejeitar(self, codigo: int, motivo: str, mensagem: str):
        webhooks_rejeitados_total.labels(motivo=motivo).inc()
        logger.warning(f"[Webhook] Rejeitado ({motivo}): {mensagem}")
        raise HTTPException(codigo, mensagem)

    def validar(self, corpo: bytes, assinatura: Optional[str]) -> PrimePagWebhookPayload:
        if not assinatura:
            self._rejeitar(status.HTTP_400_BAD_REQUEST, "assinatura_ausente", "Assinatura PrimePag ausente")
        if not verificar_assinatura(corpo, assinatura, self.segredo):
            self._rejeitar(status.HTTP_401_UNAUTHORIZED, "assinatura_invalida", "Assinatura inválida")

        try:
            payload = PrimePagWebhookPayload.model_validate(json.loads(corpo))
        except (ValueError, ValidationError):
            self._rejeitar(status.HTTP_400_BAD_REQUEST, "payload_invalido", "Payload inválido")

        if not payload.id or not payload.external_id or not payload.status:
            self._rejeitar(status.HTTP_400_BAD_REQUEST, "campos_ausentes", "Campos obrigatórios ausentes")
        return payload

    def _buscar_pedido(self, external_id: str) -> PedidoModel:
        pedido = None
        if external_id.isdigit():
            pedido = self.pedidos.repo.get(int(external_id))
        if not pedido:
            self._rejeitar(status.HTTP_404_NOT_FOUND, "pedido_inexistente", "Pedido não encontrado")
        return pedido

    async def processar(self, corpo: bytes, assinatura: Optional[str]) -> WebhookResponse:
        payload = self.validar(corpo, assinatura)
        pedido = self._buscar_pedido(payload.external_id)
        novo_status = mapear_status(payload.status)

        if pedido.status == novo_status:
            logger.info(f"[Webhook] Pedido {pedido.id} já está em {novo_status}; reenvio ignorado")
            return WebhookResponse(order_id=pedido.id, status=novo_status, duplicado=True)

        if not transicao_permitida(pedido.status, novo_status):
            logger.warning(
                f"[Webhook] Transição {pedido.status} -> {novo_status} ignorada para pedido {pedido.id}"
            )
            return WebhookResponse(order_id=pedido.id, status=pedido.status, ignorado=True)

        pedido.transaction_id = payload.id
        if payload.payment_method:
            pedido.payment_method = payload.payment_method
        if novo_status == "paid":
            pedido.paid_at = _parse_data(payload.paid_at) or now_trimmed()

        self.pedidos.aplicar_status(
            pedido,
            novo_status,
            {"source": "webhook", "transaction_id": payload.id, "gateway_status": payload.status},
        )

        valor = float(payload.amount if payload.amount is not None else pedido.amount)
        titulo, conteudo = TITULOS[novo_status]
        NotificacoesService(self.db).criar(
            tipo="payment",
            titulo=titulo,
            conteudo=conteudo.format(amount=valor, order_id=pedido.id),
            dados={"order_id": pedido.id, "amount": valor, "status": novo_status},
        )
        # Confirma o status antes dos envios externos
        self.db.commit()
        logger.info(f"[Webhook] Pedido {pedido.id} atualizado para {novo_status}")

        if novo_status == "paid":
            pagamentos_confirmados_total.inc()
        await self._efeitos_externos(pedido, novo_status)
        return WebhookResponse(order_id=pedido.id, status=novo_status)

    async def _efeitos_externos(self, pedido: PedidoModel, novo_status: str):
        """E-mail, WhatsApp e automações; falhas são registradas e não derrubam o webhook."""
        template = {"paid": "payment_received", "expired": "payment_expired"}.get(novo_status)
        if template:
            await EmailService(self.db).notificar_pedido(pedido, template)
            await WhatsappService(self.db).notificar_pedido(pedido, template)

        evento = EVENTOS_AUTOMACAO.get(novo_status)
        if evento:
            try:
                await AutomacaoService(self.db).disparar_evento(evento, contexto_pedido(pedido))
            except Exception as e:
                logger.error(f"[Webhook] Falha nas automações do pedido {pedido.id}: {e}")


def contexto_pedido(pedido: PedidoModel) -> dict:
    """Contexto usado pelas regras de automação."""
    return {
        "order": {
            "id": pedido.id,
            "amount": float(pedido.amount or 0),
            "status": pedido.status,
            "payment_method": pedido.payment_method,
            "discount_amount": float(pedido.discount_amount or 0),
            "coupon_id": pedido.coupon_id,
        },
        "customer": {
            "id": pedido.customer.id,
            "name": pedido.customer.name,
            "email": pedido.customer.email,
            "phone": pedido.customer.phone,
        } if pedido.customer else {},
        "product": {
            "id": pedido.product.id,
            "name": pedido.product.name,
            "type": pedido.product.type,
            "price": float(pedido.product.price),
        } if pedido.product else {},
    }
