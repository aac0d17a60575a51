from datetime import timedelta
from typing import Any, Dict, List, Optional

from fastapi.encoders import jsonable_encoder
from sqlalchemy import func
from sqlalchemy.orm import Session

from pixcheckout.api.configuracoes.services.service_configuracao import ConfiguracoesService
from pixcheckout.api.notificacoes.channels.base_channel import BaseNotificationChannel, NotificationResult
from pixcheckout.api.notificacoes.channels.email_channel import EmailChannel
from pixcheckout.api.notificacoes.models.model_notificacao import EmailLogModel
from pixcheckout.api.notificacoes.repositories.repo_notificacao import NotificacaoRepository
from pixcheckout.api.notificacoes.templates.email_templates import TEMPLATES, renderizar
from pixcheckout.config import settings
from pixcheckout.utils.database_utils import now_trimmed
from pixcheckout.utils.logger import logger

# Chave em notification_settings que habilita cada template ligado a pedidos
FLAG_POR_TEMPLATE = {
    "order_confirmation": "new_order",
    "payment_received": "payment_confirmation",
    "payment_expired": "payment_expiration",
    "daily_summary": "daily_summary",
    "weekly_report": "weekly_report",
}


class EmailService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = NotificacaoRepository(db)

    def _criar_canal(self) -> Optional[BaseNotificationChannel]:
        config = {
            "smtp_server": settings.SMTP_HOST,
            "smtp_port": settings.SMTP_PORT,
            "username": settings.SMTP_USER,
            "password": settings.SMTP_PASS,
            "from_email": settings.SMTP_FROM,
            "from_name": settings.SMTP_FROM_NAME,
        }
        try:
            return EmailChannel(config)
        except ValueError:
            return None

    async def enviar(
        self,
        to: str,
        template: str,
        data: Dict[str, Any],
        cc: Optional[List[str]] = None,
    ) -> NotificationResult:
        """Renderiza e envia o template; todo envio é registrado em email_logs."""
        dados_log = jsonable_encoder(data)

        if template not in TEMPLATES:
            resultado = NotificationResult(False, "Template inválido")
            self._registrar(to, cc, template, None, dados_log, resultado)
            return resultado

        assunto, html = renderizar(template, data)
        canal = self._criar_canal()
        if canal is None:
            logger.warning(f"[Email] SMTP não configurado; email '{template}' para {to} não enviado")
            resultado = NotificationResult(False, "SMTP não configurado")
        else:
            resultado = await canal.send(to, assunto, html, {"cc": cc or []})

        self._registrar(to, cc, template, assunto, dados_log, resultado)
        return resultado

    def _registrar(self, to, cc, template, assunto, dados, resultado: NotificationResult):
        self.repo.add_email_log(
            EmailLogModel(
                to=to,
                cc=cc or None,
                template=template,
                subject=assunto,
                data=dados,
                status="sent" if resultado.success else "failed",
                error=None if resultado.success else resultado.message,
            )
        )

    def _copias(self) -> List[str]:
        return list(ConfiguracoesService(self.db).secao("notification_settings").get("send_copy_to") or [])

    def template_habilitado(self, template: str) -> bool:
        config = ConfiguracoesService(self.db).secao("notification_settings")
        if not config.get("email_notifications", True):
            return False
        flag = FLAG_POR_TEMPLATE.get(template)
        return bool(config.get(flag, True)) if flag else True

    async def notificar_pedido(self, pedido, template: str, extra: Optional[Dict[str, Any]] = None) -> Optional[NotificationResult]:
        """
        Envia o template do pedido ao cliente (com cópias configuradas).
        Nunca propaga erro: falhas ficam no log e em email_logs.
        """
        if not self.template_habilitado(template):
            return None

        cliente = pedido.customer
        produto = pedido.product
        data = {
            "customerName": cliente.name if cliente else "",
            "orderId": pedido.id,
            "productName": produto.name if produto else "",
            "amount": float(pedido.amount or 0),
            "paymentMethod": (pedido.payment_method or "pix").upper(),
            "date": pedido.paid_at or pedido.created_at,
        }
        data.update(extra or {})
        try:
            return await self.enviar(cliente.email, template, data, cc=self._copias())
        except Exception as e:
            logger.error(f"[Email] Falha ao notificar pedido {pedido.id} ({template}): {e}")
            return None

    # ---------------- RESUMOS ----------------
    def montar_resumo(self, dias: int, top: int = 5) -> Dict[str, Any]:
        from pixcheckout.api.cadastros.models.model_produto import ProdutoModel
        from pixcheckout.api.pedidos.models.model_pedido import PedidoModel

        fim = now_trimmed()
        inicio = fim - timedelta(days=dias)
        pedidos = (
            self.db.query(PedidoModel)
            .filter(PedidoModel.created_at >= inicio, PedidoModel.created_at <= fim)
            .all()
        )
        pagos = [p for p in pedidos if p.status == "paid"]
        total = sum(float(p.amount or 0) for p in pagos)

        top_produtos = (
            self.db.query(
                ProdutoModel.name,
                func.count(PedidoModel.id),
                func.coalesce(func.sum(PedidoModel.amount), 0),
            )
            .join(PedidoModel, PedidoModel.product_id == ProdutoModel.id)
            .filter(PedidoModel.status == "paid", PedidoModel.created_at >= inicio, PedidoModel.created_at <= fim)
            .group_by(ProdutoModel.name)
            .order_by(func.count(PedidoModel.id).desc())
            .limit(top)
            .all()
        )

        return {
            "startDate": inicio,
            "endDate": fim,
            "newOrders": len(pedidos),
            "totalOrders": len(pedidos),
            "confirmedPayments": len(pagos),
            "paidOrders": len(pagos),
            "totalAmount": round(total, 2),
            "conversionRate": round(len(pagos) / len(pedidos) * 100, 2) if pedidos else 0,
            "topProducts": [
                {"name": nome, "count": qtd, "revenue": float(receita)} for nome, qtd, receita in top_produtos
            ],
        }

    async def enviar_resumo(self, template: str, destinatarios: List[str]) -> List[NotificationResult]:
        if template not in ("daily_summary", "weekly_report"):
            raise ValueError("Resumo deve ser daily_summary ou weekly_report")
        dados = self.montar_resumo(1 if template == "daily_summary" else 7)
        return [await self.enviar(destino, template, dados) for destino in destinatarios]
