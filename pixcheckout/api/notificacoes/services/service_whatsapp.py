from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from fastapi.encoders import jsonable_encoder
from sqlalchemy.orm import Session

from pixcheckout.api.configuracoes.services.service_configuracao import ConfiguracoesService
from pixcheckout.api.notificacoes.channels.base_channel import BaseNotificationChannel, NotificationResult
from pixcheckout.api.notificacoes.channels.whatsapp_channel import WhatsAppChannel
from pixcheckout.api.notificacoes.models.model_notificacao import WhatsappLogModel
from pixcheckout.api.notificacoes.repositories.repo_notificacao import NotificacaoRepository
from pixcheckout.utils.database_utils import now_trimmed
from pixcheckout.utils.logger import logger


def renderizar_mensagem(template: str, data: Dict[str, Any]) -> str:
    """Substitui cada {chave} do template pelo valor correspondente."""
    mensagem = template
    for chave, valor in (data or {}).items():
        mensagem = mensagem.replace(f"{{{chave}}}", "" if valor is None else str(valor))
    return mensagem


class WhatsappService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = NotificacaoRepository(db)

    def _config(self) -> Dict[str, Any]:
        return ConfiguracoesService(self.db).secao("whatsapp_settings")

    def _criar_canal(self, config: Dict[str, Any]) -> BaseNotificationChannel:
        return WhatsAppChannel(config)

    async def enviar(self, to: str, template: str, data: Dict[str, Any]) -> NotificationResult:
        """Envia a mensagem do template; todo resultado vai para whatsapp_logs."""
        config = self._config()
        data = jsonable_encoder(data or {})
        mensagem = None

        if not config.get("enabled"):
            resultado = NotificationResult(False, "Notificações por WhatsApp estão desabilitadas")
        else:
            texto = (config.get("templates") or {}).get(template)
            if not texto:
                resultado = NotificationResult(False, "Template inválido")
            else:
                mensagem = renderizar_mensagem(texto, data)
                try:
                    canal = self._criar_canal(config)
                except ValueError as e:
                    resultado = NotificationResult(False, str(e))
                else:
                    resultado = await canal.send(to, template, mensagem)

        self.repo.add_whatsapp_log(
            WhatsappLogModel(
                to_phone=to,
                template=template,
                data=data,
                message=mensagem,
                status="sent" if resultado.success else "failed",
                message_id=resultado.external_id,
                error=None if resultado.success else resultado.message,
            )
        )
        if not resultado.success:
            logger.warning(f"[WhatsApp] Envio '{template}' para {to} falhou: {resultado.message}")
        return resultado

    def habilitado_para(self, template: str) -> bool:
        config = self._config()
        if not config.get("enabled"):
            return False
        tipos = config.get("notification_types") or {}
        return bool(tipos.get(template, True))

    async def notificar_pedido(self, pedido, template: str, extra: Optional[Dict[str, Any]] = None) -> Optional[NotificationResult]:
        """Envia o template ao telefone do cliente quando habilitado; nunca propaga erro."""
        cliente = pedido.customer
        if not cliente or not cliente.phone or not self.habilitado_para(template):
            return None
        data = {
            "customer_name": cliente.name,
            "order_id": pedido.id,
            "amount": f"{float(pedido.amount or 0):.2f}",
            "product_name": pedido.product.name if pedido.product else "",
        }
        data.update(extra or {})
        try:
            return await self.enviar(cliente.phone, template, data)
        except Exception as e:
            logger.error(f"[WhatsApp] Falha ao notificar pedido {pedido.id} ({template}): {e}")
            return None

    def listar_logs(
        self,
        status: Optional[str] = None,
        inicio: Optional[datetime] = None,
        fim: Optional[datetime] = None,
        telefone: Optional[str] = None,
    ):
        return self.repo.list_whatsapp_logs(status=status, inicio=inicio, fim=fim, telefone=telefone)

    async def reenviar_falhas(self) -> Dict[str, int]:
        """Reenvia as mensagens que falharam nas últimas 24 horas."""
        falhas = self.repo.list_whatsapp_logs(status="failed", inicio=now_trimmed() - timedelta(days=1))
        sucesso = 0
        for log in falhas:
            resultado = await self.enviar(log.to_phone, log.template, log.data or {})
            if resultado.success:
                sucesso += 1
        resumo = {"total": len(falhas), "success": sucesso, "failed": len(falhas) - sucesso}
        logger.info(f"[WhatsApp] Reenvio de falhas: {resumo}")
        return resumo
