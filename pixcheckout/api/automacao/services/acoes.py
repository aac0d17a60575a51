from typing import Any, Dict, Optional

import httpx
from fastapi.encoders import jsonable_encoder
from sqlalchemy.orm import Session

from pixcheckout.api.automacao.services.condicoes import achatar, obter_valor
from pixcheckout.api.notificacoes.services.service_email import EmailService
from pixcheckout.api.notificacoes.services.service_notificacao import NotificacoesService
from pixcheckout.api.notificacoes.services.service_whatsapp import WhatsappService, renderizar_mensagem
from pixcheckout.utils.logger import logger

WEBHOOK_TIMEOUT_SECONDS = 10


class ExecutorAcoes:
    """Executa as ações de regras e workflows; cada ação devolve {success, error?}."""

    def __init__(self, db: Session, http_transport: Optional[httpx.AsyncBaseTransport] = None):
        self.db = db
        self.http_transport = http_transport

    async def executar(self, acao: Dict[str, Any], contexto: Dict[str, Any]) -> Dict[str, Any]:
        tipo = acao.get("type")
        config = acao.get("config") or {}
        handler = getattr(self, f"_acao_{tipo}", None)
        if handler is None:
            return {"type": tipo, "success": False, "error": f"Ação desconhecida: {tipo}"}
        try:
            resultado = await handler(config, contexto)
        except Exception as e:
            logger.error(f"[Automacao] Ação {tipo} falhou: {e}")
            return {"type": tipo, "success": False, "error": str(e)}
        return {"type": tipo, **resultado}

    @staticmethod
    def _texto(modelo: Optional[str], contexto: Dict[str, Any]) -> str:
        return renderizar_mensagem(modelo or "", achatar(contexto))

    async def _acao_notification(self, config, contexto):
        NotificacoesService(self.db).criar(
            tipo=config.get("notification_type", "system"),
            titulo=self._texto(config.get("title"), contexto) or "Automação",
            conteudo=self._texto(config.get("content"), contexto),
            dados=jsonable_encoder(contexto),
        )
        return {"success": True}

    async def _acao_email(self, config, contexto):
        destino = self._texto(config.get("to"), contexto) or obter_valor(contexto, "customer.email")
        if not destino:
            return {"success": False, "error": "Destinatário não informado"}
        dados = {**achatar(contexto), **(config.get("data") or {})}
        resultado = await EmailService(self.db).enviar(destino, config.get("template", ""), dados)
        return {"success": resultado.success, **({} if resultado.success else {"error": resultado.message})}

    async def _acao_whatsapp(self, config, contexto):
        destino = self._texto(config.get("to"), contexto) or obter_valor(contexto, "customer.phone")
        if not destino:
            return {"success": False, "error": "Telefone não informado"}
        dados = {**achatar(contexto), **(config.get("data") or {})}
        resultado = await WhatsappService(self.db).enviar(destino, config.get("template", ""), dados)
        return {"success": resultado.success, **({} if resultado.success else {"error": resultado.message})}

    async def _acao_webhook(self, config, contexto):
        url = config.get("url")
        if not url:
            return {"success": False, "error": "URL do webhook não informada"}
        payload = {"event": contexto.get("event"), "data": jsonable_encoder(contexto)}
        async with httpx.AsyncClient(timeout=WEBHOOK_TIMEOUT_SECONDS, transport=self.http_transport) as client:
            resp = await client.post(url, json=payload, headers=config.get("headers") or {})
        if resp.is_success:
            return {"success": True, "status_code": resp.status_code}
        return {"success": False, "status_code": resp.status_code, "error": f"HTTP {resp.status_code}"}
