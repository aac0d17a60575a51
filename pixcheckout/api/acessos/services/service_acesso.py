from datetime import timedelta
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from pixcheckout.api.acessos.models.model_acesso import LogAcessoModel, SolicitacaoAcessoModel
from pixcheckout.api.notificacoes.services.service_email import EmailService
from pixcheckout.api.notificacoes.services.service_whatsapp import WhatsappService
from pixcheckout.api.pedidos.models.model_pedido import PedidoModel
from pixcheckout.api.storage.models.model_arquivo import ArquivoModel
from pixcheckout.utils.database_utils import now_trimmed, as_aware
from pixcheckout.utils.logger import logger

VALIDADE_ACESSO_DIAS = 30


class AcessosService:
    def __init__(self, db: Session):
        self.db = db

    def get(self, solicitacao_id: int) -> SolicitacaoAcessoModel:
        solicitacao = (
            self.db.query(SolicitacaoAcessoModel)
            .filter(SolicitacaoAcessoModel.id == solicitacao_id)
            .first()
        )
        if not solicitacao:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Solicitação de acesso não encontrada")
        return solicitacao

    def listar(self, status_filtro: Optional[str] = None, limit: int = 100):
        q = self.db.query(SolicitacaoAcessoModel)
        if status_filtro:
            q = q.filter(SolicitacaoAcessoModel.status == status_filtro)
        return q.order_by(SolicitacaoAcessoModel.id.desc()).limit(limit).all()

    def listar_logs(self, solicitacao_id: Optional[int] = None, limit: int = 100):
        q = self.db.query(LogAcessoModel)
        if solicitacao_id:
            q = q.filter(LogAcessoModel.request_id == solicitacao_id)
        return q.order_by(LogAcessoModel.id.desc()).limit(limit).all()

    async def solicitar_acesso(self, pedido_id: int, cliente_id: int) -> SolicitacaoAcessoModel:
        pedido = self.db.query(PedidoModel).filter(PedidoModel.id == pedido_id).first()
        if not pedido or pedido.customer_id != cliente_id:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Pedido não encontrado para este cliente")

        existente = (
            self.db.query(SolicitacaoAcessoModel)
            .filter(
                SolicitacaoAcessoModel.order_id == pedido_id,
                SolicitacaoAcessoModel.customer_id == cliente_id,
            )
            .first()
        )
        if existente:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, "Já existe uma solicitação pendente")

        solicitacao = SolicitacaoAcessoModel(order_id=pedido_id, customer_id=cliente_id, status="pending", meta={})
        self.db.add(solicitacao)
        self.db.flush()
        logger.info(f"[Acessos] Solicitação {solicitacao.id} criada pedido={pedido_id} cliente={cliente_id}")

        await WhatsappService(self.db).notificar_pedido(pedido, "access_request")
        return solicitacao

    def _pendente(self, solicitacao_id: int) -> SolicitacaoAcessoModel:
        solicitacao = self.get(solicitacao_id)
        if solicitacao.status != "pending":
            raise HTTPException(status.HTTP_409_CONFLICT, "Solicitação já foi processada")
        return solicitacao

    async def aprovar(self, solicitacao_id: int, usuario_id: Optional[int] = None) -> SolicitacaoAcessoModel:
        solicitacao = self._pendente(solicitacao_id)
        agora = now_trimmed()
        solicitacao.status = "approved"
        solicitacao.approved_at = agora
        solicitacao.approved_by = usuario_id
        solicitacao.expires_at = agora + timedelta(days=VALIDADE_ACESSO_DIAS)
        self.db.flush()
        logger.info(f"[Acessos] Solicitação {solicitacao.id} aprovada por usuario={usuario_id}")

        pedido = solicitacao.order
        validade = solicitacao.expires_at.strftime("%d/%m/%Y")
        await WhatsappService(self.db).notificar_pedido(pedido, "access_approved", {"expires_at": validade})
        await EmailService(self.db).notificar_pedido(pedido, "access_granted", {"expiresAt": solicitacao.expires_at})
        return solicitacao

    async def rejeitar(self, solicitacao_id: int, motivo: str) -> SolicitacaoAcessoModel:
        solicitacao = self._pendente(solicitacao_id)
        solicitacao.status = "rejected"
        solicitacao.meta = {**(solicitacao.meta or {}), "reason": motivo}
        self.db.flush()
        logger.info(f"[Acessos] Solicitação {solicitacao.id} rejeitada: {motivo}")

        await WhatsappService(self.db).notificar_pedido(solicitacao.order, "access_rejected", {"reason": motivo})
        return solicitacao

    def registrar_acesso(
        self,
        solicitacao_id: int,
        arquivo_id: int,
        acao: str,
        ip: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> LogAcessoModel:
        """Só solicitações aprovadas e dentro da validade podem acessar arquivos."""
        solicitacao = self.get(solicitacao_id)
        if solicitacao.status != "approved":
            raise HTTPException(status.HTTP_403_FORBIDDEN, "Acesso não aprovado")
        if solicitacao.expires_at and as_aware(solicitacao.expires_at) < now_trimmed():
            raise HTTPException(status.HTTP_403_FORBIDDEN, "Acesso expirado")
        if not self.db.query(ArquivoModel.id).filter(ArquivoModel.id == arquivo_id).first():
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Arquivo não encontrado")

        log = LogAcessoModel(
            request_id=solicitacao.id,
            file_id=arquivo_id,
            action=acao,
            ip_address=ip,
            user_agent=user_agent,
        )
        self.db.add(log)
        self.db.flush()
        return log
