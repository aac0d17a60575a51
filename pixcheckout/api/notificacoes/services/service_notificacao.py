from typing import Any, Dict, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from pixcheckout.api.notificacoes.core.websocket_manager import publicar_apos_commit
from pixcheckout.api.notificacoes.models.model_notificacao import NotificacaoModel
from pixcheckout.api.notificacoes.repositories.repo_notificacao import NotificacaoRepository
from pixcheckout.api.notificacoes.schemas.schema_notificacao import NotificacaoOut
from pixcheckout.utils.logger import logger

TIPOS = {"order_status", "payment", "system"}


class NotificacoesService:
    """Notificações in-app do painel, com push em tempo real via WebSocket."""

    def __init__(self, db: Session):
        self.db = db
        self.repo = NotificacaoRepository(db)

    def criar(
        self,
        tipo: str,
        titulo: str,
        conteudo: str,
        dados: Optional[Dict[str, Any]] = None,
        usuario_id: Optional[int] = None,
    ) -> NotificacaoModel:
        if tipo not in TIPOS:
            raise ValueError(f"Tipo de notificação inválido: {tipo}")

        notificacao = self.repo.add(
            NotificacaoModel(
                type=tipo,
                title=titulo,
                content=conteudo,
                data=dados,
                user_id=usuario_id,
                read=False,
            )
        )
        publicar_apos_commit(
            self.db,
            {"event": "notification", "data": NotificacaoOut.model_validate(notificacao).model_dump(mode="json")},
            user_id=usuario_id,
        )
        logger.info(f"[Notificacoes] {tipo}: {titulo}")
        return notificacao

    def listar(self, usuario_id: Optional[int] = None, apenas_nao_lidas: bool = False, limit: int = 50):
        return self.repo.list(usuario_id=usuario_id, apenas_nao_lidas=apenas_nao_lidas, limit=limit)

    def contar_nao_lidas(self, usuario_id: Optional[int] = None) -> int:
        return self.repo.contar_nao_lidas(usuario_id)

    def _get(self, notificacao_id: int, usuario_id: Optional[int]) -> NotificacaoModel:
        notificacao = self.repo.get(notificacao_id, usuario_id)
        if not notificacao:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Notificação não encontrada")
        return notificacao

    def marcar_lida(self, notificacao_id: int, usuario_id: Optional[int] = None) -> NotificacaoModel:
        notificacao = self._get(notificacao_id, usuario_id)
        notificacao.read = True
        self.db.flush()
        return notificacao

    def marcar_todas_lidas(self, usuario_id: Optional[int] = None) -> int:
        return self.repo.marcar_todas_lidas(usuario_id)

    def deletar(self, notificacao_id: int, usuario_id: Optional[int] = None):
        self.repo.delete(self._get(notificacao_id, usuario_id))
