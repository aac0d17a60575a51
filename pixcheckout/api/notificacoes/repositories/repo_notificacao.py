from datetime import datetime
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from pixcheckout.api.notificacoes.models.model_notificacao import (
    NotificacaoModel,
    EmailLogModel,
    WhatsappLogModel,
)


class NotificacaoRepository:
    def __init__(self, db: Session):
        self.db = db

    # ---------------- IN-APP ----------------
    def add(self, obj: NotificacaoModel) -> NotificacaoModel:
        self.db.add(obj)
        self.db.flush()
        return obj

    def _visiveis(self, usuario_id: Optional[int]):
        query = self.db.query(NotificacaoModel)
        if usuario_id is not None:
            query = query.filter(
                or_(NotificacaoModel.user_id.is_(None), NotificacaoModel.user_id == usuario_id)
            )
        return query

    def get(self, notificacao_id: int, usuario_id: Optional[int] = None) -> NotificacaoModel | None:
        return self._visiveis(usuario_id).filter(NotificacaoModel.id == notificacao_id).first()

    def list(self, usuario_id: Optional[int] = None, apenas_nao_lidas: bool = False, limit: int = 50):
        query = self._visiveis(usuario_id)
        if apenas_nao_lidas:
            query = query.filter(NotificacaoModel.read.is_(False))
        return query.order_by(NotificacaoModel.created_at.desc(), NotificacaoModel.id.desc()).limit(limit).all()

    def contar_nao_lidas(self, usuario_id: Optional[int] = None) -> int:
        return self._visiveis(usuario_id).filter(NotificacaoModel.read.is_(False)).count()

    def marcar_todas_lidas(self, usuario_id: Optional[int] = None) -> int:
        ids = [n.id for n in self._visiveis(usuario_id).filter(NotificacaoModel.read.is_(False)).all()]
        if not ids:
            return 0
        return (
            self.db.query(NotificacaoModel)
            .filter(NotificacaoModel.id.in_(ids))
            .update({NotificacaoModel.read: True}, synchronize_session=False)
        )

    def delete(self, obj: NotificacaoModel):
        self.db.delete(obj)
        self.db.flush()

    # ---------------- LOGS DE ENVIO ----------------
    def add_email_log(self, obj: EmailLogModel) -> EmailLogModel:
        self.db.add(obj)
        self.db.flush()
        return obj

    def add_whatsapp_log(self, obj: WhatsappLogModel) -> WhatsappLogModel:
        self.db.add(obj)
        self.db.flush()
        return obj

    def list_email_logs(self, status: Optional[str] = None, template: Optional[str] = None, limit: int = 100):
        query = self.db.query(EmailLogModel)
        if status:
            query = query.filter(EmailLogModel.status == status)
        if template:
            query = query.filter(EmailLogModel.template == template)
        return query.order_by(EmailLogModel.created_at.desc(), EmailLogModel.id.desc()).limit(limit).all()

    def list_whatsapp_logs(
        self,
        status: Optional[str] = None,
        inicio: Optional[datetime] = None,
        fim: Optional[datetime] = None,
        telefone: Optional[str] = None,
    ):
        query = self.db.query(WhatsappLogModel)
        if status:
            query = query.filter(WhatsappLogModel.status == status)
        if inicio:
            query = query.filter(WhatsappLogModel.created_at >= inicio)
        if fim:
            query = query.filter(WhatsappLogModel.created_at <= fim)
        if telefone:
            query = query.filter(WhatsappLogModel.to_phone.ilike(f"%{telefone}%"))
        return query.order_by(WhatsappLogModel.created_at.desc(), WhatsappLogModel.id.desc()).all()
