from datetime import datetime
from typing import Any, Optional

from fastapi.encoders import jsonable_encoder
from sqlalchemy.orm import Session

from pixcheckout.api.auditoria.models.model_auditoria import AuditoriaModel
from pixcheckout.api.notificacoes.services.service_notificacao import NotificacoesService
from pixcheckout.utils.logger import logger

ACOES = {"INSERT", "UPDATE", "DELETE"}


class AuditoriaService:
    def __init__(self, db: Session):
        self.db = db

    def registrar(
        self,
        tabela: str,
        registro_id: Optional[str],
        acao: str,
        dados_antigos: Optional[dict] = None,
        dados_novos: Optional[dict] = None,
        usuario_id: Optional[int] = None,
    ) -> AuditoriaModel:
        acao = acao.upper()
        if acao not in ACOES:
            raise ValueError(f"Ação de auditoria inválida: {acao}")

        registro = AuditoriaModel(
            table_name=tabela,
            record_id=str(registro_id) if registro_id is not None else None,
            action=acao,
            old_data=jsonable_encoder(dados_antigos) if dados_antigos is not None else None,
            new_data=jsonable_encoder(dados_novos) if dados_novos is not None else None,
            user_id=usuario_id,
        )
        self.db.add(registro)
        self.db.flush()

        status_antigo = (dados_antigos or {}).get("status")
        status_novo = (dados_novos or {}).get("status")
        if tabela == "orders" and acao == "UPDATE" and status_antigo != status_novo:
            NotificacoesService(self.db).criar(
                tipo="order_status",
                titulo="Status do Pedido Atualizado",
                conteudo=f"O pedido #{registro_id} mudou de {status_antigo} para {status_novo}",
                dados={"order_id": registro_id, "old_status": status_antigo, "new_status": status_novo},
            )

        logger.info(f"[Auditoria] {acao} em {tabela} id={registro_id} usuario={usuario_id}")
        return registro

    def listar(
        self,
        tabela: Optional[str] = None,
        acao: Optional[str] = None,
        usuario_id: Optional[int] = None,
        inicio: Optional[datetime] = None,
        fim: Optional[datetime] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> list[AuditoriaModel]:
        query = self.db.query(AuditoriaModel)
        if tabela:
            query = query.filter(AuditoriaModel.table_name == tabela)
        if acao:
            query = query.filter(AuditoriaModel.action == acao.upper())
        if usuario_id is not None:
            query = query.filter(AuditoriaModel.user_id == usuario_id)
        if inicio:
            query = query.filter(AuditoriaModel.created_at >= inicio)
        if fim:
            query = query.filter(AuditoriaModel.created_at <= fim)
        return (
            query.order_by(AuditoriaModel.created_at.desc(), AuditoriaModel.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )
