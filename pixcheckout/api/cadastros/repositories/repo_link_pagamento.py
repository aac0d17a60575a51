from sqlalchemy.orm import Session, joinedload

from pixcheckout.api.cadastros.models.model_link_pagamento import LinkPagamentoModel


class LinkPagamentoRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, id_: int) -> LinkPagamentoModel | None:
        return self.db.query(LinkPagamentoModel).filter(LinkPagamentoModel.id == id_).first()

    def get_by_token(self, token: str) -> LinkPagamentoModel | None:
        return (
            self.db.query(LinkPagamentoModel)
            .options(joinedload(LinkPagamentoModel.product))
            .filter(LinkPagamentoModel.url_token == token)
            .first()
        )

    def list(self, status: str | None = None):
        query = self.db.query(LinkPagamentoModel)
        if status:
            query = query.filter(LinkPagamentoModel.status == status)
        return query.order_by(LinkPagamentoModel.created_at.desc(), LinkPagamentoModel.id.desc()).all()

    def create(self, obj: LinkPagamentoModel) -> LinkPagamentoModel:
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        return obj
