from typing import Optional

from sqlalchemy.orm import Session

from pixcheckout.api.cadastros.models.model_produto import ProdutoModel


class ProdutoRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, id_: int) -> ProdutoModel | None:
        return self.db.query(ProdutoModel).filter(ProdutoModel.id == id_).first()

    def get_ativo(self, id_: int) -> ProdutoModel | None:
        return (
            self.db.query(ProdutoModel)
            .filter(ProdutoModel.id == id_, ProdutoModel.active.is_(True))
            .first()
        )

    def list(self, ativo: Optional[bool] = None, tipo: Optional[str] = None, busca: Optional[str] = None):
        query = self.db.query(ProdutoModel)
        if ativo is not None:
            query = query.filter(ProdutoModel.active.is_(ativo))
        if tipo:
            query = query.filter(ProdutoModel.type == tipo)
        if busca:
            query = query.filter(ProdutoModel.name.ilike(f"%{busca}%"))
        return query.order_by(ProdutoModel.name).all()

    def create(self, obj: ProdutoModel) -> ProdutoModel:
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        return obj

    def update(self, obj: ProdutoModel) -> ProdutoModel:
        self.db.commit()
        self.db.refresh(obj)
        return obj

    def delete(self, obj: ProdutoModel):
        self.db.delete(obj)
        self.db.commit()
