from typing import Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from pixcheckout.api.cadastros.models.model_cliente import ClienteModel


class ClienteRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, id_: int) -> ClienteModel | None:
        return self.db.query(ClienteModel).filter(ClienteModel.id == id_).first()

    def get_by_email(self, email: str) -> ClienteModel | None:
        return (
            self.db.query(ClienteModel)
            .filter(func.lower(ClienteModel.email) == email.strip().lower())
            .first()
        )

    def list(self, busca: Optional[str] = None, skip: int = 0, limit: int = 100):
        query = self.db.query(ClienteModel)
        if busca:
            termo = f"%{busca}%"
            query = query.filter(
                or_(
                    ClienteModel.name.ilike(termo),
                    ClienteModel.email.ilike(termo),
                    ClienteModel.cpf.ilike(termo),
                )
            )
        return query.order_by(ClienteModel.created_at.desc(), ClienteModel.id.desc()).offset(skip).limit(limit).all()

    def add(self, obj: ClienteModel) -> ClienteModel:
        self.db.add(obj)
        self.db.flush()
        return obj
