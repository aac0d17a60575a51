from typing import List

from sqlalchemy.orm import Session

from pixcheckout.api.usuarios.models.model_usuario import UserModel


class UsuarioRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: int) -> UserModel | None:
        return self.db.query(UserModel).filter(UserModel.id == user_id).first()

    def get_by_username(self, username: str) -> UserModel | None:
        return self.db.query(UserModel).filter(UserModel.username == username).first()

    def list(self, skip: int = 0, limit: int = 100) -> List[UserModel]:
        return self.db.query(UserModel).order_by(UserModel.id).offset(skip).limit(limit).all()

    def create(self, obj: UserModel) -> UserModel:
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        return obj

    def update(self, obj: UserModel) -> UserModel:
        self.db.commit()
        self.db.refresh(obj)
        return obj

    def delete(self, obj: UserModel):
        self.db.delete(obj)
        self.db.commit()
