from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from pixcheckout.api.usuarios.models.model_usuario import UserModel
from pixcheckout.api.usuarios.repositories.repo_usuario import UsuarioRepository
from pixcheckout.api.usuarios.schemas.schema_usuario import UserCreate, UserUpdate
from pixcheckout.core.security import hash_password
from pixcheckout.utils.logger import logger


class UserService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = UsuarioRepository(db)

    def create_user(self, data: UserCreate) -> UserModel:
        if self.repo.get_by_username(data.username):
            raise HTTPException(status.HTTP_400_BAD_REQUEST, "Usuário já cadastrado")
        user = UserModel(
            username=data.username,
            type_user=data.type_user,
            hashed_password=hash_password(data.password),
        )
        self.repo.create(user)
        logger.info(f"[Usuarios] Usuário criado id={user.id} username={user.username}")
        return user

    def list_users(self, skip: int = 0, limit: int = 100) -> list[UserModel]:
        return self.repo.list(skip, limit)

    def get_user(self, user_id: int) -> UserModel:
        user = self.repo.get(user_id)
        if not user:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Usuário não encontrado")
        return user

    def update_user(self, user_id: int, data: UserUpdate) -> UserModel:
        user = self.get_user(user_id)
        payload = data.model_dump(exclude_none=True)

        novo_username = payload.get("username")
        if novo_username and novo_username != user.username and self.repo.get_by_username(novo_username):
            raise HTTPException(status.HTTP_400_BAD_REQUEST, "Usuário já cadastrado")

        password = payload.pop("password", None)
        if password:
            user.hashed_password = hash_password(password)
        for key, value in payload.items():
            setattr(user, key, value)
        return self.repo.update(user)

    def delete_user(self, user_id: int, actor: UserModel | None = None):
        user = self.get_user(user_id)
        if actor is not None and actor.id == user.id:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, "Não é possível remover o próprio usuário")
        self.repo.delete(user)
        logger.info(f"[Usuarios] Usuário removido id={user_id}")

    def garantir_admin_inicial(self, username: str | None, password: str | None) -> UserModel | None:
        """Cria o administrador inicial quando configurado e inexistente."""
        if not username or not password:
            return None
        existente = self.repo.get_by_username(username)
        if existente:
            return existente
        user = UserModel(username=username, type_user="admin", hashed_password=hash_password(password))
        self.repo.create(user)
        logger.info(f"[Usuarios] Administrador inicial criado: {username}")
        return user
