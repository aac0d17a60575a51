# pixcheckout/core/admin_dependencies.py

from fastapi import Depends, HTTPException, status, Request
from jose import JWTError
from sqlalchemy.orm import Session

from pixcheckout.api.usuarios.models.model_usuario import UserModel
from pixcheckout.api.auth.auth_repo import AuthRepository
from pixcheckout.config.settings import TRUSTED_PROXIES
from pixcheckout.core.security import decode_access_token
from pixcheckout.database.db_connection import get_db
from pixcheckout.utils.logger import logger

credentials_exception = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Não autenticado",
    headers={"WWW-Authenticate": "Bearer"},
)

forbidden_exception = HTTPException(
    status_code=status.HTTP_403_FORBIDDEN,
    detail="Você não tem permissão para acessar este recurso",
)


def usuario_por_token(db: Session, access_token: str) -> UserModel:
    """Decodifica o JWT e busca o usuário correspondente."""
    try:
        payload = decode_access_token(access_token)
        raw_sub = payload.get("sub")
        if raw_sub is None:
            raise credentials_exception
        user_id = int(raw_sub)
    except (JWTError, ValueError) as e:
        logger.error(f"[AUTH] Erro ao decodificar JWT: {e}")
        raise credentials_exception

    user = AuthRepository(db).get_user_by_id(user_id)
    if not user:
        raise credentials_exception
    return user


def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
) -> UserModel:
    """
    Recupera o usuário autenticado a partir do header Authorization (Bearer <token>).
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        logger.warning("[AUTH] Cabeçalho Authorization ausente ou malformado.")
        raise credentials_exception

    return usuario_por_token(db, auth_header.replace("Bearer ", "", 1))


def require_admin(current_user: UserModel = Depends(get_current_user)) -> UserModel:
    """
    Atalho para rotas que só podem ser acessadas por usuários type_user='admin'.
    """
    if current_user.type_user != "admin":
        logger.warning(
            "[AUTH] Acesso negado. type_user=%s tentou acessar rota admin.",
            current_user.type_user,
        )
        raise forbidden_exception
    return current_user


def get_client_ip(request: Request) -> str:
    """
    IP do cliente. X-Forwarded-For só vale quando a conexão vem de um proxy em
    TRUSTED_PROXIES; a lista é lida da direita e o primeiro IP fora dos proxies é o cliente.
    """
    peer = request.client.host if request.client else "unknown"
    forwarded = request.headers.get("x-forwarded-for")
    if peer not in TRUSTED_PROXIES or not forwarded:
        return peer

    cadeia = [ip.strip() for ip in forwarded.split(",") if ip.strip()]
    for ip in reversed(cadeia):
        if ip not in TRUSTED_PROXIES:
            return ip
    return cadeia[0] if cadeia else peer
