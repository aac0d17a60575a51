from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from pixcheckout.api.auth.auth_repo import AuthRepository
from pixcheckout.api.auth.schema_auth import LoginRequest, TokenResponse
from pixcheckout.api.seguranca.services.service_seguranca import SegurancaService
from pixcheckout.api.usuarios.models.model_usuario import UserModel
from pixcheckout.api.usuarios.schemas.schema_usuario import UserResponse
from pixcheckout.core.admin_dependencies import get_current_user, get_client_ip
from pixcheckout.core.security import verify_password, create_access_token, ACCESS_TOKEN_EXPIRE_MINUTES
from pixcheckout.database.db_connection import get_db
from pixcheckout.utils.logger import logger

router = APIRouter(tags=["auth"], prefix="/api/auth")


@router.post("/token", response_model=TokenResponse)
def login_usuario(
    payload: LoginRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    ip = get_client_ip(request)
    seguranca = SegurancaService(db)
    seguranca.garantir_ip_liberado(ip)

    # 1. Busca usuário no banco
    user = AuthRepository(db).get_user_by_username(payload.username)
    sucesso = bool(user and verify_password(payload.password, user.hashed_password))
    seguranca.registrar_tentativa_login(
        username=payload.username,
        ip=ip,
        sucesso=sucesso,
        user_agent=request.headers.get("user-agent"),
    )
    if not sucesso:
        logger.warning(f"[AUTH] Falha de login username={payload.username} ip={ip}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Credenciais inválidas",
            headers={"WWW-Authenticate": "Bearer"}
        )

    # 2. Gera JWT
    access_token = create_access_token(
        data={"sub": str(user.id)},
        expires_delta=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )

    return TokenResponse(
        type_user=user.type_user,
        access_token=access_token,
        token_type="Bearer",
    )


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Retorna o usuário atual baseado no token JWT"
)
def obter_usuario_atual(
    current_user: UserModel = Depends(get_current_user),
):
    """Puxa o usuário já autenticado pelo get_current_user e devolve seus campos."""
    return current_user
