from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from pixcheckout.api.acessos.schemas.schema_acesso import (
    LogAcessoOut,
    RegistrarAcessoRequest,
    RejeitarAcessoRequest,
    SolicitacaoAcessoOut,
    SolicitarAcessoRequest,
    StatusSolicitacao,
)
from pixcheckout.api.acessos.services.service_acesso import AcessosService
from pixcheckout.api.usuarios.models.model_usuario import UserModel
from pixcheckout.core.admin_dependencies import get_client_ip, get_current_user
from pixcheckout.database.db_connection import get_db

router = APIRouter(
    prefix="/api/acessos/admin",
    tags=["Admin - Acessos"],
    dependencies=[Depends(get_current_user)],
)

# Router público (cliente solicita e registra acessos)
router_public = APIRouter(prefix="/api/acessos", tags=["Public - Acessos"])


@router_public.post("/solicitacoes", response_model=SolicitacaoAcessoOut, status_code=status.HTTP_201_CREATED)
async def solicitar_acesso(payload: SolicitarAcessoRequest, db: Session = Depends(get_db)):
    return await AcessosService(db).solicitar_acesso(payload.order_id, payload.customer_id)


@router_public.post("/solicitacoes/{id}/registros", response_model=LogAcessoOut, status_code=status.HTTP_201_CREATED)
def registrar_acesso(id: int, payload: RegistrarAcessoRequest, request: Request, db: Session = Depends(get_db)):
    return AcessosService(db).registrar_acesso(
        id,
        payload.file_id,
        payload.action,
        ip=get_client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )


@router.get("/solicitacoes", response_model=List[SolicitacaoAcessoOut])
def listar_solicitacoes(
    status_filtro: Optional[StatusSolicitacao] = Query(None, alias="status"),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
):
    return AcessosService(db).listar(status_filtro, limit)


@router.post("/solicitacoes/{id}/aprovar", response_model=SolicitacaoAcessoOut)
async def aprovar_solicitacao(
    id: int,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    return await AcessosService(db).aprovar(id, usuario_id=current_user.id)


@router.post("/solicitacoes/{id}/rejeitar", response_model=SolicitacaoAcessoOut)
async def rejeitar_solicitacao(id: int, payload: RejeitarAcessoRequest, db: Session = Depends(get_db)):
    return await AcessosService(db).rejeitar(id, payload.motivo)


@router.get("/logs", response_model=List[LogAcessoOut])
def listar_logs(
    solicitacao_id: Optional[int] = Query(None),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
):
    return AcessosService(db).listar_logs(solicitacao_id, limit)
