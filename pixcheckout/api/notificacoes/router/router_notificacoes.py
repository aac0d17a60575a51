from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, WebSocket, WebSocketDisconnect, status
from sqlalchemy.orm import Session

from pixcheckout.api.notificacoes.core.websocket_manager import websocket_manager
from pixcheckout.api.notificacoes.schemas.schema_notificacao import (
    EmailLogOut,
    EnviarEmailRequest,
    EnviarWhatsappRequest,
    NotificacaoCreate,
    NotificacaoOut,
    ReenvioResumo,
    WhatsappLogOut,
)
from pixcheckout.api.notificacoes.repositories.repo_notificacao import NotificacaoRepository
from pixcheckout.api.notificacoes.services.service_email import EmailService
from pixcheckout.api.notificacoes.services.service_notificacao import NotificacoesService
from pixcheckout.api.notificacoes.services.service_whatsapp import WhatsappService
from pixcheckout.api.usuarios.models.model_usuario import UserModel
from pixcheckout.core.admin_dependencies import get_current_user, usuario_por_token
from pixcheckout.database.db_connection import get_db
from pixcheckout.utils.logger import logger

router = APIRouter(
    prefix="/api/notificacoes/admin",
    tags=["Admin - Notificacoes"],
    dependencies=[Depends(get_current_user)],
)

router_ws = APIRouter(prefix="/api/notificacoes", tags=["Realtime"])


# ---------------- IN-APP ----------------
@router.get("", response_model=List[NotificacaoOut])
def listar_notificacoes(
    nao_lidas: bool = Query(False),
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    return NotificacoesService(db).listar(usuario_id=current_user.id, apenas_nao_lidas=nao_lidas, limit=limit)


@router.get("/nao-lidas/total")
def total_nao_lidas(
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    return {"total": NotificacoesService(db).contar_nao_lidas(current_user.id)}


@router.post("", response_model=NotificacaoOut, status_code=201)
def criar_notificacao(data: NotificacaoCreate, db: Session = Depends(get_db)):
    return NotificacoesService(db).criar(
        tipo=data.type,
        titulo=data.title,
        conteudo=data.content,
        dados=data.data,
        usuario_id=data.user_id,
    )


@router.put("/{id}/lida", response_model=NotificacaoOut)
def marcar_lida(
    id: int,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    return NotificacoesService(db).marcar_lida(id, current_user.id)


@router.put("/lidas/todas")
def marcar_todas_lidas(
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    return {"atualizadas": NotificacoesService(db).marcar_todas_lidas(current_user.id)}


@router.delete("/{id}", status_code=204)
def deletar_notificacao(
    id: int,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    NotificacoesService(db).deletar(id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ---------------- E-MAIL ----------------
@router.post("/email/enviar")
async def enviar_email(data: EnviarEmailRequest, db: Session = Depends(get_db)):
    resultado = await EmailService(db).enviar(data.to, data.template, data.data)
    return {"success": resultado.success, "error": None if resultado.success else resultado.message}


@router.get("/email/logs", response_model=List[EmailLogOut])
def listar_email_logs(
    status_envio: Optional[str] = Query(None, alias="status"),
    template: Optional[str] = Query(None),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
):
    return NotificacaoRepository(db).list_email_logs(status=status_envio, template=template, limit=limit)


# ---------------- WHATSAPP ----------------
@router.post("/whatsapp/enviar")
async def enviar_whatsapp(data: EnviarWhatsappRequest, db: Session = Depends(get_db)):
    resultado = await WhatsappService(db).enviar(data.to, data.template, data.data)
    return {
        "success": resultado.success,
        "message_id": resultado.external_id,
        "error": None if resultado.success else resultado.message,
    }


@router.get("/whatsapp/logs", response_model=List[WhatsappLogOut])
def listar_whatsapp_logs(
    status_envio: Optional[str] = Query(None, alias="status"),
    inicio: Optional[datetime] = Query(None),
    fim: Optional[datetime] = Query(None),
    telefone: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    return WhatsappService(db).listar_logs(status=status_envio, inicio=inicio, fim=fim, telefone=telefone)


@router.post("/whatsapp/reenviar-falhas", response_model=ReenvioResumo)
async def reenviar_falhas(db: Session = Depends(get_db)):
    return await WhatsappService(db).reenviar_falhas()


# ---------------- REALTIME ----------------
@router_ws.websocket("/ws")
async def websocket_notificacoes(
    websocket: WebSocket,
    token: str = Query(...),
    db: Session = Depends(get_db),
):
    """Canal realtime do painel: notificações e atualizações de pedidos."""
    try:
        user = usuario_por_token(db, token)
    except HTTPException:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket_manager.connect(websocket, str(user.id))
    try:
        while True:
            mensagem = await websocket.receive_text()
            if mensagem == "ping":
                await websocket.send_text("pong")
    except WebSocketDisconnect:
        pass
    except Exception as e:
        logger.error(f"[Realtime] Erro na conexão do usuário {user.id}: {e}")
    finally:
        websocket_manager.disconnect(websocket)
