from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from pixcheckout.api.relatorios.schemas.schema_relatorio import (
    AgendamentoCreate,
    AgendamentoOut,
    AgendamentoUpdate,
    FormatoRelatorio,
    RelatorioLogOut,
    TipoRelatorio,
)
from pixcheckout.api.relatorios.services.service_relatorio import RelatoriosService
from pixcheckout.api.usuarios.models.model_usuario import UserModel
from pixcheckout.core.admin_dependencies import get_current_user
from pixcheckout.database.db_connection import get_db
from pixcheckout.utils.database_utils import now_trimmed

router = APIRouter(
    prefix="/api/relatorios/admin",
    tags=["Admin - Relatórios"],
    dependencies=[Depends(get_current_user)],
)


def get_relatorios_service(db: Session = Depends(get_db)) -> RelatoriosService:
    return RelatoriosService(db)


def _periodo(inicio: Optional[datetime], fim: Optional[datetime]):
    fim = fim or now_trimmed()
    inicio = inicio or fim - timedelta(days=30)
    return inicio, fim


@router.get("/gerar")
def gerar_relatorio(
    tipo: TipoRelatorio = Query(...),
    formato: FormatoRelatorio = Query("pdf"),
    inicio: Optional[datetime] = Query(None),
    fim: Optional[datetime] = Query(None),
    svc: RelatoriosService = Depends(get_relatorios_service),
):
    nome, conteudo, media_type = svc.gerar(tipo, formato, *_periodo(inicio, fim))
    return Response(
        content=conteudo,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{nome}"'},
    )


@router.get("/dados", response_model=Dict[str, Any])
def dados_relatorio(
    tipo: TipoRelatorio = Query(...),
    inicio: Optional[datetime] = Query(None),
    fim: Optional[datetime] = Query(None),
    svc: RelatoriosService = Depends(get_relatorios_service),
):
    return svc.dados_relatorio(tipo, *_periodo(inicio, fim))


# ---------------- AGENDAMENTOS ----------------
@router.get("/agendamentos", response_model=List[AgendamentoOut])
def listar_agendamentos(svc: RelatoriosService = Depends(get_relatorios_service)):
    return svc.listar_agendamentos()


@router.post("/agendamentos", response_model=AgendamentoOut, status_code=status.HTTP_201_CREATED)
def criar_agendamento(
    payload: AgendamentoCreate,
    svc: RelatoriosService = Depends(get_relatorios_service),
    current_user: UserModel = Depends(get_current_user),
):
    return svc.criar_agendamento(payload, usuario_id=current_user.id)


@router.get("/agendamentos/{agendamento_id}", response_model=AgendamentoOut)
def obter_agendamento(agendamento_id: int, svc: RelatoriosService = Depends(get_relatorios_service)):
    return svc.get_agendamento(agendamento_id)


@router.put("/agendamentos/{agendamento_id}", response_model=AgendamentoOut)
def atualizar_agendamento(
    agendamento_id: int,
    payload: AgendamentoUpdate,
    svc: RelatoriosService = Depends(get_relatorios_service),
):
    return svc.atualizar_agendamento(agendamento_id, payload)


@router.delete("/agendamentos/{agendamento_id}", status_code=status.HTTP_204_NO_CONTENT)
def remover_agendamento(agendamento_id: int, svc: RelatoriosService = Depends(get_relatorios_service)):
    svc.remover_agendamento(agendamento_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/agendamentos/{agendamento_id}/executar", response_model=RelatorioLogOut)
async def executar_agendamento(agendamento_id: int, svc: RelatoriosService = Depends(get_relatorios_service)):
    return await svc.executar_agendamento(agendamento_id)


@router.get("/logs", response_model=List[RelatorioLogOut])
def listar_logs(
    schedule_id: Optional[int] = Query(None),
    limit: int = Query(100, ge=1, le=500),
    svc: RelatoriosService = Depends(get_relatorios_service),
):
    return svc.listar_logs(schedule_id, limit)
