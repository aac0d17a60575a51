from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from pixcheckout.api.automacao.schemas.schema_automacao import (
    ContextoExecucao,
    ExecucaoOut,
    RegraCreate,
    RegraOut,
    RegraUpdate,
    WorkflowCreate,
    WorkflowOut,
    WorkflowUpdate,
)
from pixcheckout.api.automacao.services.service_automacao import AutomacaoService
from pixcheckout.api.usuarios.models.model_usuario import UserModel
from pixcheckout.core.admin_dependencies import get_current_user
from pixcheckout.database.db_connection import get_db

router = APIRouter(
    prefix="/api/automacao/admin",
    tags=["Admin - Automação"],
    dependencies=[Depends(get_current_user)],
)


# ---------------- Workflows ----------------
@router.get("/workflows", response_model=List[WorkflowOut])
def listar_workflows(trigger_type: Optional[str] = Query(None), db: Session = Depends(get_db)):
    return AutomacaoService(db).listar_workflows(trigger_type)


@router.post("/workflows", response_model=WorkflowOut, status_code=status.HTTP_201_CREATED)
def criar_workflow(
    payload: WorkflowCreate,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    return AutomacaoService(db).criar_workflow(payload, usuario_id=current_user.id)


@router.get("/workflows/{id}", response_model=WorkflowOut)
def get_workflow(id: int, db: Session = Depends(get_db)):
    return AutomacaoService(db).get_workflow(id)


@router.put("/workflows/{id}", response_model=WorkflowOut)
def atualizar_workflow(id: int, payload: WorkflowUpdate, db: Session = Depends(get_db)):
    return AutomacaoService(db).atualizar_workflow(id, payload)


@router.delete("/workflows/{id}", status_code=status.HTTP_204_NO_CONTENT)
def deletar_workflow(id: int, db: Session = Depends(get_db)):
    AutomacaoService(db).deletar_workflow(id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/workflows/{id}/executar", response_model=ExecucaoOut)
async def executar_workflow(id: int, payload: ContextoExecucao, db: Session = Depends(get_db)):
    return await AutomacaoService(db).executar_workflow(id, payload.contexto)


# ---------------- Regras ----------------
@router.get("/regras", response_model=List[RegraOut])
def listar_regras(ativo: Optional[bool] = Query(None), db: Session = Depends(get_db)):
    return AutomacaoService(db).listar_regras(ativo)


@router.post("/regras", response_model=RegraOut, status_code=status.HTTP_201_CREATED)
def criar_regra(
    payload: RegraCreate,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    return AutomacaoService(db).criar_regra(payload, usuario_id=current_user.id)


@router.get("/regras/{id}", response_model=RegraOut)
def get_regra(id: int, db: Session = Depends(get_db)):
    return AutomacaoService(db).get_regra(id)


@router.put("/regras/{id}", response_model=RegraOut)
def atualizar_regra(id: int, payload: RegraUpdate, db: Session = Depends(get_db)):
    return AutomacaoService(db).atualizar_regra(id, payload)


@router.delete("/regras/{id}", status_code=status.HTTP_204_NO_CONTENT)
def deletar_regra(id: int, db: Session = Depends(get_db)):
    AutomacaoService(db).deletar_regra(id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/regras/avaliar", response_model=List[ExecucaoOut])
async def avaliar_regras(payload: ContextoExecucao, db: Session = Depends(get_db)):
    """Avalia as regras ativas contra o contexto informado."""
    return await AutomacaoService(db).avaliar_regras(payload.contexto)


# ---------------- Execuções ----------------
@router.get("/execucoes", response_model=List[ExecucaoOut])
def listar_execucoes(
    workflow_id: Optional[int] = Query(None),
    rule_id: Optional[int] = Query(None),
    status_filtro: Optional[Literal["success", "failed"]] = Query(None, alias="status"),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
):
    return AutomacaoService(db).listar_execucoes(
        workflow_id=workflow_id, rule_id=rule_id, status=status_filtro, limit=limit
    )
