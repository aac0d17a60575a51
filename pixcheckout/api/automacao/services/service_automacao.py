import time
from typing import Any, Dict, List, Optional

import httpx
from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from pixcheckout.api.automacao.models.model_automacao import (
    ExecucaoAutomacaoModel,
    RegraModel,
    WorkflowModel,
)
from pixcheckout.api.automacao.repositories.repo_automacao import AutomacaoRepository
from pixcheckout.api.automacao.schemas.schema_automacao import (
    RegraCreate,
    RegraUpdate,
    WorkflowCreate,
    WorkflowUpdate,
)
from pixcheckout.api.automacao.services.acoes import ExecutorAcoes
from pixcheckout.api.automacao.services.condicoes import avaliar_condicoes
from pixcheckout.utils.logger import logger


class AutomacaoService:
    def __init__(self, db: Session, http_transport: Optional[httpx.AsyncBaseTransport] = None):
        self.db = db
        self.repo = AutomacaoRepository(db)
        self.executor = ExecutorAcoes(db, http_transport=http_transport)

    # ---------------- WORKFLOWS ----------------
    def criar_workflow(self, data: WorkflowCreate, usuario_id: Optional[int] = None) -> WorkflowModel:
        workflow = self.repo.add(WorkflowModel(**data.model_dump(), created_by=usuario_id))
        logger.info(f"[Automacao] Workflow criado id={workflow.id} trigger={workflow.trigger_type}")
        return workflow

    def get_workflow(self, workflow_id: int) -> WorkflowModel:
        workflow = self.repo.get_workflow(workflow_id)
        if not workflow:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Workflow não encontrado")
        return workflow

    def listar_workflows(self, trigger_type: Optional[str] = None):
        return self.repo.list_workflows(trigger_type=trigger_type)

    def atualizar_workflow(self, workflow_id: int, data: WorkflowUpdate) -> WorkflowModel:
        workflow = self.get_workflow(workflow_id)
        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(workflow, key, value)
        self.db.flush()
        return workflow

    def deletar_workflow(self, workflow_id: int):
        self.repo.delete(self.get_workflow(workflow_id))

    # ---------------- REGRAS ----------------
    def criar_regra(self, data: RegraCreate, usuario_id: Optional[int] = None) -> RegraModel:
        regra = self.repo.add(RegraModel(**data.model_dump(), created_by=usuario_id))
        logger.info(f"[Automacao] Regra criada id={regra.id} prioridade={regra.priority}")
        return regra

    def get_regra(self, regra_id: int) -> RegraModel:
        regra = self.repo.get_regra(regra_id)
        if not regra:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Regra não encontrada")
        return regra

    def listar_regras(self, ativo: Optional[bool] = None):
        return self.repo.list_regras(ativo=ativo)

    def atualizar_regra(self, regra_id: int, data: RegraUpdate) -> RegraModel:
        regra = self.get_regra(regra_id)
        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(regra, key, value)
        self.db.flush()
        return regra

    def deletar_regra(self, regra_id: int):
        self.repo.delete(self.get_regra(regra_id))

    def listar_execucoes(self, **filtros):
        return self.repo.list_execucoes(**filtros)

    # ---------------- EXECUÇÃO ----------------
    async def _executar_acoes(
        self,
        acoes: List[Dict[str, Any]],
        contexto: Dict[str, Any],
        workflow_id: Optional[int] = None,
        regra_id: Optional[int] = None,
    ) -> ExecucaoAutomacaoModel:
        inicio = time.monotonic()
        resultados = [await self.executor.executar(acao, contexto) for acao in (acoes or [])]
        duracao = int((time.monotonic() - inicio) * 1000)
        execucao = self.repo.add(
            ExecucaoAutomacaoModel(
                workflow_id=workflow_id,
                rule_id=regra_id,
                status="success" if all(r.get("success") for r in resultados) else "failed",
                result=resultados,
                duration=duracao,
            )
        )
        origem = f"workflow={workflow_id}" if workflow_id else f"regra={regra_id}"
        logger.info(f"[Automacao] Execução {origem} status={execucao.status} duração={duracao}ms")
        return execucao

    async def executar_workflow(self, workflow_id: int, contexto: Dict[str, Any]) -> ExecucaoAutomacaoModel:
        workflow = self.get_workflow(workflow_id)
        return await self._executar_acoes(workflow.actions, contexto, workflow_id=workflow.id)

    async def avaliar_regras(self, contexto: Dict[str, Any]) -> List[ExecucaoAutomacaoModel]:
        """Regras ativas por prioridade decrescente; executa as que tiverem todas as condições satisfeitas."""
        execucoes = []
        for regra in self.repo.list_regras(ativo=True):
            if avaliar_condicoes(regra.conditions, contexto):
                execucoes.append(await self._executar_acoes(regra.actions, contexto, regra_id=regra.id))
        return execucoes

    async def disparar_evento(self, evento: str, contexto: Dict[str, Any]) -> List[ExecucaoAutomacaoModel]:
        """Avalia as regras e roda os workflows cujo trigger_type é o evento."""
        contexto = {**contexto, "event": evento}
        execucoes = await self.avaliar_regras(contexto)
        for workflow in self.repo.list_workflows(trigger_type=evento, ativo=True):
            condicoes = (workflow.trigger_config or {}).get("conditions") or []
            if avaliar_condicoes(condicoes, contexto):
                execucoes.append(await self._executar_acoes(workflow.actions, contexto, workflow_id=workflow.id))
        return execucoes
