from typing import Optional

from sqlalchemy.orm import Session

from pixcheckout.api.automacao.models.model_automacao import (
    ExecucaoAutomacaoModel,
    RegraModel,
    WorkflowModel,
)


class AutomacaoRepository:
    def __init__(self, db: Session):
        self.db = db

    # -------- Workflows --------
    def get_workflow(self, workflow_id: int) -> WorkflowModel | None:
        return self.db.query(WorkflowModel).filter(WorkflowModel.id == workflow_id).first()

    def list_workflows(self, trigger_type: Optional[str] = None, ativo: Optional[bool] = None):
        q = self.db.query(WorkflowModel)
        if trigger_type:
            q = q.filter(WorkflowModel.trigger_type == trigger_type)
        if ativo is not None:
            q = q.filter(WorkflowModel.active.is_(ativo))
        return q.order_by(WorkflowModel.id).all()

    # -------- Regras --------
    def get_regra(self, regra_id: int) -> RegraModel | None:
        return self.db.query(RegraModel).filter(RegraModel.id == regra_id).first()

    def list_regras(self, ativo: Optional[bool] = None):
        q = self.db.query(RegraModel)
        if ativo is not None:
            q = q.filter(RegraModel.active.is_(ativo))
        return q.order_by(RegraModel.priority.desc(), RegraModel.id).all()

    # -------- Execuções --------
    def list_execucoes(
        self,
        workflow_id: Optional[int] = None,
        rule_id: Optional[int] = None,
        status: Optional[str] = None,
        limit: int = 100,
    ):
        q = self.db.query(ExecucaoAutomacaoModel)
        if workflow_id:
            q = q.filter(ExecucaoAutomacaoModel.workflow_id == workflow_id)
        if rule_id:
            q = q.filter(ExecucaoAutomacaoModel.rule_id == rule_id)
        if status:
            q = q.filter(ExecucaoAutomacaoModel.status == status)
        return q.order_by(ExecucaoAutomacaoModel.id.desc()).limit(limit).all()

    def add(self, obj):
        self.db.add(obj)
        self.db.flush()
        return obj

    def delete(self, obj):
        self.db.delete(obj)
        self.db.flush()
