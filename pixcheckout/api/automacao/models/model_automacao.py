from sqlalchemy import Column, Integer, String, DateTime, Boolean, Text, JSON, ForeignKey

from pixcheckout.database.db_connection import Base
from pixcheckout.utils.database_utils import now_trimmed


class WorkflowModel(Base):
    __tablename__ = "automation_workflows"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(150), nullable=False)
    description = Column(Text, nullable=True)
    # order_created | order_paid | order_expired | manual
    trigger_type = Column(String(50), nullable=False, index=True)
    trigger_config = Column(JSON, nullable=False, default=dict)
    actions = Column(JSON, nullable=False, default=list)
    active = Column(Boolean, nullable=False, default=True)
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_trimmed, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=now_trimmed, onupdate=now_trimmed, nullable=False)


class RegraModel(Base):
    __tablename__ = "automation_rules"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(150), nullable=False)
    description = Column(Text, nullable=True)
    conditions = Column(JSON, nullable=False, default=list)
    actions = Column(JSON, nullable=False, default=list)
    priority = Column(Integer, nullable=False, default=0, index=True)
    active = Column(Boolean, nullable=False, default=True)
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_trimmed, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=now_trimmed, onupdate=now_trimmed, nullable=False)


class ExecucaoAutomacaoModel(Base):
    __tablename__ = "automation_executions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    workflow_id = Column(Integer, ForeignKey("automation_workflows.id", ondelete="CASCADE"), nullable=True, index=True)
    rule_id = Column(Integer, ForeignKey("automation_rules.id", ondelete="CASCADE"), nullable=True, index=True)
    # success | failed
    status = Column(String(20), nullable=False)
    result = Column(JSON, nullable=True)
    duration = Column(Integer, nullable=False, default=0)  # ms
    created_at = Column(DateTime(timezone=True), default=now_trimmed, nullable=False, index=True)
