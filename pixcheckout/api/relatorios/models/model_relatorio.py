from sqlalchemy import Column, Integer, String, DateTime, Boolean, Text, JSON, ForeignKey

from pixcheckout.database.db_connection import Base
from pixcheckout.utils.database_utils import now_trimmed


class AgendamentoRelatorioModel(Base):
    __tablename__ = "report_schedules"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(150), nullable=False)
    # sales | products | customers | access
    type = Column(String(20), nullable=False)
    # pdf | excel
    format = Column(String(10), nullable=False, default="pdf")
    # daily | weekly | monthly
    frequency = Column(String(10), nullable=False)
    recipients = Column(JSON, nullable=False, default=list)
    active = Column(Boolean, nullable=False, default=True)
    last_run = Column(DateTime(timezone=True), nullable=True)
    next_run = Column(DateTime(timezone=True), nullable=True, index=True)
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_trimmed, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=now_trimmed, onupdate=now_trimmed, nullable=False)


class RelatorioLogModel(Base):
    __tablename__ = "report_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    schedule_id = Column(Integer, ForeignKey("report_schedules.id", ondelete="CASCADE"), nullable=True, index=True)
    # success | failed
    status = Column(String(20), nullable=False)
    recipients = Column(JSON, nullable=False, default=list)
    file_url = Column(String(1000), nullable=True)
    error = Column(Text, nullable=True)
    meta = Column("metadata", JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_trimmed, nullable=False, index=True)
