from sqlalchemy import Column, Integer, String, DateTime, JSON, ForeignKey

from pixcheckout.database.db_connection import Base
from pixcheckout.utils.database_utils import now_trimmed


class AuditoriaModel(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    table_name = Column(String(60), nullable=False, index=True)
    record_id = Column(String(60), nullable=True)
    action = Column(String(10), nullable=False, index=True)  # INSERT | UPDATE | DELETE
    old_data = Column(JSON, nullable=True)
    new_data = Column(JSON, nullable=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), default=now_trimmed, nullable=False, index=True)
