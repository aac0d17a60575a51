from sqlalchemy import Column, Integer, String, DateTime, BigInteger, Text, JSON, ForeignKey

from pixcheckout.database.db_connection import Base
from pixcheckout.utils.database_utils import now_trimmed


class BackupLogModel(Base):
    __tablename__ = "backup_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # backup | restore
    type = Column(String(20), nullable=False)
    # success | failed
    status = Column(String(20), nullable=False)
    file_name = Column(String(255), nullable=True)
    file_size = Column(BigInteger, nullable=True)
    tables = Column(JSON, nullable=False, default=list)
    error = Column(Text, nullable=True)
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_trimmed, nullable=False, index=True)
