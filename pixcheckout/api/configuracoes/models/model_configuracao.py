from sqlalchemy import Column, Integer, DateTime, JSON, ForeignKey

from pixcheckout.database.db_connection import Base
from pixcheckout.utils.database_utils import now_trimmed


class ConfiguracaoModel(Base):
    """Linha única com as configurações de negócio editáveis pelo admin."""
    __tablename__ = "settings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    whatsapp_settings = Column(JSON, nullable=False, default=dict)
    notification_settings = Column(JSON, nullable=False, default=dict)
    integration_settings = Column(JSON, nullable=False, default=dict)
    checkout_settings = Column(JSON, nullable=False, default=dict)

    updated_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_trimmed, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=now_trimmed, onupdate=now_trimmed, nullable=False)
