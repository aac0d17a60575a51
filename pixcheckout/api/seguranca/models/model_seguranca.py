from sqlalchemy import Column, Integer, String, DateTime, Boolean

from pixcheckout.database.db_connection import Base
from pixcheckout.utils.database_utils import now_trimmed


class TentativaLoginModel(Base):
    __tablename__ = "tentativas_login"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(100), nullable=False, index=True)
    ip = Column(String(64), nullable=True, index=True)
    sucesso = Column(Boolean, nullable=False, default=False)
    user_agent = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_trimmed, nullable=False)


class IpBloqueadoModel(Base):
    __tablename__ = "ips_bloqueados"

    id = Column(Integer, primary_key=True, autoincrement=True)
    ip = Column(String(64), unique=True, nullable=False)
    motivo = Column(String(255), nullable=True)
    bloqueado_ate = Column(DateTime(timezone=True), nullable=True)  # None = permanente
    created_at = Column(DateTime(timezone=True), default=now_trimmed, nullable=False)
