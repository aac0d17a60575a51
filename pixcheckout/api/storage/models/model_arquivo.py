from sqlalchemy import Column, Integer, String, DateTime, BigInteger, JSON, ForeignKey

from pixcheckout.database.db_connection import Base
from pixcheckout.utils.database_utils import now_trimmed


class ArquivoModel(Base):
    __tablename__ = "files"

    id = Column(Integer, primary_key=True, autoincrement=True)
    bucket = Column(String(63), nullable=False, index=True)
    path = Column(String(500), nullable=False, unique=True)
    name = Column(String(255), nullable=False)
    size = Column(BigInteger, nullable=False, default=0)
    mime_type = Column(String(150), nullable=True)
    url = Column(String(1000), nullable=True)

    # "metadata" é reservado no declarative; o atributo usa outro nome
    meta = Column("metadata", JSON, nullable=True)
    tags = Column(JSON, nullable=True)

    related_id = Column(String(64), nullable=True, index=True)
    related_type = Column(String(50), nullable=True, index=True)

    uploaded_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_trimmed, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=now_trimmed, onupdate=now_trimmed, nullable=False)
