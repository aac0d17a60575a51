from sqlalchemy import Column, Integer, String, DateTime

from pixcheckout.database.db_connection import Base
from pixcheckout.utils.database_utils import now_trimmed


class ClienteModel(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(150), nullable=False)
    email = Column(String(150), unique=True, nullable=False, index=True)
    cpf = Column(String(20), nullable=True)  # CPF ou CNPJ, somente dígitos
    phone = Column(String(20), nullable=True)

    created_at = Column(DateTime(timezone=True), default=now_trimmed, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=now_trimmed, onupdate=now_trimmed, nullable=False)
