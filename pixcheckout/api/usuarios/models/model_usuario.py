from sqlalchemy import Column, Integer, String, DateTime

from pixcheckout.database.db_connection import Base
from pixcheckout.utils.database_utils import now_trimmed


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(100), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    type_user = Column(String(20), nullable=False, default="operador")  # admin | operador

    created_at = Column(DateTime(timezone=True), default=now_trimmed, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=now_trimmed, onupdate=now_trimmed, nullable=False)
