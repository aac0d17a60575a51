from sqlalchemy import Column, Integer, String, DateTime, Numeric, Boolean, Text

from pixcheckout.database.db_connection import Base
from pixcheckout.utils.database_utils import now_trimmed


class ProdutoModel(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(150), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    image_url = Column(String(500), nullable=True)
    type = Column(String(20), nullable=False, default="product")  # product | service
    active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), default=now_trimmed, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=now_trimmed, onupdate=now_trimmed, nullable=False)
