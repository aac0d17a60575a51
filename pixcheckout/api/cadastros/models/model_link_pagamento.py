from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from pixcheckout.database.db_connection import Base
from pixcheckout.utils.database_utils import now_trimmed


class LinkPagamentoModel(Base):
    __tablename__ = "payment_links"

    id = Column(Integer, primary_key=True, autoincrement=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    product = relationship("ProdutoModel")

    url_token = Column(String(64), unique=True, nullable=False, index=True)
    status = Column(String(20), nullable=False, default="active")  # active | expired | used
    expires_at = Column(DateTime(timezone=True), nullable=False)

    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_trimmed, nullable=False)
