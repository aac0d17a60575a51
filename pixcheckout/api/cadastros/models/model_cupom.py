from sqlalchemy import Column, Integer, String, DateTime, Numeric, Boolean, ForeignKey
from sqlalchemy.orm import relationship

from pixcheckout.database.db_connection import Base
from pixcheckout.utils.database_utils import now_trimmed


class CupomModel(Base):
    __tablename__ = "coupons"

    id = Column(Integer, primary_key=True, autoincrement=True)
    code = Column(String(30), unique=True, nullable=False, index=True)
    type = Column(String(20), nullable=False)  # percentage | fixed
    value = Column(Numeric(10, 2), nullable=False)

    starts_at = Column(DateTime(timezone=True), nullable=True)
    expires_at = Column(DateTime(timezone=True), nullable=True)

    max_uses = Column(Integer, nullable=True)
    current_uses = Column(Integer, nullable=False, default=0)
    min_purchase_amount = Column(Numeric(10, 2), nullable=True)

    product_id = Column(Integer, ForeignKey("products.id", ondelete="SET NULL"), nullable=True)
    product = relationship("ProdutoModel")

    active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), default=now_trimmed, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=now_trimmed, onupdate=now_trimmed, nullable=False)
