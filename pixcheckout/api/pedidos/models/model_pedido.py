from sqlalchemy import Column, Integer, String, DateTime, Numeric, ForeignKey, Text, JSON
from sqlalchemy.orm import relationship

from pixcheckout.database.db_connection import Base
from pixcheckout.utils.database_utils import now_trimmed


class PedidoModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, autoincrement=True)

    customer_id = Column(Integer, ForeignKey("customers.id", ondelete="RESTRICT"), nullable=False, index=True)
    customer = relationship("ClienteModel")

    product_id = Column(Integer, ForeignKey("products.id", ondelete="RESTRICT"), nullable=False, index=True)
    product = relationship("ProdutoModel")

    amount = Column(Numeric(10, 2), nullable=False)
    # pending | processing | paid | expired | failed | cancelled
    status = Column(String(20), nullable=False, default="pending", index=True)

    payment_method = Column(String(30), nullable=True, default="pix")
    transaction_id = Column(String(100), nullable=True, index=True)
    payment_code = Column(Text, nullable=True)  # Pix copia e cola
    qr_code = Column(Text, nullable=True)

    coupon_id = Column(Integer, ForeignKey("coupons.id", ondelete="SET NULL"), nullable=True)
    discount_amount = Column(Numeric(10, 2), nullable=False, default=0)

    payment_link_id = Column(Integer, ForeignKey("payment_links.id", ondelete="SET NULL"), nullable=True)

    expires_at = Column(DateTime(timezone=True), nullable=True)
    paid_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), default=now_trimmed, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=now_trimmed, onupdate=now_trimmed, nullable=False)

    notes = relationship(
        "NotaPedidoModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="NotaPedidoModel.created_at",
    )


class NotaPedidoModel(Base):
    __tablename__ = "order_notes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    order = relationship("PedidoModel", back_populates="notes")

    content = Column(Text, nullable=False)
    author_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_trimmed, nullable=False)


class AtualizacaoPedidoModel(Base):
    """Feed de mudanças de status consumido pelo realtime."""
    __tablename__ = "order_updates"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(String(20), nullable=False)
    data = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_trimmed, nullable=False)
