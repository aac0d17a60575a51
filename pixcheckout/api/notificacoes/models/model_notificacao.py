from sqlalchemy import Column, Integer, String, DateTime, Boolean, JSON, ForeignKey, Text

from pixcheckout.database.db_connection import Base
from pixcheckout.utils.database_utils import now_trimmed


class NotificacaoModel(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True)
    type = Column(String(20), nullable=False)  # order_status | payment | system
    title = Column(String(150), nullable=False)
    content = Column(Text, nullable=False)
    data = Column(JSON, nullable=True)
    read = Column(Boolean, nullable=False, default=False, index=True)
    created_at = Column(DateTime(timezone=True), default=now_trimmed, nullable=False, index=True)


class EmailLogModel(Base):
    __tablename__ = "email_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    to = Column(String(150), nullable=False)
    cc = Column(JSON, nullable=True)
    template = Column(String(50), nullable=False)
    subject = Column(String(200), nullable=True)
    data = Column(JSON, nullable=True)
    status = Column(String(10), nullable=False)  # sent | failed
    error = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_trimmed, nullable=False, index=True)


class WhatsappLogModel(Base):
    __tablename__ = "whatsapp_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    to_phone = Column(String(20), nullable=False, index=True)
    template = Column(String(50), nullable=False)
    data = Column(JSON, nullable=True)
    message = Column(Text, nullable=True)
    status = Column(String(10), nullable=False)  # sent | failed
    message_id = Column(String(100), nullable=True)
    error = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_trimmed, nullable=False, index=True)
