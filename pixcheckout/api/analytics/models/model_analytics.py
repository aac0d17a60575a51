from sqlalchemy import Column, Integer, String, DateTime, Float, Text, JSON, ForeignKey

from pixcheckout.database.db_connection import Base
from pixcheckout.utils.database_utils import now_trimmed


class EventoModel(Base):
    __tablename__ = "analytics_events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    event_type = Column(String(100), nullable=False, index=True)
    data = Column(JSON, nullable=True)
    session_id = Column(String(100), nullable=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_trimmed, nullable=False, index=True)


class MetricaModel(Base):
    __tablename__ = "analytics_metrics"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False, index=True)
    value = Column(Float, nullable=False, default=0)
    dimension = Column(String(50), nullable=True)
    # daily | weekly | monthly
    period = Column(String(20), nullable=False)
    start_date = Column(DateTime(timezone=True), nullable=False, index=True)
    end_date = Column(DateTime(timezone=True), nullable=False)
    meta = Column("metadata", JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_trimmed, nullable=False)


class PrevisaoModel(Base):
    __tablename__ = "analytics_predictions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    model_type = Column(String(50), nullable=False)
    target_metric = Column(String(100), nullable=False, index=True)
    prediction_date = Column(DateTime(timezone=True), nullable=False)
    predicted_value = Column(Float, nullable=False)
    confidence_score = Column(Float, nullable=False)
    features = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_trimmed, nullable=False)


class DashboardModel(Base):
    __tablename__ = "analytics_dashboards"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(150), nullable=False)
    description = Column(Text, nullable=True)
    layout = Column(JSON, nullable=False, default=list)
    widgets = Column(JSON, nullable=False, default=list)
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_trimmed, nullable=False)
