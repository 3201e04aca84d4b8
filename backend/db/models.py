import uuid

from sqlalchemy import Column, Text, DateTime, JSON, Index, text
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.sql import func

from db.database import Base


class AnalyticsEvent(Base):
    """One anonymous tool-usage event sent by the frontend."""

    __tablename__ = "analytics_events"

    id = Column(
        UUID(as_uuid=True),
        primary_key=True,
        server_default=text("gen_random_uuid()"),
        default=uuid.uuid4,
    )
    anonymous_id = Column(Text, nullable=False)
    session_id = Column(Text, nullable=False)
    event_name = Column(Text, nullable=False)
    tool_name = Column(Text, nullable=True)
    properties = Column(JSON().with_variant(JSONB, "postgresql"), nullable=True)
    user_agent = Column(Text, nullable=True)
    locale = Column(Text, nullable=True)
    timezone = Column(Text, nullable=True)
    soft_fingerprint = Column(Text, nullable=True)
    ip_hash = Column(Text, nullable=True)
    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    received_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        Index("idx_events_created_at", "created_at"),
        Index("idx_events_tool_name_created_at", "tool_name", "created_at"),
        Index("idx_events_anonymous_id_created_at", "anonymous_id", "created_at"),
    )
