"""Ledger of messages posted through the relay."""

import uuid
from dataclasses import dataclass
from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship

from slack_relay.models.database import Base
from slack_relay.models.workspace import as_utc, utcnow


@dataclass(frozen=True)
class PostedMessageRecord:
    """Read model of one ledger row."""
    id: str
    workspace_id: str
    channel_id: str
    channel_name: str
    message_text: str
    message_ts: str
    slack_message_id: str | None
    user_id: str
    thread_ts: str | None
    created_at: datetime


class PostedMessage(Base):
    """One message sent through the relay. Rows are never updated."""

    __tablename__ = "posted_messages"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    workspace_id = Column(
        String(36), ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False, index=True
    )
    channel_id = Column(String(50), nullable=False, index=True)
    channel_name = Column(String(255), nullable=False)
    message_text = Column(Text, nullable=False)
    message_ts = Column(String(50), nullable=False)  # Slack "ts", opaque
    slack_message_id = Column(String(100), nullable=True)
    user_id = Column(String(50), nullable=False, index=True)
    thread_ts = Column(String(50), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    # Relationships
    workspace = relationship("Workspace", back_populates="posted_messages")

    def to_record(self) -> PostedMessageRecord:
        return PostedMessageRecord(
            id=self.id,
            workspace_id=self.workspace_id,
            channel_id=self.channel_id,
            channel_name=self.channel_name,
            message_text=self.message_text,
            message_ts=self.message_ts,
            slack_message_id=self.slack_message_id,
            user_id=self.user_id,
            thread_ts=self.thread_ts,
            created_at=as_utc(self.created_at),
        )

    def __repr__(self):
        return f"<PostedMessage {self.message_ts} in {self.channel_id}>"
