"""Workspace model for registered Slack workspaces."""

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, Text, Boolean
from sqlalchemy.orm import relationship

from slack_relay.models.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    """SQLite drops the offset on reload; stored values are always UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


@dataclass(frozen=True)
class WorkspaceView:
    """Read model of a workspace. Never carries the credential."""
    id: str
    team_id: str
    team_name: str
    workspace_url: str
    owner_user_id: str
    bot_id: str
    bot_user_id: str | None
    description: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class Workspace(Base):
    """A Slack workspace registered with one bot credential."""

    __tablename__ = "workspaces"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    team_id = Column(String(50), unique=True, nullable=False, index=True)
    team_name = Column(String(255), nullable=False)
    workspace_url = Column(String(255), nullable=False)
    encrypted_token = Column(Text, nullable=False)
    owner_user_id = Column(String(50), nullable=False, index=True)
    bot_id = Column(String(50), nullable=False)
    bot_user_id = Column(String(50), nullable=True)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    # Relationships
    posted_messages = relationship(
        "PostedMessage",
        back_populates="workspace",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def to_view(self) -> WorkspaceView:
        return WorkspaceView(
            id=self.id,
            team_id=self.team_id,
            team_name=self.team_name,
            workspace_url=self.workspace_url,
            owner_user_id=self.owner_user_id,
            bot_id=self.bot_id,
            bot_user_id=self.bot_user_id,
            description=self.description,
            is_active=self.is_active,
            created_at=as_utc(self.created_at),
            updated_at=as_utc(self.updated_at),
        )

    def __repr__(self):
        return f"<Workspace {self.team_name} ({self.team_id})>"
