"""Database models."""

from slack_relay.models.database import (
    Base,
    create_db_engine,
    create_session_factory,
    init_db,
    session_scope,
)
from slack_relay.models.workspace import Workspace, WorkspaceView
from slack_relay.models.posted_message import PostedMessage, PostedMessageRecord

__all__ = [
    "Base",
    "create_db_engine",
    "create_session_factory",
    "init_db",
    "session_scope",
    "Workspace",
    "WorkspaceView",
    "PostedMessage",
    "PostedMessageRecord",
]
