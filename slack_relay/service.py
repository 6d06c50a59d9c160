"""Relay service: the operations exposed to the transport layer.

Each operation runs in its own database session and returns an :class:`Outcome`
carrying either a read model or the typed error that stopped it. ORM rows and
stored credentials never leave this module.
"""

from datetime import datetime
from typing import Callable
from sqlalchemy import Engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from rich.console import Console

from slack_relay.channels import ChannelDirectory
from slack_relay.config import Settings
from slack_relay.errors import Outcome, RelayError, UpstreamError
from slack_relay.ledger import PostingLedger
from slack_relay.mentions import MentionEngine, MentionHit
from slack_relay.models import (
    PostedMessageRecord,
    WorkspaceView,
    create_db_engine,
    create_session_factory,
    session_scope,
)
from slack_relay.slack import ChannelSummary, GatewayFactory
from slack_relay.slack import gateway_factory as slack_gateway_factory
from slack_relay.vault import CredentialCipher
from slack_relay.workspaces import WorkspaceRegistry

console = Console()


class RelayService:
    """Multi-tenant Slack relay built from explicitly supplied dependencies."""

    def __init__(
        self,
        session_factory: sessionmaker,
        cipher: CredentialCipher,
        gateway_factory: GatewayFactory,
        settings: Settings | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        settings = settings or Settings()
        self.session_factory = session_factory
        self.registry = WorkspaceRegistry(cipher, gateway_factory, owner_mode=settings.owner_mode, clock=clock)
        self.mentions = MentionEngine(
            self.registry,
            page_size=settings.history_page_size,
            scan_limit=settings.mention_scan_limit,
            clock=clock,
        )
        self.ledger = PostingLedger(self.registry, clock=clock)
        self.channels = ChannelDirectory(self.registry)

    @classmethod
    def from_settings(cls, settings: Settings, engine: Engine | None = None) -> "RelayService":
        """Wire the service against the configured database and the Slack Web API."""
        settings.validate()
        engine = engine or create_db_engine(settings.database_url)
        return cls(
            session_factory=create_session_factory(engine),
            cipher=CredentialCipher(settings.encryption_key),
            gateway_factory=slack_gateway_factory(settings.slack_api_url),
            settings=settings,
        )

    def register_workspace(
        self,
        bot_token: str,
        owner_user_id: str | None = None,
        description: str | None = None,
    ) -> Outcome[WorkspaceView]:
        return self._run(
            lambda db: self.registry.register(db, bot_token, owner_user_id, description).to_view()
        )

    def get_workspace(self, workspace_id: str, include_inactive: bool = False) -> Outcome[WorkspaceView]:
        return self._run(lambda db: self.registry.get(db, workspace_id, include_inactive).to_view())

    def list_workspaces(self, owner_user_id: str | None = None, active_only: bool = True) -> Outcome[list[WorkspaceView]]:
        return self._run(
            lambda db: [ws.to_view() for ws in self.registry.list(db, owner_user_id, active_only)]
        )

    def deactivate_workspace(self, workspace_id: str) -> Outcome[WorkspaceView]:
        return self._run(lambda db: self.registry.deactivate(db, workspace_id).to_view())

    def list_channels(
        self, workspace_id: str, limit: int = 50, include_private: bool = False
    ) -> Outcome[list[ChannelSummary]]:
        return self._run(lambda db: self.channels.list_channels(db, workspace_id, limit, include_private))

    def find_mentions(
        self, workspace_id: str, channel_id: str, days_back: int = 1, limit: int = 5
    ) -> Outcome[list[MentionHit]]:
        return self._run(
            lambda db: self.mentions.find_mentions(db, workspace_id, channel_id, days_back, limit)
        )

    def post_message(
        self, workspace_id: str, channel_id: str, text: str, thread_ts: str | None = None
    ) -> Outcome[PostedMessageRecord]:
        return self._run(
            lambda db: self.ledger.post_and_record(db, workspace_id, channel_id, text, thread_ts)
        )

    def list_posted(
        self,
        workspace_id: str | None = None,
        channel_id: str | None = None,
        limit: int = 50,
        offset: int = 0,
        include_inactive: bool = False,
    ) -> Outcome[list[PostedMessageRecord]]:
        return self._run(
            lambda db: self.ledger.list_posted(db, workspace_id, channel_id, limit, offset, include_inactive)
        )

    def health(self) -> Outcome[dict]:
        """Check that the database answers."""
        try:
            with session_scope(self.session_factory) as db:
                db.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            console.print(f"[red]Database health check failed:[/red] {e}")
            return Outcome.failure(UpstreamError(f"Database unavailable: {e}"))
        return Outcome.success({"status": "healthy", "database": "connected"})

    def _run(self, operation):
        try:
            with session_scope(self.session_factory) as db:
                return Outcome.success(operation(db))
        except RelayError as e:
            return Outcome.failure(e)
        except SQLAlchemyError as e:
            console.print(f"[red]Database error:[/red] {e}")
            return Outcome.failure(UpstreamError(f"Database unavailable: {e}"))
