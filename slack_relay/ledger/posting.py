"""Post messages to Slack and keep an append-only record of them."""

from datetime import datetime, timezone
from typing import Callable
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from rich.console import Console

from slack_relay.errors import ConsistencyWarning, DeliveryError, InvalidArgumentError
from slack_relay.models import PostedMessage, PostedMessageRecord, Workspace
from slack_relay.slack import ApiFailure, SlackGateway
from slack_relay.workspaces import WorkspaceRegistry

console = Console()

MIN_PAGE_SIZE, MAX_PAGE_SIZE = 1, 1000


class PostingLedger:
    """Sends messages on behalf of a workspace and records each confirmed send once."""

    def __init__(self, registry: WorkspaceRegistry, clock: Callable[[], datetime] | None = None):
        self.registry = registry
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def post_and_record(
        self,
        db: Session,
        workspace_id: str,
        channel_id: str,
        text: str,
        thread_ts: str | None = None,
    ) -> PostedMessageRecord:
        """Post ``text`` to a channel and append the ledger row for it.

        Raises:
            DeliveryError: Slack rejected the message; nothing was recorded.
            ConsistencyWarning: Slack accepted the message but the ledger write
                failed. The message must not be posted again.
        """
        if not channel_id:
            raise InvalidArgumentError("channel_id is required")
        if not text or not text.strip():
            raise InvalidArgumentError("Message text must not be empty")

        workspace, gateway = self.registry.gateway_for(db, workspace_id)
        channel_name = self._channel_name(gateway, channel_id)

        result = gateway.post_message(channel_id, text, thread_ts=thread_ts)
        if isinstance(result, ApiFailure):
            console.print(f"[red]Failed to post to #{channel_name}:[/red] {result.error}")
            raise DeliveryError(result.error, result.detail)

        posted = PostedMessage(
            workspace_id=workspace.id,
            channel_id=channel_id,
            channel_name=channel_name,
            message_text=text,
            message_ts=result.ts,
            slack_message_id=result.message_id,
            user_id=workspace.owner_user_id,
            thread_ts=thread_ts,
            created_at=self.clock(),
        )
        try:
            db.add(posted)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            console.print(
                f"[bold red]UNRECORDED POST: message {result.ts} was delivered to {channel_id} "
                f"for workspace {workspace.id} but the ledger write failed:[/bold red] {e}"
            )
            raise ConsistencyWarning(workspace.id, channel_id, result.ts, str(e)) from e

        console.print(f"[green]✓[/green] Posted to #{channel_name} ({result.ts})")
        return posted.to_record()

    def list_posted(
        self,
        db: Session,
        workspace_id: str | None = None,
        channel_id: str | None = None,
        limit: int = 50,
        offset: int = 0,
        include_inactive: bool = False,
    ) -> list[PostedMessageRecord]:
        """Page through recorded messages, newest first.

        Rows of deactivated workspaces are hidden unless ``include_inactive`` is set.
        """
        if not MIN_PAGE_SIZE <= limit <= MAX_PAGE_SIZE:
            raise InvalidArgumentError(f"limit must be between {MIN_PAGE_SIZE} and {MAX_PAGE_SIZE}")
        if offset < 0:
            raise InvalidArgumentError("offset must not be negative")

        query = db.query(PostedMessage)
        if not include_inactive:
            query = query.join(Workspace).filter(Workspace.is_active.is_(True))
        if workspace_id:
            query = query.filter(PostedMessage.workspace_id == workspace_id)
        if channel_id:
            query = query.filter(PostedMessage.channel_id == channel_id)

        rows = (
            query.order_by(PostedMessage.created_at.desc(), PostedMessage.id.desc())
            .limit(limit)
            .offset(offset)
            .all()
        )
        return [row.to_record() for row in rows]

    def _channel_name(self, gateway: SlackGateway, channel_id: str) -> str:
        """Channel name for the ledger, or the id itself if the lookup fails."""
        channel = gateway.get_channel(channel_id)
        if isinstance(channel, ApiFailure):
            console.print(f"[yellow]Could not resolve channel {channel_id}, recording by id:[/yellow] {channel.error}")
            return channel_id
        return channel.name
