"""Find messages in a channel that mention a workspace owner."""

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Generator
from sqlalchemy.orm import Session
from rich.console import Console

from slack_relay.errors import InvalidArgumentError, UpstreamError
from slack_relay.slack import ApiFailure, HistoryMessage, SlackGateway
from slack_relay.workspaces import WorkspaceRegistry

console = Console()

MIN_DAYS_BACK, MAX_DAYS_BACK = 1, 365
MIN_LIMIT, MAX_LIMIT = 1, 100

# <!channel>, <!here>, <!everyone>, optionally with a label: <!here|here>
BROADCAST_PATTERN = re.compile(r"<!(?:channel|here|everyone)(?:\|[^>]*)?>")


@dataclass(frozen=True)
class MentionHit:
    """A message that mentions the owner or notifies the whole channel."""
    text: str
    user: str
    timestamp: str
    permalink: str
    thread_ts: str | None = None
    reply_count: int | None = None


def user_mention_pattern(user_id: str) -> re.Pattern:
    """Pattern for a direct mention of ``user_id``, e.g. ``<@U123>`` or ``<@U123|alice>``."""
    return re.compile(rf"<@{re.escape(user_id)}(?:\|[^>]*)?>")


def is_mention(text: str, owner_pattern: re.Pattern) -> bool:
    return bool(owner_pattern.search(text) or BROADCAST_PATTERN.search(text))


def permalink(base_url: str, channel_id: str, ts: str) -> str:
    """Deep link to a message: {base_url}archives/{channel}/p{ts without the dot}."""
    return f"{base_url}archives/{channel_id}/p{ts.replace('.', '')}"


def validate_window(days_back: int, limit: int):
    if not MIN_DAYS_BACK <= days_back <= MAX_DAYS_BACK:
        raise InvalidArgumentError(f"days_back must be between {MIN_DAYS_BACK} and {MAX_DAYS_BACK}")
    if not MIN_LIMIT <= limit <= MAX_LIMIT:
        raise InvalidArgumentError(f"limit must be between {MIN_LIMIT} and {MAX_LIMIT}")


class MentionEngine:
    """Scan a channel's recent history for mentions of the workspace owner."""

    def __init__(
        self,
        registry: WorkspaceRegistry,
        page_size: int = 200,
        scan_limit: int = 1000,
        clock: Callable[[], datetime] | None = None,
    ):
        self.registry = registry
        self.page_size = page_size
        self.scan_limit = scan_limit
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def find_mentions(
        self,
        db: Session,
        workspace_id: str,
        channel_id: str,
        days_back: int = 1,
        limit: int = 5,
    ) -> list[MentionHit]:
        """Return up to ``limit`` mentions from the last ``days_back`` days, newest first."""
        validate_window(days_back, limit)
        if not channel_id:
            raise InvalidArgumentError("channel_id is required")

        workspace, gateway = self.registry.gateway_for(db, workspace_id)
        oldest = (self.clock() - timedelta(days=days_back)).timestamp()
        owner_pattern = user_mention_pattern(workspace.owner_user_id)

        hits = []
        for message in self._history(gateway, channel_id, oldest):
            if not is_mention(message.text, owner_pattern):
                continue
            hits.append(MentionHit(
                text=message.text,
                user=message.user or "unknown",
                timestamp=message.ts,
                permalink=permalink(workspace.workspace_url, channel_id, message.ts),
                thread_ts=message.thread_ts,
                reply_count=message.reply_count,
            ))
            if len(hits) >= limit:
                break

        console.print(
            f"[blue]Mentions in {channel_id}:[/blue] {len(hits)} in the last {days_back} day(s)"
        )
        return hits

    def _history(self, gateway: SlackGateway, channel_id: str, oldest: float) -> Generator[HistoryMessage, None, None]:
        """Yield messages newer than ``oldest``, following cursors until the scan limit."""
        scanned = 0
        cursor = None

        while True:
            page = gateway.list_messages(channel_id, oldest, cursor=cursor, limit=self.page_size)
            if isinstance(page, ApiFailure):
                raise UpstreamError(f"Failed to read history for {channel_id}: {page.error}")

            for message in page.messages:
                yield message
                scanned += 1
                if scanned >= self.scan_limit:
                    return

            cursor = page.next_cursor
            if not cursor:
                return
