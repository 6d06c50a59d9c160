"""Slack Web API gateway.

Wraps :class:`slack_sdk.WebClient` and turns its loosely shaped responses into a
small set of explicit result types. Nothing past this module reads raw Slack
payloads.
"""

from dataclasses import dataclass, field
from typing import Callable
from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError, SlackClientError
from rich.console import Console

console = Console()

PUBLIC_CHANNEL = "public_channel"
PRIVATE_CHANNEL = "private_channel"


@dataclass(frozen=True)
class ApiFailure:
    """Slack answered with ok=false, or could not be reached."""
    error: str
    detail: str | None = None


@dataclass(frozen=True)
class VerifiedIdentity:
    """Identity reported by auth.test for a credential."""
    team_id: str
    team_name: str
    base_url: str
    bot_id: str
    subject_user_id: str | None


@dataclass(frozen=True)
class HistoryMessage:
    """A message from conversations.history."""
    text: str
    user: str | None
    ts: str
    thread_ts: str | None = None
    reply_count: int | None = None


@dataclass(frozen=True)
class HistoryPage:
    messages: list[HistoryMessage] = field(default_factory=list)
    next_cursor: str | None = None


@dataclass(frozen=True)
class ChannelInfo:
    id: str
    name: str
    is_private: bool
    topic: str | None = None


@dataclass(frozen=True)
class ChannelSummary:
    id: str
    name: str
    is_private: bool
    is_member: bool
    purpose: str | None = None


@dataclass(frozen=True)
class Delivered:
    """chat.postMessage succeeded."""
    ts: str
    message_id: str | None = None


def _str_or_none(value) -> str | None:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _failure_from(e: SlackClientError) -> ApiFailure:
    if isinstance(e, SlackApiError):
        error = e.response.get("error") if e.response is not None else None
        return ApiFailure(error=error or "unknown_error", detail=str(e))
    return ApiFailure(error="transport_error", detail=str(e))


class SlackGateway:
    """Slack calls made on behalf of one workspace credential."""

    def __init__(self, token: str, base_url: str | None = None, client: WebClient | None = None):
        if client is None:
            kwargs = {"token": token}
            if base_url:
                kwargs["base_url"] = base_url
            client = WebClient(**kwargs)
        self.client = client

    def verify(self) -> VerifiedIdentity | ApiFailure:
        """Resolve the team and bot behind the credential via auth.test."""
        try:
            response = self.client.auth_test()
        except (SlackClientError, OSError) as e:
            return self._fail("auth.test", e)

        team_id = _str_or_none(response.get("team_id"))
        team_name = _str_or_none(response.get("team"))
        base_url = _str_or_none(response.get("url"))
        bot_id = _str_or_none(response.get("bot_id"))

        missing = [
            name
            for name, value in (("team_id", team_id), ("team", team_name), ("url", base_url), ("bot_id", bot_id))
            if value is None
        ]
        if missing:
            return ApiFailure(error="incomplete_identity", detail=f"auth.test omitted: {', '.join(missing)}")

        if not base_url.endswith("/"):
            base_url += "/"

        return VerifiedIdentity(
            team_id=team_id,
            team_name=team_name,
            base_url=base_url,
            bot_id=bot_id,
            subject_user_id=_str_or_none(response.get("user_id")),
        )

    def list_messages(
        self, channel_id: str, oldest: float, cursor: str | None = None, limit: int = 200
    ) -> HistoryPage | ApiFailure:
        """Fetch one page of channel history newer than ``oldest`` (epoch seconds)."""
        kwargs = {"channel": channel_id, "oldest": f"{oldest:.6f}", "limit": limit}
        if cursor:
            kwargs["cursor"] = cursor

        try:
            response = self.client.conversations_history(**kwargs)
        except (SlackClientError, OSError) as e:
            return self._fail("conversations.history", e)

        messages = []
        for message in response.get("messages") or []:
            ts = _str_or_none(message.get("ts"))
            if ts is None:
                continue
            reply_count = message.get("reply_count")
            messages.append(HistoryMessage(
                text=message.get("text") or "",
                user=_str_or_none(message.get("user")),
                ts=ts,
                thread_ts=_str_or_none(message.get("thread_ts")),
                reply_count=int(reply_count) if reply_count is not None else None,
            ))

        next_cursor = _str_or_none((response.get("response_metadata") or {}).get("next_cursor"))
        return HistoryPage(messages=messages, next_cursor=next_cursor)

    def get_channel(self, channel_id: str) -> ChannelInfo | ApiFailure:
        """Look up a channel via conversations.info."""
        try:
            response = self.client.conversations_info(channel=channel_id)
        except (SlackClientError, OSError) as e:
            return self._fail("conversations.info", e)

        channel = response.get("channel") or {}
        name = _str_or_none(channel.get("name"))
        if name is None:
            return ApiFailure(error="channel_not_found", detail=f"No name for {channel_id}")

        return ChannelInfo(
            id=channel.get("id") or channel_id,
            name=name,
            is_private=bool(channel.get("is_private", False)),
            topic=_str_or_none((channel.get("topic") or {}).get("value")),
        )

    def post_message(self, channel_id: str, text: str, thread_ts: str | None = None) -> Delivered | ApiFailure:
        """Send a message via chat.postMessage."""
        kwargs = {"channel": channel_id, "text": text}
        if thread_ts:
            kwargs["thread_ts"] = thread_ts

        try:
            response = self.client.chat_postMessage(**kwargs)
        except (SlackClientError, OSError) as e:
            return self._fail("chat.postMessage", e)

        ts = _str_or_none(response.get("ts"))
        if ts is None:
            return ApiFailure(error="invalid_response", detail="chat.postMessage returned no ts")

        message = response.get("message") or {}
        return Delivered(ts=ts, message_id=_str_or_none(message.get("client_msg_id")))

    def list_channels(self, kind: str = PUBLIC_CHANNEL, limit: int = 200) -> list[ChannelSummary] | ApiFailure:
        """List non-archived channels of one kind, following cursors up to ``limit``."""
        channels: list[ChannelSummary] = []
        cursor = None

        while True:
            kwargs = {"types": kind, "limit": min(limit, 200), "exclude_archived": True}
            if cursor:
                kwargs["cursor"] = cursor

            try:
                response = self.client.conversations_list(**kwargs)
            except (SlackClientError, OSError) as e:
                return self._fail("conversations.list", e)

            for channel in response.get("channels") or []:
                channel_id = _str_or_none(channel.get("id"))
                if channel_id is None:
                    continue
                channels.append(ChannelSummary(
                    id=channel_id,
                    name=channel.get("name") or channel_id,
                    is_private=bool(channel.get("is_private", kind == PRIVATE_CHANNEL)),
                    is_member=bool(channel.get("is_member", False)),
                    purpose=_str_or_none((channel.get("purpose") or {}).get("value")),
                ))

            cursor = _str_or_none((response.get("response_metadata") or {}).get("next_cursor"))
            if not cursor or len(channels) >= limit:
                break

        return channels[:limit]

    def _fail(self, method: str, e: Exception) -> ApiFailure:
        if isinstance(e, SlackClientError):
            failure = _failure_from(e)
        else:
            failure = ApiFailure(error="transport_error", detail=str(e))
        console.print(f"[red]Slack API error in {method}:[/red] {failure.error}")
        return failure


GatewayFactory = Callable[[str], SlackGateway]


def gateway_factory(base_url: str | None = None) -> GatewayFactory:
    """Build a factory that creates a gateway for a decrypted token."""

    def create(token: str) -> SlackGateway:
        return SlackGateway(token, base_url=base_url)

    return create
