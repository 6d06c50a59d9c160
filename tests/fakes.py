"""
In-memory stand-ins for Slack and the clock.
"""

from datetime import datetime, timedelta, timezone

from slack_relay.slack import (
    PRIVATE_CHANNEL,
    PUBLIC_CHANNEL,
    ApiFailure,
    Delivered,
    HistoryMessage,
    HistoryPage,
    VerifiedIdentity,
)

ENCRYPTION_KEY = "test-encryption-key-0123456789abcdef"
NOW = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)


def identity(team_id="T1", team_name="Acme", base_url="https://acme.slack.com/", bot_id="B1", subject="UBOT1"):
    return VerifiedIdentity(
        team_id=team_id,
        team_name=team_name,
        base_url=base_url,
        bot_id=bot_id,
        subject_user_id=subject,
    )


def message(text, minutes_ago, user="U9", **extra):
    ts = f"{(NOW - timedelta(minutes=minutes_ago)).timestamp():.6f}"
    return HistoryMessage(text=text, user=user, ts=ts, **extra)


class TickingClock:
    """Starts at NOW and advances one second per call."""

    def __init__(self, start=NOW):
        self.current = start

    def __call__(self):
        value = self.current
        self.current += timedelta(seconds=1)
        return value


class FakeSlack:
    """In-memory Slack shared by every gateway the factory creates."""

    def __init__(self):
        self.identities = {}
        self.history_pages = {}
        self.history_failure = None
        self.channel_info = {}
        self.channel_lists = {PUBLIC_CHANNEL: [], PRIVATE_CHANNEL: []}
        self.list_failure = None
        self.post_failure = None
        self.posted = []
        self.calls = []
        self.tokens = []
        self._ts = 1760000000

    def factory(self, token):
        self.tokens.append(token)
        return FakeGateway(self, token)

    def set_history(self, channel_id, *pages):
        self.history_pages[channel_id] = [list(page) for page in pages]


class FakeGateway:
    def __init__(self, slack: FakeSlack, token: str):
        self.slack = slack
        self.token = token

    def verify(self):
        self.slack.calls.append(("verify", self.token))
        return self.slack.identities.get(self.token, ApiFailure(error="invalid_auth"))

    def list_messages(self, channel_id, oldest, cursor=None, limit=200):
        self.slack.calls.append(("list_messages", channel_id, oldest, cursor))
        if self.slack.history_failure:
            return ApiFailure(error=self.slack.history_failure)
        pages = self.slack.history_pages.get(channel_id, [[]])
        index = int(cursor) if cursor else 0
        messages = [m for m in pages[index] if float(m.ts) >= oldest]
        next_cursor = str(index + 1) if index + 1 < len(pages) else None
        return HistoryPage(messages=messages, next_cursor=next_cursor)

    def get_channel(self, channel_id):
        self.slack.calls.append(("get_channel", channel_id))
        info = self.slack.channel_info.get(channel_id)
        if info is None:
            return ApiFailure(error="channel_not_found")
        return info

    def post_message(self, channel_id, text, thread_ts=None):
        self.slack.calls.append(("post_message", channel_id, text, thread_ts))
        if self.slack.post_failure:
            return ApiFailure(error=self.slack.post_failure)
        self.slack._ts += 1
        ts = f"{self.slack._ts}.000100"
        self.slack.posted.append((self.token, channel_id, text, thread_ts, ts))
        return Delivered(ts=ts, message_id=f"msg-{self.slack._ts}")

    def list_channels(self, kind=PUBLIC_CHANNEL, limit=200):
        self.slack.calls.append(("list_channels", kind, limit))
        if self.slack.list_failure:
            return ApiFailure(error=self.slack.list_failure)
        return list(self.slack.channel_lists[kind])[:limit]
