"""Error kinds raised by the relay core and the outcome type returned to callers."""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


class RelayError(Exception):
    """Base class for every failure the core reports to its callers."""

    code = "relay_error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.code)
        self.message = message or self.code

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class InvalidArgumentError(RelayError):
    """A request parameter is outside its accepted range."""

    code = "invalid_argument"


class InvalidCredentialError(RelayError):
    """Credential verification was rejected or returned an incomplete identity."""

    code = "invalid_credential"


class IntegrityError(RelayError):
    """A stored credential blob could not be authenticated or decrypted."""

    code = "integrity_error"


class WorkspaceNotFoundError(RelayError):
    """The workspace id is unknown or the workspace is inactive."""

    code = "workspace_not_found"

    def __init__(self, workspace_id: str):
        super().__init__(f"Workspace not found: {workspace_id}")
        self.workspace_id = workspace_id


class UpstreamError(RelayError):
    """A call to Slack or to the database failed."""

    code = "upstream_error"


class DeliveryError(RelayError):
    """Slack refused to deliver a message."""

    code = "delivery_error"

    def __init__(self, platform_error: str, detail: str | None = None):
        super().__init__(f"Failed to post message: {platform_error}")
        self.platform_error = platform_error
        self.detail = detail

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["platform_error"] = self.platform_error
        return data


class ConsistencyWarning(RelayError):
    """A message was delivered but its ledger record could not be written.

    The message exists in Slack; callers must not retry it as a fresh post.
    """

    code = "consistency_warning"

    def __init__(self, workspace_id: str, channel_id: str, message_ts: str, cause: str):
        super().__init__(
            f"Message {message_ts} was posted to {channel_id} but could not be recorded: {cause}"
        )
        self.workspace_id = workspace_id
        self.channel_id = channel_id
        self.message_ts = message_ts

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update(workspace_id=self.workspace_id, channel_id=self.channel_id, message_ts=self.message_ts)
        return data


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Result of a service operation: a value, or the error that prevented it."""

    value: T | None = None
    error: RelayError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: RelayError) -> "Outcome[T]":
        return cls(error=error)

    def unwrap(self) -> T:
        """Return the value, re-raising the error if there is one."""
        if self.error is not None:
            raise self.error
        return self.value
