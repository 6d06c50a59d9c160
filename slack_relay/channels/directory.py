"""List the channels a workspace's bot can see."""

from sqlalchemy.orm import Session

from slack_relay.errors import InvalidArgumentError, UpstreamError
from slack_relay.slack import ApiFailure, ChannelSummary, PRIVATE_CHANNEL, PUBLIC_CHANNEL
from slack_relay.workspaces import WorkspaceRegistry

MIN_LIMIT, MAX_LIMIT = 1, 1000


class ChannelDirectory:
    def __init__(self, registry: WorkspaceRegistry):
        self.registry = registry

    def list_channels(
        self,
        db: Session,
        workspace_id: str,
        limit: int = 50,
        include_private: bool = False,
    ) -> list[ChannelSummary]:
        """Public channels first, then private ones if requested, up to ``limit`` in total."""
        if not MIN_LIMIT <= limit <= MAX_LIMIT:
            raise InvalidArgumentError(f"limit must be between {MIN_LIMIT} and {MAX_LIMIT}")

        _, gateway = self.registry.gateway_for(db, workspace_id)

        kinds = [PUBLIC_CHANNEL, PRIVATE_CHANNEL] if include_private else [PUBLIC_CHANNEL]
        channels: list[ChannelSummary] = []
        for kind in kinds:
            result = gateway.list_channels(kind, limit=limit)
            if isinstance(result, ApiFailure):
                raise UpstreamError(f"Failed to list {kind} channels: {result.error}")
            channels.extend(result)

        return channels[:limit]
