"""Channel listing."""

from slack_relay.channels.directory import ChannelDirectory

__all__ = ["ChannelDirectory"]
