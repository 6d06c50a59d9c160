"""Slack Web API access."""

from slack_relay.slack.client import (
    ApiFailure,
    ChannelInfo,
    ChannelSummary,
    Delivered,
    GatewayFactory,
    HistoryMessage,
    HistoryPage,
    PRIVATE_CHANNEL,
    PUBLIC_CHANNEL,
    SlackGateway,
    VerifiedIdentity,
    gateway_factory,
)

__all__ = [
    "ApiFailure",
    "ChannelInfo",
    "ChannelSummary",
    "Delivered",
    "GatewayFactory",
    "HistoryMessage",
    "HistoryPage",
    "PRIVATE_CHANNEL",
    "PUBLIC_CHANNEL",
    "SlackGateway",
    "VerifiedIdentity",
    "gateway_factory",
]
