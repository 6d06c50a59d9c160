"""Multi-tenant Slack relay with encrypted credentials and a posting ledger."""

from slack_relay.errors import Outcome
from slack_relay.service import RelayService

__all__ = ["Outcome", "RelayService"]
