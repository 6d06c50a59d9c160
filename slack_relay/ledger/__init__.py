"""Posting ledger."""

from slack_relay.ledger.posting import PostingLedger

__all__ = ["PostingLedger"]
