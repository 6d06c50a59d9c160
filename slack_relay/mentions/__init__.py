"""Mention search over channel history."""

from slack_relay.mentions.engine import MentionEngine, MentionHit

__all__ = ["MentionEngine", "MentionHit"]
