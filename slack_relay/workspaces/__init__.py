"""Workspace registration."""

from slack_relay.workspaces.registry import WorkspaceRegistry

__all__ = ["WorkspaceRegistry"]
