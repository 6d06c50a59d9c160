"""Workspace registration and lookup."""

from datetime import datetime, timezone
from typing import Callable
from sqlalchemy import exc as sa_exc
from sqlalchemy.orm import Session
from rich.console import Console

from slack_relay.config import OWNER_MODE_CALLER, OWNER_MODE_VERIFIED, OWNER_MODES
from slack_relay.errors import InvalidArgumentError, InvalidCredentialError, WorkspaceNotFoundError
from slack_relay.models import Workspace
from slack_relay.slack import ApiFailure, GatewayFactory, SlackGateway, VerifiedIdentity
from slack_relay.vault import CredentialCipher

console = Console()


class WorkspaceRegistry:
    """Owns workspace rows and the credentials stored in them.

    Every other component resolves a workspace through :meth:`gateway_for`, so an
    unknown or inactive workspace can never fall back to some other credential.
    """

    def __init__(
        self,
        cipher: CredentialCipher,
        gateway_factory: GatewayFactory,
        owner_mode: str = OWNER_MODE_CALLER,
        clock: Callable[[], datetime] | None = None,
    ):
        if owner_mode not in OWNER_MODES:
            raise ValueError(f"Unknown owner mode: {owner_mode!r}")
        self.cipher = cipher
        self.gateway_factory = gateway_factory
        self.owner_mode = owner_mode
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def register(
        self,
        db: Session,
        raw_credential: str,
        owner_user_id: str | None = None,
        description: str | None = None,
    ) -> Workspace:
        """Verify a bot credential and create or update the workspace for its team.

        Registering the same team again updates the existing row (and reactivates
        it) instead of creating a second one.
        """
        raw_credential = (raw_credential or "").strip()
        if not raw_credential:
            raise InvalidArgumentError("A bot credential is required")

        if self.owner_mode == OWNER_MODE_CALLER and not owner_user_id:
            raise InvalidArgumentError("owner_user_id is required to register a workspace")
        if self.owner_mode == OWNER_MODE_VERIFIED and owner_user_id:
            raise InvalidArgumentError("owner_user_id is taken from the verified credential and cannot be supplied")

        identity = self.gateway_factory(raw_credential).verify()
        if isinstance(identity, ApiFailure):
            raise InvalidCredentialError(f"Credential verification failed: {identity.error}")

        owner = owner_user_id if self.owner_mode == OWNER_MODE_CALLER else identity.subject_user_id
        if not owner:
            raise InvalidCredentialError("Verified credential has no subject user to act as owner")

        fields = self._mutable_fields(identity, raw_credential, owner, description)

        workspace = self._find_by_team(db, identity.team_id)
        if workspace is None:
            now = self.clock()
            workspace = Workspace(team_id=identity.team_id, created_at=now, updated_at=now, **fields)
            db.add(workspace)
            try:
                db.commit()
            except sa_exc.IntegrityError:
                # Another request registered this team between our lookup and insert
                db.rollback()
                workspace = self._find_by_team(db, identity.team_id)
                if workspace is None:
                    raise
                self._apply(workspace, fields)
                db.commit()
                console.print(f"[blue]Workspace updated after concurrent insert:[/blue] {workspace.team_name}")
            else:
                console.print(f"[green]✓[/green] Workspace registered: {workspace.team_name} ({workspace.id})")
        else:
            self._apply(workspace, fields)
            db.commit()
            console.print(f"[green]✓[/green] Workspace updated: {workspace.team_name} ({workspace.id})")

        db.refresh(workspace)
        return workspace

    def get(self, db: Session, workspace_id: str, include_inactive: bool = False) -> Workspace:
        """Get a workspace by id. Inactive workspaces count as missing unless asked for."""
        query = db.query(Workspace).filter(Workspace.id == workspace_id)
        if not include_inactive:
            query = query.filter(Workspace.is_active.is_(True))
        workspace = query.first()
        if workspace is None:
            raise WorkspaceNotFoundError(workspace_id)
        return workspace

    def list(self, db: Session, owner_user_id: str | None = None, active_only: bool = True) -> list[Workspace]:
        """List workspaces, most recently created first."""
        query = db.query(Workspace)
        if owner_user_id is not None:
            query = query.filter(Workspace.owner_user_id == owner_user_id)
        if active_only:
            query = query.filter(Workspace.is_active.is_(True))
        return query.order_by(Workspace.created_at.desc(), Workspace.id.desc()).all()

    def deactivate(self, db: Session, workspace_id: str) -> Workspace:
        """Soft-delete a workspace. Its ledger rows are kept but no longer reachable."""
        workspace = self.get(db, workspace_id, include_inactive=True)
        if workspace.is_active:
            workspace.is_active = False
            workspace.updated_at = self.clock()
            db.commit()
            console.print(f"[yellow]Workspace deactivated:[/yellow] {workspace.team_name} ({workspace.id})")
        return workspace

    def credential_for(self, workspace: Workspace) -> str:
        """Decrypt a workspace's bot credential. Raises IntegrityError if it is corrupt."""
        return self.cipher.decrypt(workspace.encrypted_token)

    def gateway_for(self, db: Session, workspace_id: str) -> tuple[Workspace, SlackGateway]:
        """Resolve an active workspace and a Slack gateway authorised as its bot."""
        workspace = self.get(db, workspace_id)
        return workspace, self.gateway_factory(self.credential_for(workspace))

    def _find_by_team(self, db: Session, team_id: str) -> Workspace | None:
        return db.query(Workspace).filter(Workspace.team_id == team_id).first()

    def _mutable_fields(self, identity: VerifiedIdentity, raw_credential: str, owner: str, description: str | None) -> dict:
        return {
            "team_name": identity.team_name,
            "workspace_url": identity.base_url,
            "encrypted_token": self.cipher.encrypt(raw_credential),
            "owner_user_id": owner,
            "bot_id": identity.bot_id,
            "bot_user_id": identity.subject_user_id,
            "description": description or None,
        }

    def _apply(self, workspace: Workspace, fields: dict):
        for name, value in fields.items():
            setattr(workspace, name, value)
        workspace.is_active = True
        workspace.updated_at = self.clock()
