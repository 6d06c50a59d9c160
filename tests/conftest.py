"""
Shared fixtures: in-memory database, fake Slack, ticking clock, wired service.
"""

import pytest

from slack_relay.config import Settings
from slack_relay.models import create_db_engine, create_session_factory, init_db
from slack_relay.service import RelayService
from slack_relay.slack import ChannelInfo
from slack_relay.vault import CredentialCipher
from slack_relay.workspaces import WorkspaceRegistry

from tests.fakes import ENCRYPTION_KEY, FakeSlack, TickingClock, identity


@pytest.fixture
def slack():
    fake = FakeSlack()
    fake.identities["xoxb-acme"] = identity()
    fake.channel_info["C1"] = ChannelInfo(id="C1", name="general", is_private=False)
    fake.channel_info["CA"] = ChannelInfo(id="CA", name="alpha", is_private=False)
    fake.channel_info["CB"] = ChannelInfo(id="CB", name="beta", is_private=False)
    return fake


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def cipher():
    return CredentialCipher(ENCRYPTION_KEY)


@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite://",
        encryption_key=ENCRYPTION_KEY,
        owner_mode="caller",
        slack_api_url="https://slack.com/api/",
        history_page_size=200,
        mention_scan_limit=1000,
    )


@pytest.fixture
def session_factory():
    engine = create_db_engine("sqlite://")
    init_db(engine)
    yield create_session_factory(engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def registry(cipher, slack, clock):
    return WorkspaceRegistry(cipher, slack.factory, owner_mode="caller", clock=clock)


@pytest.fixture
def service(session_factory, cipher, slack, settings, clock):
    return RelayService(
        session_factory=session_factory,
        cipher=cipher,
        gateway_factory=slack.factory,
        settings=settings,
        clock=clock,
    )
