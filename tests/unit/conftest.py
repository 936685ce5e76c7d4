import pytest
from unittest.mock import AsyncMock, MagicMock

from src.adapter.services.memory_cache import InMemoryCache
from tests.fakes import FrozenClock, RecordingNotifier, StubConfig


def _repository(*getters):
    """AsyncMock repository whose lookup methods default to "not found" """
    repo = AsyncMock()
    for getter in getters:
        getattr(repo, getter).return_value = None
    return repo


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.users = _repository("get_by_id", "get_by_email", "get_by_phone", "get_by_username")
    uow.users.create.side_effect = lambda user: user
    uow.users.update.side_effect = lambda user: user

    uow.refresh_tokens = _repository("get_by_id", "get_by_token")
    uow.refresh_tokens.create.side_effect = lambda token: token

    uow.user_sessions = _repository("get_by_id", "get_by_token", "get_by_refresh_token_id")
    uow.user_sessions.create.side_effect = lambda user_session: user_session
    uow.user_sessions.get_active_by_user_id.return_value = []

    uow.roles = _repository("get_by_id", "get_by_name", "get_default")
    uow.roles.get_permissions_by_role_ids.return_value = {}

    uow.user_roles = _repository("get")
    uow.user_roles.get_roles_by_user_id.return_value = []
    uow.user_roles.get_permissions_by_user_id.return_value = []

    uow.auth_events = AsyncMock()
    uow.auth_events.count_failures_since.return_value = 0
    uow.auth_events.get_recent_by_user.return_value = []
    return uow


@pytest.fixture
def config():
    return StubConfig


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def cache(clock):
    return InMemoryCache(clock)


@pytest.fixture
def notifier():
    return RecordingNotifier()
