import pytest

import app as chat_app
from session.context import ChatSession


@pytest.fixture
def chat():
    return ChatSession()


@pytest.fixture
def client():
    chat_app.app.config.update(TESTING=True)
    chat_app.SESSION_CONTEXTS.clear()
    with chat_app.app.test_client() as test_client:
        yield test_client
    chat_app.SESSION_CONTEXTS.clear()


@pytest.fixture
def fixed_key(monkeypatch):
    """Make the encryptor deterministic: key bytes are 0x01, 0x02, ..."""
    def _key(length):
        return bytes((i % 255) + 1 for i in range(length))

    monkeypatch.setattr("modes.transforms.random_key", _key)
    return _key
