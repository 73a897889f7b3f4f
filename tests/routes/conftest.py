from unittest.mock import MagicMock

import pytest

from wantok.config import AppConfig, Settings


@pytest.fixture
def request_for(fake_db, queue_config):
    """Build a request whose app state points at the in-memory database."""

    def _build(chat_client=None):
        request = MagicMock()
        request.app.state.cosmos.database = fake_db
        request.app.state.settings = Settings(
            queue=queue_config, app=AppConfig(env="test", log_level="INFO", secret_key="s")
        )
        request.app.state.chat_client = chat_client
        request.app.state.rng = None
        return request

    return _build
