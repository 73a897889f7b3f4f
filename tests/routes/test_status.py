"""Tests for the status and admin routes."""

from wantok.models.user import Role, User
from wantok.routes.admin import import_corpus
from wantok.routes.status import queue_status


async def test_import_then_status(request_for):
    request = request_for()
    admin = User(id="admin", name="Admin", role=Role.ADMIN)

    result = await import_corpus(
        request,
        admin,
        [{"id": 1, "english": "Good morning"}, {"id": 2, "english": "Good night"}, {"english": "no id"}],
        "pilot",
    )
    status = await queue_status(request)

    assert result.received == 3
    assert result.created == 2
    assert status.environment == "test"
    assert status.sentences["open"] == 2
