"""DatabaseSessionManager — sessions roll back and surface a plain StorageError."""

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from chatroom.core.errors import DuplicateKeyError, StorageError
from chatroom.infrastructure.database import DatabaseSessionManager


@pytest.fixture
def manager(test_engine, test_session_factory):
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = test_engine
    manager._session_factory = test_session_factory
    return manager


@pytest.mark.parametrize(
    "exc",
    [
        IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed")),
        OperationalError("SELECT", {}, Exception("database is locked")),
    ],
)
async def test_session_maps_sqlalchemy_errors_to_storage_error(manager, exc):
    with pytest.raises(StorageError) as exc_info:
        async with manager.session():
            raise exc

    assert not isinstance(exc_info.value, DuplicateKeyError)
    assert exc_info.value.operation == "session"
    assert exc_info.value.__cause__ is exc


async def test_health_check(manager):
    assert await manager.health_check() is True
