"""

서비스 예외 → 상태 코드 / 메시지 규칙 테스트.

"""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError, TimeoutError as PoolTimeoutError

from clubreg.core.errors import (
    ConflictError,
    StorageError,
    UpstreamTimeoutError,
    ValidationError,
    client_message,
    storage_errors,
)


def test_client_message_hides_internal_details():
    assert client_message(ValidationError("Missing required fields: name")) == "Missing required fields: name"
    assert client_message(StorageError("Database error during submit application")) == "Storage error"
    assert client_message(UpstreamTimeoutError("pool exhausted on db-3")) == "Storage timeout"


def test_storage_errors_wraps_driver_errors():
    db = MagicMock()
    with pytest.raises(StorageError) as exc:
        with storage_errors(db, "list applications"):
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))
    assert exc.value.status_code == 500
    assert "connection refused" not in client_message(exc.value)
    db.rollback.assert_called_once()


def test_storage_errors_maps_pool_timeout():
    db = MagicMock()
    with pytest.raises(UpstreamTimeoutError) as exc:
        with storage_errors(db, "sign in"):
            raise PoolTimeoutError("QueuePool limit reached")
    assert exc.value.status_code == 504


def test_storage_errors_passes_service_errors_through():
    db = MagicMock()
    with pytest.raises(ConflictError):
        with storage_errors(db, "sign up"):
            raise ConflictError("Email already registered")
    db.rollback.assert_called_once()


def test_storage_errors_maps_lock_timeout():
    db = MagicMock()
    with pytest.raises(UpstreamTimeoutError):
        with storage_errors(db, "submit application"):
            raise OperationalError("INSERT", {}, Exception("database is locked"))
    db.rollback.assert_called_once()
