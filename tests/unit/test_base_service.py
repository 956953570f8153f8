from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy.exc import OperationalError

from freelance_booking.core.exceptions import RepositoryException
from freelance_booking.monitoring.prometheus_metrics import REGISTRY
from freelance_booking.services import base as base_module
from freelance_booking.services.base import BaseService


class _SampleService(BaseService):
    @BaseService.measure_operation("do_work")
    def do_work(self, fail: bool = False) -> str:
        if fail:
            raise ValueError("nope")
        return "done"


def _operations_total(operation: str, status: str) -> float:
    value = REGISTRY.get_sample_value(
        "freelance_booking_service_operations_total",
        {"service": "_SampleService", "operation": operation, "status": status},
    )
    return value or 0.0


def test_measure_operation_records_success_and_failure() -> None:
    service = _SampleService(MagicMock())
    before_ok = _operations_total("do_work", "success")
    before_err = _operations_total("do_work", "error")

    assert service.do_work() == "done"
    with pytest.raises(ValueError):
        service.do_work(fail=True)

    assert _operations_total("do_work", "success") == before_ok + 1
    assert _operations_total("do_work", "error") == before_err + 1
    errors = REGISTRY.get_sample_value(
        "freelance_booking_errors_total",
        {"service": "_SampleService", "operation": "do_work", "error_type": "ValueError"},
    )
    assert errors is not None and errors >= 1
    observed = REGISTRY.get_sample_value(
        "freelance_booking_service_operation_duration_seconds_count",
        {"service": "_SampleService", "operation": "do_work"},
    )
    assert observed is not None and observed >= 2


def test_slow_operations_are_logged(caplog) -> None:
    service = _SampleService(MagicMock())
    readings = [100.0, 102.5]

    def fake_time() -> float:
        return readings.pop(0) if len(readings) > 1 else readings[0]

    with patch.object(base_module.time, "time", side_effect=fake_time):
        with caplog.at_level("WARNING"):
            service.do_work()

    assert "Slow operation detected: do_work took 2.50s" in caplog.text


def test_metrics_failure_does_not_break_operation() -> None:
    service = _SampleService(MagicMock())

    with patch.object(
        base_module.prometheus_metrics,
        "record_service_operation",
        side_effect=RuntimeError("registry gone"),
    ):
        assert service.do_work() == "done"


def test_transaction_commits() -> None:
    db = MagicMock()
    service = _SampleService(db)

    with service.transaction():
        pass

    db.commit.assert_called_once()
    db.rollback.assert_not_called()


def test_transaction_wraps_database_errors() -> None:
    db = MagicMock()
    service = _SampleService(db)

    with pytest.raises(RepositoryException):
        with service.transaction():
            raise OperationalError("UPDATE bookings", {}, Exception("connection lost"))

    db.rollback.assert_called_once()
    db.commit.assert_not_called()


def test_transaction_reraises_domain_errors() -> None:
    db = MagicMock()
    service = _SampleService(db)

    with pytest.raises(KeyError):
        with service.transaction():
            raise KeyError("x")

    db.rollback.assert_called_once()
