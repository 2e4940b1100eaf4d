"""
Unit Tests for the shared logger
"""

import json
import logging

from app.core.shared.logger import (
    ColoredFormatter,
    JSONFormatter,
    get_repository_logger,
    get_service_logger,
)


def _record(context=None) -> logging.LogRecord:
    record = logging.LogRecord("service.payment", logging.INFO, __file__, 10, "Payment approved", None, None)
    if context is not None:
        record.context = context
    return record


class TestContextLogger:
    def test_context_is_merged_into_records(self, caplog):
        log = get_service_logger("payment").with_context(user_id="customer-42")

        with caplog.at_level(logging.INFO, logger="service.payment"):
            log.info("Gateway approved payment", transaction_id="tx-1")

        (record,) = caplog.records
        assert record.context == {
            "component": "service",
            "service": "payment",
            "user_id": "customer-42",
            "transaction_id": "tx-1",
        }

    def test_with_context_does_not_mutate_parent(self):
        parent = get_repository_logger("order")

        parent.with_context(order_id="o-1")

        assert parent.context == {"component": "repository", "repository": "order"}
        assert parent.name == "repository.order"


class TestFormatters:
    def test_json_formatter_includes_context(self):
        payload = json.loads(JSONFormatter().format(_record({"order_id": "o-1"})))

        assert payload["message"] == "Payment approved"
        assert payload["level"] == "INFO"
        assert payload["context"] == {"order_id": "o-1"}

    def test_colored_formatter_appends_context_and_restores_level(self):
        record = _record({"order_id": "o-1"})

        line = ColoredFormatter("%(levelname)s %(message)s").format(record)

        assert line.endswith("Payment approved | order_id=o-1")
        assert record.levelname == "INFO"
