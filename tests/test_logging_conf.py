import json
import logging

from cryptotrack.logging_conf import JsonFormatter, setup_logging


def test_json_formatter_emits_one_object_with_extras():
    record = logging.LogRecord("cryptotrack.market", logging.ERROR, __file__, 10, "Error fetching %s", ("coins",), None)
    record.resource = "coins"
    record.status_code = 503

    payload = json.loads(JsonFormatter().format(record))

    assert payload["level"] == "ERROR"
    assert payload["logger"] == "cryptotrack.market"
    assert payload["message"] == "Error fetching coins"
    assert payload["resource"] == "coins"
    assert payload["status_code"] == 503


def test_setup_logging_configures_service_loggers():
    setup_logging("debug")
    try:
        logger = logging.getLogger("cryptotrack")
        assert logger.level == logging.DEBUG
        assert logger.propagate is False
        assert isinstance(logger.handlers[0].formatter, JsonFormatter)
        assert logging.getLogger("uvicorn.access").level == logging.WARNING
    finally:
        setup_logging("INFO")
