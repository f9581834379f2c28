"""Tests for request-id log correlation."""

import io
import logging

import pytest

from kingplay.api.remote import logger as remote_logger
from kingplay.config import LOG_FORMAT
from kingplay.logging_context import (
    RequestIdFilter,
    get_request_id,
    get_request_logger,
    install_request_id_filter,
    new_request_id,
    set_request_id,
)
from kingplay.store.mirror import logger as mirror_logger


class TestRequestId:
    def test_set_and_get(self):
        set_request_id("REQ-test")
        assert get_request_id() == "REQ-test"

    def test_new_ids_are_distinct(self):
        assert new_request_id() != new_request_id()
        assert new_request_id().startswith("REQ-")

    def test_filter_attached_once(self):
        logger = get_request_logger("kingplay.tests.once")
        get_request_logger("kingplay.tests.once")
        assert sum(isinstance(f, RequestIdFilter) for f in logger.filters) == 1

    def test_filter_stamps_record(self):
        set_request_id("REQ-stamp")
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
        RequestIdFilter().filter(record)
        assert record.request_id == "REQ-stamp"


class TestHandlerFilter:
    @pytest.fixture
    def captured(self):
        logger = logging.getLogger("kingplay.tests.handler")
        logger.propagate = False
        stream = io.StringIO()
        handler = logging.StreamHandler(stream)
        handler.setFormatter(logging.Formatter("[%(request_id)s] %(message)s"))
        logger.addHandler(handler)
        yield logger, stream
        logger.removeHandler(handler)
        logger.propagate = True

    def test_plain_logger_output_carries_request_id(self, captured):
        logger, stream = captured
        install_request_id_filter(logger)
        set_request_id("REQ-handler")
        logger.warning("cache miss")
        assert stream.getvalue().strip() == "[REQ-handler] cache miss"

    def test_install_is_idempotent(self, captured):
        logger, _ = captured
        install_request_id_filter(logger)
        install_request_id_filter(logger)
        handler = logger.handlers[0]
        assert sum(isinstance(f, RequestIdFilter) for f in handler.filters) == 1

    def test_log_format_prints_request_id(self):
        assert "%(request_id)s" in LOG_FORMAT

    def test_remote_and_mirror_loggers_tagged(self):
        for logger in (remote_logger, mirror_logger):
            assert any(isinstance(f, RequestIdFilter) for f in logger.filters)


class TestAccessorLogging:
    @pytest.mark.asyncio
    async def test_fallback_logged_with_request_id(self, offline_api, caplog):
        with caplog.at_level(logging.WARNING, logger="kingplay.api.accessor"):
            await offline_api.get("/plans", [])
        records = [r for r in caplog.records if "[Offline Mode]" in r.getMessage()]
        assert records
        assert records[0].request_id.startswith("REQ-")
