"""
Tests for the logged_handler decorator
"""
import asyncio
import logging
from unittest.mock import patch

import pytest

from bakery.core.errors import Error, ErrorKind
from bakery.core.result import Result
from bakery.repositories.unit_of_work import TransactionError
from bakery.services.instrumentation import logged_handler


class EchoHandler:

    @logged_handler
    async def handle(self, value):
        return Result.success(value)


class FailingHandler:

    @logged_handler
    async def handle(self):
        return Result.failure(Error.not_found("nothing here"))


class ExplodingHandler:

    def __init__(self, exc):
        self.exc = exc

    @logged_handler
    async def handle(self):
        raise self.exc


class TestLoggedHandler:

    async def test_passes_result_through(self, caplog):
        with caplog.at_level(logging.INFO, logger="bakery.services.instrumentation"):
            result = await EchoHandler().handle(7)

        assert result.value == 7
        assert "Handling EchoHandler" in caplog.text
        assert "Handled EchoHandler" in caplog.text

    async def test_logs_failures_as_warnings(self, caplog):
        with caplog.at_level(logging.INFO, logger="bakery.services.instrumentation"):
            result = await FailingHandler().handle()

        assert result.error.kind == ErrorKind.NOT_FOUND
        assert any(r.levelno == logging.WARNING and "NotFound" in r.getMessage() for r in caplog.records)

    async def test_exceptions_become_failures(self):
        result = await ExplodingHandler(ValueError("bad value")).handle()

        assert result.error.kind == ErrorKind.ARGUMENT_ERROR
        assert result.error.message == "bad value"

    async def test_transaction_errors_keep_their_error(self):
        error = Error.invalid_operation("Transaction already in progress")

        result = await ExplodingHandler(TransactionError(error)).handle()

        assert result.error == error

    async def test_cancellation_propagates(self):
        with pytest.raises(asyncio.CancelledError):
            await ExplodingHandler(asyncio.CancelledError()).handle()

    async def test_slow_requests_warn(self, caplog):
        with patch("bakery.services.instrumentation.settings") as mock_settings:
            mock_settings.SLOW_REQUEST_THRESHOLD_MS = -1
            with caplog.at_level(logging.WARNING, logger="bakery.services.instrumentation"):
                await EchoHandler().handle(1)

        assert "Slow request: EchoHandler" in caplog.text
