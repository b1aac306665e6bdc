"""
Handler instrumentation

`logged_handler` wraps the `handle` coroutine of every command/query handler:

- logs start and finish with a short request id
- measures elapsed time and warns above SLOW_REQUEST_THRESHOLD_MS
- logs failed Results as warnings
- turns unexpected exceptions into failed Results, so handlers never raise

Cancellation is not an Exception and propagates untouched.
"""
import functools
import logging
import time
import uuid

from bakery.core.config import settings
from bakery.core.result import Result
from bakery.repositories.unit_of_work import TransactionError

logger = logging.getLogger(__name__)


def logged_handler(handle):
    @functools.wraps(handle)
    async def wrapper(self, *args, **kwargs):
        handler_name = type(self).__name__
        request_id = uuid.uuid4().hex[:8]
        started = time.perf_counter()
        logger.info(f"Handling {handler_name} [{request_id}]")

        try:
            result = await handle(self, *args, **kwargs)
        except TransactionError as e:
            logger.error(f"{handler_name} [{request_id}] transaction failed: {e}")
            result = Result.failure(e.error)
        except Exception as e:
            logger.error(f"{handler_name} [{request_id}] failed: {e}", exc_info=True)
            result = Result.from_exception(e)

        elapsed_ms = (time.perf_counter() - started) * 1000
        if result.is_failure:
            logger.warning(f"{handler_name} [{request_id}] returned {result.error} in {elapsed_ms:.0f}ms")
        else:
            logger.info(f"Handled {handler_name} [{request_id}] in {elapsed_ms:.0f}ms")
        if elapsed_ms > settings.SLOW_REQUEST_THRESHOLD_MS:
            logger.warning(
                f"Slow request: {handler_name} [{request_id}] took {elapsed_ms:.0f}ms "
                f"(threshold {settings.SLOW_REQUEST_THRESHOLD_MS}ms)"
            )
        return result

    return wrapper
