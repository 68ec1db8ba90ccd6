"""Retry policy for commands that lose a concurrent cart write."""

import structlog
from protean.exceptions import ExpectedVersionError
from protean.utils.globals import current_domain
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from storefront.errors import StaleCartError

logger = structlog.get_logger(__name__)

# A version clash can also surface when the unit of work commits
STALE_WRITE_ERRORS = (StaleCartError, ExpectedVersionError)


def _log_retry(retry_state):
    logger.warning(
        "stale_cart_retry",
        command=type(retry_state.args[0]).__name__,
        attempt=retry_state.attempt_number,
    )


def stale_cart_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.05, min=0.05, max=0.5),
        retry=retry_if_exception_type(STALE_WRITE_ERRORS),
        before_sleep=_log_retry,
    )


@stale_cart_retry()
def _process(command):
    return current_domain.process(command, asynchronous=False)


def dispatch(command):
    """Process ``command`` synchronously, re-running it when the cart went stale.

    Each attempt reloads the cart inside a fresh unit of work, so a retry
    applies the command to the state that won the race. Blocks between
    attempts, so callers run it off the event loop.
    """
    try:
        return _process(command)
    except ExpectedVersionError as exc:
        raise StaleCartError("Your cart was updated elsewhere, please retry") from exc
