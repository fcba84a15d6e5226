import logging
import random
import time
from typing import Callable, Tuple, Type, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


def retry_with_backoff(
    func: Callable[[], T],
    *,
    retries: int = 3,
    base: float = 0.5,
    cap: float = 5.0,
    jitter: float = 0.25,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Run a callable with exponential backoff and jitter.

    Used by the supervisor to re-probe a freshly launched backend a bounded
    number of times before declaring it unreachable.

    Args:
        func: Callable without args to invoke.
        retries: Maximum retry attempts on a matching exception.
        base: Base delay seconds.
        cap: Maximum backoff seconds.
        jitter: Random jitter added up to this many seconds.
        retry_on: Exception types that trigger another attempt; others propagate.
        sleep: Delay function (tests pass a no-op).

    Returns:
        The function's return value.

    Raises:
        The last exception if all retries are exhausted.
    """
    attempt = 0
    while True:
        try:
            return func()
        except retry_on as e:
            attempt += 1
            if attempt > retries:
                raise
            delay = min(base * (2 ** (attempt - 1)), cap) + random.uniform(0, jitter)
            logger.debug("Attempt %d failed (%s); retrying in %.2fs", attempt, e, delay)
            sleep(delay)
