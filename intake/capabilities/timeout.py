from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from typing import TypeVar

from intake.capabilities.exceptions import CapabilityTimeout

T = TypeVar("T")


def call_with_timeout(
    func: Callable[..., T],
    timeout_seconds: float,
    *args: object,
    **kwargs: object,
) -> T:
    """Run a blocking capability call, giving up after *timeout_seconds*.

    An abandoned call keeps running on its worker thread and its result is
    discarded.

    Raises:
        CapabilityTimeout: if the call did not finish in time.
    """
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="capability")
    future = executor.submit(func, *args, **kwargs)
    try:
        return future.result(timeout=timeout_seconds)
    except FuturesTimeoutError as exc:
        future.cancel()
        raise CapabilityTimeout(
            f"{getattr(func, '__qualname__', func)} timed out after {timeout_seconds}s"
        ) from exc
    finally:
        executor.shutdown(wait=False)
