import threading

import pytest

from intake.capabilities.exceptions import CapabilityTimeout
from intake.capabilities.timeout import call_with_timeout


class TestCallWithTimeout:
    def test_returns_result(self) -> None:
        assert call_with_timeout(lambda a, b: a + b, 1.0, 2, b=3) == 5

    def test_propagates_exceptions(self) -> None:
        def _boom() -> None:
            raise ValueError("bad input")

        with pytest.raises(ValueError, match="bad input"):
            call_with_timeout(_boom, 1.0)

    def test_raises_capability_timeout(self) -> None:
        release = threading.Event()
        try:
            with pytest.raises(CapabilityTimeout, match="timed out"):
                call_with_timeout(release.wait, 0.05, 5)
        finally:
            release.set()
