import pytest

from tunebridge.core.retry import retry_with_backoff


def test_retries_until_success():
    calls = []
    delays = []

    def flaky():
        calls.append(1)
        if len(calls) < 3:
            raise ConnectionError("not yet")
        return "up"

    assert retry_with_backoff(flaky, retries=3, base=0.5, cap=5.0, jitter=0.0, sleep=delays.append) == "up"
    assert delays == [0.5, 1.0]


def test_gives_up_after_retries():
    delays = []

    def down():
        raise ConnectionError("down")

    with pytest.raises(ConnectionError):
        retry_with_backoff(down, retries=2, base=1.0, cap=1.5, jitter=0.0, sleep=delays.append)
    assert delays == [1.0, 1.5]


def test_unlisted_exceptions_propagate_immediately():
    delays = []

    def broken():
        raise ValueError("bug")

    with pytest.raises(ValueError):
        retry_with_backoff(broken, retry_on=(ConnectionError,), sleep=delays.append)
    assert delays == []
