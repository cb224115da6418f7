"""Tests for the backoff policy and retry decorator."""
import pytest

from autoapply.retry import RetryPolicy, retry


class Flaky:
    def __init__(self, failures, exc=ConnectionError):
        self.failures = failures
        self.exc = exc
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.exc(f"boom {self.calls}")
        return "ok"


class TestRetryPolicy:
    def test_exponential_delays_are_capped(self):
        policy = RetryPolicy(base_delay=1.0, max_delay=5.0, jitter=False)
        assert [policy.delay_for(n) for n in (1, 2, 3, 4)] == [1.0, 2.0, 4.0, 5.0]

    def test_jitter_stays_within_half_to_one_and_a_half(self):
        policy = RetryPolicy(base_delay=2.0, jitter=True)
        for _ in range(20):
            assert 1.0 <= policy.delay_for(1) <= 3.0


class TestRetry:
    def test_succeeds_after_transient_failures(self):
        slept = []
        fn = retry(RetryPolicy(max_attempts=3, jitter=False), sleep=slept.append)(Flaky(2))

        assert fn() == "ok"
        assert slept == [1.0, 2.0]

    def test_reraises_after_last_attempt(self):
        flaky = Flaky(5)
        fn = retry(RetryPolicy(max_attempts=3), sleep=lambda s: None)(flaky)

        with pytest.raises(ConnectionError, match="boom 3"):
            fn()
        assert flaky.calls == 3

    def test_give_up_stops_immediately(self):
        flaky = Flaky(5, exc=PermissionError)
        fn = retry(give_up=lambda exc: isinstance(exc, PermissionError), sleep=lambda s: None)(flaky)

        with pytest.raises(PermissionError):
            fn()
        assert flaky.calls == 1

    def test_non_retryable_errors_pass_through(self):
        flaky = Flaky(1, exc=KeyError)
        fn = retry(retryable=(ConnectionError,), sleep=lambda s: None)(flaky)

        with pytest.raises(KeyError):
            fn()
        assert flaky.calls == 1
