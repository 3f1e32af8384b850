"""Tests for core.retry module."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from lark_client.core.config import RetryPolicyConfig
from lark_client.core.exceptions import (
    AccessTokenExpiredError,
    InternalError,
    ResponseError,
    ServerError,
    TransportTimeoutError,
)
from lark_client.core.retry import RetryPolicy


class TestDelays:
    """Tests for the backoff schedule."""

    def test_default_schedule(self) -> None:
        assert RetryPolicy().delays() == [0.5, 1.0, 2.0, 3.0]

    def test_schedule_is_capped_and_non_decreasing(self) -> None:
        policy = RetryPolicy(
            RetryPolicyConfig(
                max_attempts=8,
                backoff_seconds=0.5,
                backoff_multiplier=3.0,
                max_backoff_seconds=3.0,
            )
        )

        delays = policy.delays()

        assert len(delays) == 7
        assert max(delays) == 3.0
        assert delays == sorted(delays)

    def test_single_attempt_has_no_delays(self) -> None:
        assert RetryPolicy(RetryPolicyConfig(max_attempts=1)).delays() == []


class TestCall:
    """Tests for RetryPolicy.call."""

    def test_returns_first_success(self, sleeps) -> None:
        policy = RetryPolicy(sleep=sleeps.append)
        attempt_fn = MagicMock(return_value="ok")

        assert policy.call(attempt_fn) == "ok"
        attempt_fn.assert_called_once_with(1)
        assert sleeps == []

    @pytest.mark.parametrize(
        "error",
        [
            InternalError(2200, "internal"),
            ServerError(503),
            TransportTimeoutError("timed out"),
        ],
    )
    def test_retries_transient_errors_until_success(self, sleeps, error) -> None:
        policy = RetryPolicy(sleep=sleeps.append)
        attempt_fn = MagicMock(side_effect=[error, error, "ok"])

        assert policy.call(attempt_fn) == "ok"
        assert [call.args[0] for call in attempt_fn.call_args_list] == [1, 2, 3]
        assert sleeps == [0.5, 1.0]

    def test_exhausting_attempts_reraises_last_error(self, sleeps) -> None:
        policy = RetryPolicy(sleep=sleeps.append)
        errors = [ServerError(500 + i) for i in range(5)]
        attempt_fn = MagicMock(side_effect=errors)

        with pytest.raises(ServerError) as exc_info:
            policy.call(attempt_fn)

        assert exc_info.value is errors[-1]
        assert attempt_fn.call_count == 5
        assert sleeps == [0.5, 1.0, 2.0, 3.0]

    @pytest.mark.parametrize(
        "error",
        [
            AccessTokenExpiredError(99991663, "expired"),
            ResponseError(400, "bad request"),
            ValueError("unexpected"),
        ],
    )
    def test_fatal_errors_are_not_retried(self, sleeps, error) -> None:
        policy = RetryPolicy(sleep=sleeps.append)
        attempt_fn = MagicMock(side_effect=error)

        with pytest.raises(type(error)):
            policy.call(attempt_fn)

        attempt_fn.assert_called_once_with(1)
        assert sleeps == []

    def test_custom_retry_on(self, sleeps) -> None:
        policy = RetryPolicy(
            RetryPolicyConfig(max_attempts=2),
            retry_on=(KeyError,),
            sleep=sleeps.append,
        )
        attempt_fn = MagicMock(side_effect=[KeyError("x"), "ok"])

        assert policy.call(attempt_fn) == "ok"
        assert sleeps == [0.5]
